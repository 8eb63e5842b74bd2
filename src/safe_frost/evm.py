"""
Compatibility of FROST(secp256k1, SHA-256) public keys with the EVM verifier.

The on-chain verifier abuses the `ecrecover` precompile to compute the
point operation `-z⋅G + c⋅Y`, passing the public key's x-coordinate as the
ECDSA signature `r` value. Public keys whose x-coordinate is greater than or
equal to the curve order cannot be expressed this way: ECDSA `r` values are
scalars, and `ecrecover` has no recovery id for `R.x = r + n`.
"""

from typing import Union
from .errors import DeserializationError, NotSupported
from .keys import PublicKeyPackage
from .point import Point
from .serialization import deserialize_scalar


def _verifying_key(key: Union[Point, PublicKeyPackage]) -> Point:
    if isinstance(key, PublicKeyPackage):
        return key.verifying_key
    return key


def verified_public_key(key: Union[Point, PublicKeyPackage]) -> Point:
    """
    Return the verifying key if the EVM verifier supports it.

    Raises:
    NotSupported: If the key's x-coordinate is not a canonical scalar.
    """
    verifying_key = _verifying_key(key)
    try:
        x = verifying_key.sec_serialize()[1:]
    except ValueError as e:
        raise NotSupported("public key is the point at infinity") from e
    try:
        deserialize_scalar(x)
    except DeserializationError as e:
        raise NotSupported() from e
    return verifying_key


def is_supported(key: Union[Point, PublicKeyPackage]) -> bool:
    """Whether the EVM verifier can verify signatures for the public key."""
    try:
        verified_public_key(key)
    except NotSupported:
        return False
    return True
