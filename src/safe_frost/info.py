"""
Read-only rendering of the public key and aggregate signature, either for
people or ABI encoded as a hex string for Foundry's `ffi` cheatcode.
"""

from . import abi, hexutil
from .address import Address
from .aggregator import Signature
from .evm import is_supported
from .keys import PublicKeyPackage
from .root import Artifact, Root


def _load_public_key(root: Root) -> PublicKeyPackage:
    return PublicKeyPackage.deserialize(root.path_for(Artifact.PUBLIC_KEY).read_bytes())


def public_key(root: Root, abi_encode: bool = False) -> str:
    """
    Describe the group public key: its address, its coordinates and whether
    the EVM verifier supports it. ABI encoded, the address word is followed
    by the point.
    """
    key = _load_public_key(root).verifying_key
    address = Address.from_key(key)

    if abi_encode:
        return hexutil.encode(abi.address(address) + abi.point(key))

    return "\n".join(
        (
            f"address:    {address}",
            f"public key: {key}",
            f"evm:        {'supported' if is_supported(key) else 'unsupported'}",
        )
    )


def signature(root: Root, with_public_key: bool = False, abi_encode: bool = False) -> str:
    """
    Describe the aggregate signature (R, z), optionally preceded by the
    group public key.
    """
    sig = Signature.deserialize(root.path_for(Artifact.SIGNATURE).read_bytes())
    key = _load_public_key(root).verifying_key if with_public_key else None

    if abi_encode:
        encoded = abi.point(key) if key is not None else b""
        return hexutil.encode(encoded + abi.point(sig.R) + abi.scalar(sig.z))

    lines = []
    if key is not None:
        lines.append(f"public key: {key}")
    lines.append(f"R: {sig.R}")
    lines.append(f"z: 0x{sig.z:064x}")
    return "\n".join(lines)
