"""
This module defines the key material of a FROST signing group and the
trusted dealer that produces it.

A dealer splits a secret key into `max_signers` shares of a polynomial of
degree `min_signers - 1` (Shamir secret sharing). Each signer receives a
KeyPackage holding its secret signing share, while the PublicKeyPackage
holds the group's verifying key and every signer's public verifying share.
"""

from __future__ import annotations
import secrets
from typing import Dict, Optional, Tuple
from .constants import Q
from .point import Point, G
from .serialization import Reader, Writer


class KeyPackage:
    """A signer's secret share of the group signing key."""

    def __init__(
        self,
        identifier: int,
        signing_share: int,
        verifying_share: Point,
        verifying_key: Point,
        min_signers: int,
    ):
        self.identifier = identifier
        self.signing_share = signing_share
        self.verifying_share = verifying_share
        self.verifying_key = verifying_key
        self.min_signers = min_signers

    def serialize(self) -> bytes:
        return (
            Writer()
            .identifier(self.identifier)
            .scalar(self.signing_share)
            .point(self.verifying_share)
            .point(self.verifying_key)
            .varint(self.min_signers)
            .getvalue()
        )

    @classmethod
    def deserialize(cls, data: bytes) -> KeyPackage:
        reader = Reader(data, kind="key package")
        package = cls(
            identifier=reader.identifier(),
            signing_share=reader.scalar(),
            verifying_share=reader.point(),
            verifying_key=reader.point(),
            min_signers=reader.varint(),
        )
        reader.finish()
        return package


class PublicKeyPackage:
    """
    The group verifying key and the verifying shares of all signers.

    The threshold is optional: packages written without it end right after
    the verifying key and deserialize with `min_signers` set to None.
    """

    def __init__(
        self,
        verifying_shares: Dict[int, Point],
        verifying_key: Point,
        min_signers: Optional[int] = None,
    ):
        self.verifying_shares = dict(sorted(verifying_shares.items()))
        self.verifying_key = verifying_key
        self.min_signers = min_signers

    def serialize(self) -> bytes:
        writer = Writer().varint(len(self.verifying_shares))
        for identifier, verifying_share in self.verifying_shares.items():
            writer.identifier(identifier).point(verifying_share)
        return (
            writer.point(self.verifying_key)
            .optional_varint(self.min_signers)
            .getvalue()
        )

    @classmethod
    def deserialize(cls, data: bytes) -> PublicKeyPackage:
        reader = Reader(data, kind="public key package")
        verifying_shares = reader.identifier_map(Reader.point)
        verifying_key = reader.point()
        min_signers = None if reader.at_end() else reader.optional_varint()
        reader.finish()
        return cls(verifying_shares, verifying_key, min_signers)


def generate_secret(rng: Optional[secrets.SystemRandom] = None) -> int:
    """Draw a fresh non-zero secret signing key."""
    rng = rng or secrets.SystemRandom()
    return rng.randrange(1, Q)


def _evaluate_polynomial(coefficients: Tuple[int, ...], x: int) -> int:
    # f(x) = ∑ a_j * x^j, 0 ≤ j ≤ t - 1, using Horner's method
    y = 0
    for coefficient in reversed(coefficients):
        y = (y * x + coefficient) % Q
    return y


def split(
    secret: int,
    max_signers: int,
    min_signers: int,
    rng: Optional[secrets.SystemRandom] = None,
) -> Tuple[Dict[int, KeyPackage], PublicKeyPackage]:
    """
    Split a secret key into shares with a trusted dealer.

    Signers are assigned the identifiers 1 to `max_signers`.

    Parameters:
    secret (int): The secret signing key, a non-zero scalar.
    max_signers (int): The number of shares to generate.
    min_signers (int): The number of shares required to sign.
    rng: A `random.Random` compatible source of randomness, defaulting to
        the operating system's.

    Returns:
    Tuple[Dict[int, KeyPackage], PublicKeyPackage]: The key package of each
    signer by identifier and the group's public key package.

    Raises:
    ValueError: If the secret is not a non-zero scalar or the signer counts
    are invalid.
    """
    if not 0 < secret < Q:
        raise ValueError("Secret must be a non-zero scalar.")
    if min_signers < 2:
        raise ValueError("The threshold must be at least 2.")
    if max_signers < min_signers:
        raise ValueError(
            "The number of signers must be greater than or equal to the threshold."
        )

    rng = rng or secrets.SystemRandom()

    # (a_0, . . ., a_(t - 1)), a_0 = s
    coefficients = (secret,) + tuple(
        rng.randrange(1, Q) for _ in range(min_signers - 1)
    )
    # Y = g^s
    verifying_key = secret * G

    key_packages = {}
    verifying_shares = {}
    for identifier in range(1, max_signers + 1):
        # s_i = f(i), Y_i = g^s_i
        signing_share = _evaluate_polynomial(coefficients, identifier)
        verifying_share = signing_share * G
        key_packages[identifier] = KeyPackage(
            identifier, signing_share, verifying_share, verifying_key, min_signers
        )
        verifying_shares[identifier] = verifying_share

    return key_packages, PublicKeyPackage(verifying_shares, verifying_key, min_signers)
