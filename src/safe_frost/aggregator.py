"""
This module defines the signing package and the Aggregator used in the FROST
(Flexible Round-Optimized Schnorr Threshold) signature scheme. The Aggregator
is responsible for the computations shared by signers and the coordinator:
binding factors, the group commitment, the challenge and Lagrange
coefficients, and for combining signature shares into the final signature.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Iterable
from .ciphersuite import h1, h2, h4, h5
from .constants import Q
from .errors import InvalidSignatureShare, ProtocolError, VerificationError
from .keys import PublicKeyPackage
from .point import Point, G
from .round1 import SigningCommitments
from .serialization import Reader, Writer, serialize_scalar

if TYPE_CHECKING:
    from .round2 import SignatureShare


class SigningPackage:
    """The message to sign and the commitments of every participating signer."""

    def __init__(self, commitments: Dict[int, SigningCommitments], message: bytes):
        self.commitments = dict(sorted(commitments.items()))
        self.message = bytes(message)

    def serialize(self) -> bytes:
        writer = Writer().varint(len(self.commitments))
        for identifier, commitments in self.commitments.items():
            commitments.write(writer.identifier(identifier))
        return writer.blob(self.message).getvalue()

    @classmethod
    def deserialize(cls, data: bytes) -> SigningPackage:
        reader = Reader(data, kind="signing package")
        commitments = reader.identifier_map(SigningCommitments.read)
        package = cls(commitments, reader.blob())
        reader.finish()
        return package


class Signature:
    """A Schnorr signature σ = (R, z)."""

    LENGTH = 65

    def __init__(self, R: Point, z: int):
        self.R = R
        self.z = z

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Signature):
            return NotImplemented
        return self.R == other.R and self.z == other.z

    def serialize(self) -> bytes:
        return Writer(header=False).point(self.R).scalar(self.z).getvalue()

    @classmethod
    def deserialize(cls, data: bytes) -> Signature:
        reader = Reader(data, header=False, kind="signature")
        signature = cls(reader.point(), reader.scalar())
        reader.finish()
        return signature


class Aggregator:
    """Computations of the FROST signing protocol shared by all parties."""

    @classmethod
    def encode_group_commitment_list(
        cls, commitments: Dict[int, SigningCommitments]
    ) -> bytes:
        # B = ⟨(i, D_i, E_i)⟩_i∈S, sorted by identifier
        return b"".join(
            serialize_scalar(identifier) + commitments[identifier].encode()
            for identifier in sorted(commitments)
        )

    @classmethod
    def binding_factors(
        cls, verifying_key: Point, signing_package: SigningPackage
    ) -> Dict[int, int]:
        """
        Compute the binding factor of every signer in the signing package.

        Parameters:
        verifying_key (Point): The group verifying key.
        signing_package (SigningPackage): The message and commitments.

        Returns:
        Dict[int, int]: The binding factor ρ_i of each signer by identifier.
        """
        commitment_list_hash = h5(
            cls.encode_group_commitment_list(signing_package.commitments)
        )
        prefix = (
            verifying_key.sec_serialize()
            + h4(signing_package.message)
            + commitment_list_hash
        )
        # ρ_i = H_1(Y, H_4(m), H_5(B), i), i ∈ S
        return {
            identifier: h1(prefix + serialize_scalar(identifier))
            for identifier in signing_package.commitments
        }

    @classmethod
    def group_commitment(
        cls, signing_package: SigningPackage, binding_factors: Dict[int, int]
    ) -> Point:
        """
        Calculate the group commitment by aggregating individual commitments
        from participants.

        Raises:
        ProtocolError: If the group commitment is the point at infinity.
        """
        # R = ∑ D_i + ρ_i * E_i, i ∈ S
        group_commitment = Point()
        for identifier, commitments in signing_package.commitments.items():
            group_commitment += commitments.hiding + (
                binding_factors[identifier] * commitments.binding
            )
        if group_commitment.is_zero():
            raise ProtocolError("group commitment is the point at infinity")

        return group_commitment

    @classmethod
    def challenge(cls, group_commitment: Point, verifying_key: Point, message: bytes) -> int:
        # c = H_2(R, Y, m)
        return h2(
            group_commitment.sec_serialize() + verifying_key.sec_serialize() + message
        )

    @classmethod
    def lagrange_coefficient(cls, identifier: int, identifiers: Iterable[int]) -> int:
        """
        Calculate the Lagrange coefficient of a signer evaluated at zero,
        relative to the other signers.

        Raises:
        ProtocolError: If the signer is not part of the identifiers.
        """
        identifiers = tuple(identifiers)
        if identifier not in identifiers:
            raise ProtocolError(f"signer {identifier} is not a participant")

        # λ_i = ∏ p_j / (p_j - p_i), j ∈ S, j ≠ i
        numerator = 1
        denominator = 1
        for other in identifiers:
            if other == identifier:
                continue
            numerator = numerator * other
            denominator = denominator * (other - identifier)
        return (numerator * pow(denominator, Q - 2, Q)) % Q


def aggregate(
    signing_package: SigningPackage,
    signature_shares: Dict[int, SignatureShare],
    public_key_package: PublicKeyPackage,
) -> Signature:
    """
    Combine the signature shares of a signing package into a signature.

    Parameters:
    signing_package (SigningPackage): The package every share was computed over.
    signature_shares (Dict[int, SignatureShare]): The shares by identifier.
    public_key_package (PublicKeyPackage): The group's public key package.

    Returns:
    Signature: The aggregate signature.

    Raises:
    ProtocolError: If there are fewer commitments than the threshold, the
    shares do not match the signing package, or a signer is unknown.
    InvalidSignatureShare: If the aggregate signature does not verify
    because of a cheating signer.
    VerificationError: If the signature does not verify for another reason.
    """
    commitments = signing_package.commitments
    # Public key packages without a threshold only get the share set checks.
    if (
        public_key_package.min_signers is not None
        and len(commitments) < public_key_package.min_signers
    ):
        raise ProtocolError(
            f"signing package has {len(commitments)} commitments, "
            f"at least {public_key_package.min_signers} are required"
        )
    if set(signature_shares) != set(commitments):
        raise ProtocolError(
            f"expected signature shares from signers {sorted(commitments)}, "
            f"got {sorted(signature_shares)}"
        )
    for identifier in commitments:
        if identifier not in public_key_package.verifying_shares:
            raise ProtocolError(f"unknown signer {identifier}")

    verifying_key = public_key_package.verifying_key
    binding_factors = Aggregator.binding_factors(verifying_key, signing_package)
    # R
    group_commitment = Aggregator.group_commitment(signing_package, binding_factors)
    # z = ∑ z_i, i ∈ S
    z = sum(share.share for share in signature_shares.values()) % Q
    signature = Signature(group_commitment, z)

    if verify(signing_package.message, signature, verifying_key):
        return signature

    # Find the cheater: g^z_i ≟ D_i + ρ_i * E_i + c * λ_i * Y_i
    challenge = Aggregator.challenge(
        group_commitment, verifying_key, signing_package.message
    )
    for identifier, share in signature_shares.items():
        lagrange_coefficient = Aggregator.lagrange_coefficient(identifier, commitments)
        commitment_share = commitments[identifier].hiding + (
            binding_factors[identifier] * commitments[identifier].binding
        )
        expected = commitment_share + (
            (challenge * lagrange_coefficient)
            * public_key_package.verifying_shares[identifier]
        )
        if share.share * G != expected:
            raise InvalidSignatureShare(identifier)

    raise VerificationError("aggregate signature is invalid")


def verify(message: bytes, signature: Signature, verifying_key: Point) -> bool:
    """
    Verify a Schnorr signature against a message and verifying key.

    Returns:
    bool: True if g^z = R + c * Y with c = H_2(R, Y, m), False otherwise.
    """
    if signature.R.is_zero() or verifying_key.is_zero():
        return False

    challenge = Aggregator.challenge(signature.R, verifying_key, message)
    return signature.z * G == signature.R + (challenge * verifying_key)
