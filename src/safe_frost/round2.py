"""
Round two of FROST signing: every signer in the signing package uses its
round-one nonces and its signing share to compute a signature share.
"""

from __future__ import annotations
from .aggregator import Aggregator, SigningPackage
from .constants import Q
from .errors import ProtocolError
from .keys import KeyPackage
from .round1 import SigningNonces
from .serialization import Reader, Writer


class SignatureShare:
    """A signer's partial signature z_i."""

    def __init__(self, share: int):
        self.share = share

    def serialize(self) -> bytes:
        return Writer(header=False).scalar(self.share).getvalue()

    def write(self, writer: Writer) -> Writer:
        # Unlike the bare scalar above, a nested share carries a header.
        return writer.header().scalar(self.share)

    @classmethod
    def deserialize(cls, data: bytes) -> SignatureShare:
        reader = Reader(data, header=False, kind="signature share")
        share = cls(reader.scalar())
        reader.finish()
        return share

    @classmethod
    def read(cls, reader: Reader) -> SignatureShare:
        reader.header()
        return cls(reader.scalar())


class SignatureSharePackage:
    """
    The signature share of a signer, tagged with the signer's identifier.

    Like the round-one commitments package, it starts with the identifier.
    """

    def __init__(self, identifier: int, signature: SignatureShare):
        self.identifier = identifier
        self.signature = signature

    def serialize(self) -> bytes:
        writer = Writer(header=False).identifier(self.identifier)
        return self.signature.write(writer).getvalue()

    @classmethod
    def deserialize(cls, data: bytes) -> SignatureSharePackage:
        reader = Reader(data, header=False, kind="signature share package")
        package = cls(reader.identifier(), SignatureShare.read(reader))
        reader.finish()
        return package


def sign(
    signing_package: SigningPackage, nonces: SigningNonces, key_package: KeyPackage
) -> SignatureShare:
    """
    Generate a signature share for a signer.

    Parameters:
    signing_package (SigningPackage): The message and the commitments of all
        participating signers.
    nonces (SigningNonces): The signer's round-one nonces. They must not be
        used again after this call.
    key_package (KeyPackage): The signer's key package.

    Returns:
    SignatureShare: The signer's signature share.

    Raises:
    ProtocolError: If the package has fewer commitments than the threshold,
    does not include this signer, or holds commitments for this signer that
    were not produced with these nonces.
    """
    commitments = signing_package.commitments
    identifier = key_package.identifier
    if len(commitments) < key_package.min_signers:
        raise ProtocolError(
            f"signing package has {len(commitments)} commitments, "
            f"at least {key_package.min_signers} are required"
        )
    if identifier not in commitments:
        raise ProtocolError(
            f"signing package does not include commitments for signer {identifier}"
        )
    if commitments[identifier] != nonces.commitments:
        raise ProtocolError(
            f"signing package commitments for signer {identifier} do not match its nonces"
        )

    verifying_key = key_package.verifying_key
    binding_factors = Aggregator.binding_factors(verifying_key, signing_package)
    # R
    group_commitment = Aggregator.group_commitment(signing_package, binding_factors)
    # c = H_2(R, Y, m)
    challenge = Aggregator.challenge(
        group_commitment, verifying_key, signing_package.message
    )
    # λ_i
    lagrange_coefficient = Aggregator.lagrange_coefficient(identifier, commitments)

    # z_i = d_i + (e_i * ρ_i) + λ_i * s_i * c
    return SignatureShare(
        (
            nonces.hiding
            + nonces.binding * binding_factors[identifier]
            + lagrange_coefficient * key_package.signing_share * challenge
        )
        % Q
    )
