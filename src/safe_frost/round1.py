"""
Round one of FROST signing: every participating signer draws a pair of
single-use nonces and publishes the matching commitments.

The nonces are secret and must be used for exactly one signature share.
The commitments are public and collected into a signing package.
"""

from __future__ import annotations
import secrets
from typing import Optional, Tuple
from .ciphersuite import h3
from .point import Point, G
from .serialization import Reader, Writer, serialize_scalar


class SigningCommitments:
    """A signer's public hiding and binding nonce commitments (D_i, E_i)."""

    def __init__(self, hiding: Point, binding: Point):
        self.hiding = hiding
        self.binding = binding

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SigningCommitments):
            return NotImplemented
        return self.hiding == other.hiding and self.binding == other.binding

    def __hash__(self) -> int:
        return hash((self.hiding, self.binding))

    def encode(self) -> bytes:
        return self.hiding.sec_serialize() + self.binding.sec_serialize()

    def serialize(self) -> bytes:
        return self.write(Writer(header=False)).getvalue()

    def write(self, writer: Writer) -> Writer:
        # Commitments keep their own header wherever they are nested.
        return writer.header().point(self.hiding).point(self.binding)

    @classmethod
    def deserialize(cls, data: bytes) -> SigningCommitments:
        reader = Reader(data, header=False, kind="signing commitments")
        commitments = cls.read(reader)
        reader.finish()
        return commitments

    @classmethod
    def read(cls, reader: Reader) -> SigningCommitments:
        reader.header()
        return cls(reader.point(), reader.point())


class SigningNonces:
    """
    A signer's secret hiding and binding nonces (d_i, e_i), kept together
    with the commitments they were published as.
    """

    def __init__(self, hiding: int, binding: int, commitments: SigningCommitments):
        self.hiding = hiding
        self.binding = binding
        self.commitments = commitments

    def serialize(self) -> bytes:
        writer = Writer().scalar(self.hiding).scalar(self.binding)
        return self.commitments.write(writer).getvalue()

    @classmethod
    def deserialize(cls, data: bytes) -> SigningNonces:
        reader = Reader(data, kind="signing nonces")
        nonces = cls(reader.scalar(), reader.scalar(), SigningCommitments.read(reader))
        reader.finish()
        return nonces


class CommitmentsPackage:
    """
    The commitments of a signer, tagged with the signer's identifier.

    The package itself has no header: it starts with the identifier and the
    nested commitments carry the header.
    """

    def __init__(self, identifier: int, commitments: SigningCommitments):
        self.identifier = identifier
        self.commitments = commitments

    def serialize(self) -> bytes:
        writer = Writer(header=False).identifier(self.identifier)
        return self.commitments.write(writer).getvalue()

    @classmethod
    def deserialize(cls, data: bytes) -> CommitmentsPackage:
        reader = Reader(data, header=False, kind="commitments package")
        package = cls(reader.identifier(), SigningCommitments.read(reader))
        reader.finish()
        return package


def nonce_generate(
    signing_share: int, rng: Optional[secrets.SystemRandom] = None
) -> int:
    """
    Generate a nonce bound to both fresh randomness and the signer's secret
    share, so that a weak random source alone does not expose the nonce.
    """
    rng = rng or secrets.SystemRandom()
    random_bytes = rng.getrandbits(256).to_bytes(32, "big")
    return h3(random_bytes + serialize_scalar(signing_share))


def commit(
    signing_share: int, rng: Optional[secrets.SystemRandom] = None
) -> Tuple[SigningNonces, SigningCommitments]:
    """
    Generate a nonce pair and its commitments for a signer.

    Parameters:
    signing_share (int): The signer's secret signing share.
    rng: A `random.Random` compatible source of randomness.

    Returns:
    Tuple[SigningNonces, SigningCommitments]: The secret nonces and the
    public commitments.
    """
    # d_i, e_i
    hiding = nonce_generate(signing_share, rng)
    binding = nonce_generate(signing_share, rng)
    # (D_i, E_i) = (g^d_i, g^e_i)
    commitments = SigningCommitments(hiding * G, binding * G)

    return SigningNonces(hiding, binding, commitments), commitments
