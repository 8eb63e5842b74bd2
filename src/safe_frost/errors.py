"""
Exceptions raised by the signing engine, the codecs and the ceremony commands.

Filesystem failures are not wrapped: they surface as the ``OSError`` raised
by the operation that failed.
"""

from typing import Optional


class FrostError(Exception):
    """Base class for all errors raised by this package."""


class HexDecodeError(FrostError, ValueError):
    """A hex string could not be decoded."""


class DeserializationError(FrostError, ValueError):
    """An artifact's bytes are malformed or truncated."""


class ProtocolError(FrostError):
    """
    The inputs of a signing step are inconsistent: too few commitments or
    shares, an unknown or duplicate identifier, or artifacts from different
    ceremonies.
    """


class InvalidSignatureShare(ProtocolError):
    """A signature share failed verification against its verifying share."""

    def __init__(self, identifier: int):
        super().__init__(f"invalid signature share from signer {identifier}")
        self.identifier = identifier


class VerificationError(FrostError):
    """The aggregate signature does not verify."""


class NotSupported(FrostError):
    """A public key cannot be verified by the EVM verifier."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "public key not supported by the EVM verifier")


class ArtifactNotFound(FrostError):
    """A ceremony artifact required by a command is not present."""


class NoncesNotFound(ArtifactNotFound):
    """
    The round-1 nonces for a signer are missing: either they were already
    consumed by a previous signature, or `commit` never ran for the signer.
    """

    def __init__(self, index: int):
        super().__init__(
            f"nonces not found for share index {index}; "
            "run `commit` again to generate fresh nonces"
        )
        self.index = index


class CleanupError(FrostError):
    """A consumed artifact could not be removed after its output was written."""
