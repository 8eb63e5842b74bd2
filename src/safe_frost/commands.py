"""
The commands of a file-based FROST signing ceremony.

Each command is a single step run by one party: it reads its inputs from
the workspace root, runs one step of the signing protocol and writes its
outputs back. The files present in the root are the only ceremony state:

    split       -> key.pub, key.<i>
    commit i    -> round1.<i>.nonces, round1.<i>.commitments
    prepare     -> round1, consumes round1.*.commitments
    sign i      -> round2.<i>, consumes round1.<i>.nonces
    aggregate   -> round2, consumes round2.*
    verify      reads key.pub, round1 and round2

Consumed artifacts are removed only once the output built from them has been
written. Removal tolerates files that are already gone.
"""

import logging
import os
import secrets
from pathlib import Path
from typing import Dict, Optional
from . import aggregator, keys, round1, round2
from .aggregator import Signature, SigningPackage
from .errors import (
    ArtifactNotFound,
    CleanupError,
    NoncesNotFound,
    ProtocolError,
    VerificationError,
)
from .evm import is_supported, verified_public_key
from .keys import KeyPackage, PublicKeyPackage
from .point import G
from .root import Artifact, Root

log = logging.getLogger(__name__)


def _write(path: Path, data: bytes, force: bool = True, secret: bool = False) -> None:
    # O_EXCL refuses to replace an existing file
    flags = os.O_WRONLY | os.O_CREAT | getattr(os, "O_BINARY", 0)
    flags |= os.O_TRUNC if force else os.O_EXCL
    fd = os.open(path, flags, 0o600 if secret else 0o666)
    with os.fdopen(fd, "wb") as f:
        if secret and os.name == "posix":
            # a replaced file keeps its old mode otherwise
            os.fchmod(f.fileno(), 0o600)
        f.write(data)
    log.info("wrote %s", path)


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise CleanupError(
            f"{path} was consumed but could not be removed, remove it manually: {e}"
        ) from e
    else:
        log.info("removed %s", path)


def _read_public_key(root: Root) -> PublicKeyPackage:
    return PublicKeyPackage.deserialize(root.path_for(Artifact.PUBLIC_KEY).read_bytes())


def _read_signing_key(root: Root, index: int) -> KeyPackage:
    return KeyPackage.deserialize(root.path_for(Artifact.SIGNING_KEY, index).read_bytes())


def _read_signing_package(root: Root) -> SigningPackage:
    return SigningPackage.deserialize(
        root.path_for(Artifact.SIGNING_PACKAGE).read_bytes()
    )


def split(
    root: Root,
    threshold: int = 3,
    signers: int = 5,
    secret: Optional[int] = None,
    force: bool = False,
    evm_check: bool = True,
    rng: Optional[secrets.SystemRandom] = None,
) -> PublicKeyPackage:
    """
    Generate a group public key and split its secret into signing key shares.

    Without a secret, a fresh one is drawn, and redrawn until its public key
    is supported by the EVM verifier unless `evm_check` is disabled. A
    supplied secret is never replaced: it fails the EVM check instead.

    Share index i holds the key package of the signer with identifier i + 1.

    Raises:
    NotSupported: If a supplied secret's public key fails the EVM check.
    FileExistsError: If an output file exists and `force` is not set.
    """
    rng = rng or secrets.SystemRandom()
    if secret is None:
        attempts = 1
        secret = keys.generate_secret(rng)
        while evm_check and not is_supported(secret * G):
            log.debug("public key not supported by the EVM verifier, attempt %d", attempts)
            attempts += 1
            secret = keys.generate_secret(rng)
    elif evm_check:
        verified_public_key(secret * G)

    key_packages, public_key_package = keys.split(secret, signers, threshold, rng)

    root.ensure()
    _write(root.path_for(Artifact.PUBLIC_KEY), public_key_package.serialize(), force)
    for identifier, key_package in key_packages.items():
        _write(
            root.path_for(Artifact.SIGNING_KEY, identifier - 1),
            key_package.serialize(),
            force,
            secret=True,
        )

    return public_key_package


def commit(
    root: Root, index: int, rng: Optional[secrets.SystemRandom] = None
) -> round1.SigningCommitments:
    """
    Generate the round-one nonces and commitments of a signer.

    Running it again for the same signer replaces both files.
    """
    key_package = _read_signing_key(root, index)
    nonces, commitments = round1.commit(key_package.signing_share, rng)

    _write(root.path_for(Artifact.NONCES, index), nonces.serialize(), secret=True)
    _write(
        root.path_for(Artifact.COMMITMENTS, index),
        round1.CommitmentsPackage(key_package.identifier, commitments).serialize(),
    )

    return commitments


def prepare(root: Root, message: bytes) -> SigningPackage:
    """
    Collect every commitments file into a signing package for `message`,
    then remove the collected commitments.

    Raises:
    ArtifactNotFound: If no commitments are present.
    ProtocolError: If two files hold commitments of the same signer.
    """
    paths = root.list(Artifact.COMMITMENTS)
    if not paths:
        raise ArtifactNotFound(f"no commitments found in {root}")

    commitments: Dict[int, round1.SigningCommitments] = {}
    for index, path in paths:
        package = round1.CommitmentsPackage.deserialize(path.read_bytes())
        if package.identifier in commitments:
            raise ProtocolError(
                f"duplicate commitments for signer {package.identifier} in {path}"
            )
        commitments[package.identifier] = package.commitments
        log.debug("collected commitments of share index %d", index)

    signing_package = SigningPackage(commitments, message)
    _write(root.path_for(Artifact.SIGNING_PACKAGE), signing_package.serialize())

    for _, path in paths:
        _remove(path)

    return signing_package


def sign(root: Root, index: int) -> round2.SignatureShare:
    """
    Compute the signature share of a signer over the signing package, then
    remove the signer's nonces so they can never be used again.

    Raises:
    NoncesNotFound: If the signer's nonces were already consumed or were
    never generated.
    """
    key_package = _read_signing_key(root, index)
    nonces_path = root.path_for(Artifact.NONCES, index)
    try:
        nonces = round1.SigningNonces.deserialize(nonces_path.read_bytes())
    except FileNotFoundError as e:
        raise NoncesNotFound(index) from e
    signing_package = _read_signing_package(root)

    share = round2.sign(signing_package, nonces, key_package)
    _write(
        root.path_for(Artifact.SIGNATURE_SHARE, index),
        round2.SignatureSharePackage(key_package.identifier, share).serialize(),
    )

    _remove(nonces_path)

    return share


def aggregate(root: Root) -> Signature:
    """
    Combine every signature share into the aggregate signature, then remove
    the combined shares.

    Raises:
    ArtifactNotFound: If no signature shares are present.
    ProtocolError: If the shares are insufficient, duplicated, or do not
    match the signing package.
    """
    public_key_package = _read_public_key(root)
    signing_package = _read_signing_package(root)

    paths = root.list(Artifact.SIGNATURE_SHARE)
    if not paths:
        raise ArtifactNotFound(f"no signature shares found in {root}")

    shares: Dict[int, round2.SignatureShare] = {}
    for _, path in paths:
        package = round2.SignatureSharePackage.deserialize(path.read_bytes())
        if package.identifier in shares:
            raise ProtocolError(
                f"duplicate signature share for signer {package.identifier} in {path}"
            )
        shares[package.identifier] = package.signature

    signature = aggregator.aggregate(signing_package, shares, public_key_package)
    _write(root.path_for(Artifact.SIGNATURE), signature.serialize())

    for _, path in paths:
        _remove(path)

    return signature


def verify(root: Root) -> Signature:
    """
    Verify the aggregate signature over the signing package's message.

    Raises:
    VerificationError: If the signature is not valid.
    """
    public_key_package = _read_public_key(root)
    signing_package = _read_signing_package(root)
    signature = Signature.deserialize(root.path_for(Artifact.SIGNATURE).read_bytes())

    if not aggregator.verify(
        signing_package.message, signature, public_key_package.verifying_key
    ):
        raise VerificationError("signature is not valid")
    log.info("signature is valid")

    return signature
