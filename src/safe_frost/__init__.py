"""
Copyright (c) 2021-2024 Jesse Posner

Distributed under the MIT software license, see the accompanying file LICENSE
or http://www.opensource.org/licenses/mit-license.php.

This code is currently a work in progress. It's not secure nor stable.  IT IS
EXTREMELY DANGEROUS AND RECKLESS TO USE THIS MODULE IN PRODUCTION!

This package coordinates a FROST(secp256k1, SHA-256) threshold signing
ceremony whose participants only communicate through files in a shared
directory, and encodes the resulting key and signature for an EVM verifier.

Modules:
- point: Defines the Point class for handling points on an elliptic curve.
- keys: Key packages and the trusted dealer that splits a secret into shares.
- round1: Signing nonces and commitments.
- round2: Signature shares.
- aggregator: The signing package, the Aggregator computations, signature
  aggregation and verification.
- serialization: The compact binary format of every artifact.
- evm, address, abi: Compatibility check and encodings for the EVM verifier.
- root: The workspace directory layout.
- commands: The ceremony steps, split, commit, prepare, sign, aggregate and
  verify.
- info: Read-only rendering of the public key and signature.
"""

from .point import Point, P, Q, G
from .keys import KeyPackage, PublicKeyPackage, split
from .round1 import SigningCommitments, SigningNonces, commit
from .round2 import SignatureShare, sign
from .aggregator import Aggregator, Signature, SigningPackage, aggregate, verify
from .address import Address
from .evm import is_supported, verified_public_key
from .root import Artifact, Root
