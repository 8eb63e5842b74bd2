import unittest

import random
from safe_frost import (
    Aggregator,
    KeyPackage,
    PublicKeyPackage,
    Signature,
    SigningPackage,
    aggregate,
    commit,
    sign,
    split,
    verify,
    Q,
    G,
)
from safe_frost.ciphersuite import h4, h5
from safe_frost.errors import (
    DeserializationError,
    InvalidSignatureShare,
    ProtocolError,
)
from safe_frost.round2 import SignatureShare


class Tests(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(1)
        self.secret = self.rng.randrange(1, Q)
        self.key_packages, self.public_key_package = split(
            self.secret, 3, 2, self.rng
        )

    def test_keygen(self):
        pk = self.public_key_package.verifying_key
        self.assertEqual(pk, self.secret * G)
        self.assertEqual(sorted(self.key_packages), [1, 2, 3])

        for identifier, key_package in self.key_packages.items():
            self.assertEqual(key_package.identifier, identifier)
            self.assertEqual(key_package.verifying_key, pk)
            self.assertEqual(key_package.min_signers, 2)
            self.assertEqual(
                key_package.signing_share * G,
                self.public_key_package.verifying_shares[identifier],
            )

        # Reconstruct secret
        for participants in ((1, 2), (1, 3), (2, 3), (1, 2, 3)):
            secret = (
                sum(
                    self.key_packages[i].signing_share
                    * Aggregator.lagrange_coefficient(i, participants)
                    for i in participants
                )
                % Q
            )
            self.assertEqual(secret, self.secret)

    def test_split_rejects_invalid_parameters(self):
        with self.assertRaises(ValueError):
            split(0, 3, 2)
        with self.assertRaises(ValueError):
            split(Q, 3, 2)
        with self.assertRaises(ValueError):
            split(self.secret, 3, 1)
        with self.assertRaises(ValueError):
            split(self.secret, 2, 3)

    def _sign(self, participants, message):
        nonces = {}
        commitments = {}
        for identifier in participants:
            nonces[identifier], commitments[identifier] = commit(
                self.key_packages[identifier].signing_share, self.rng
            )
        signing_package = SigningPackage(commitments, message)
        shares = {
            identifier: sign(
                signing_package, nonces[identifier], self.key_packages[identifier]
            )
            for identifier in participants
        }
        return signing_package, shares

    def test_sign(self):
        msg = b"fnord!"
        for participants in ((1, 2), (3, 1), (1, 2, 3)):
            signing_package, shares = self._sign(participants, msg)
            sig = aggregate(signing_package, shares, self.public_key_package)

            pk = self.public_key_package.verifying_key
            self.assertTrue(verify(msg, sig, pk))
            self.assertFalse(verify(b"fnord?", sig, pk))
            self.assertFalse(verify(msg, sig, G))

            # R ≟ g^z * Y^-c
            challenge = Aggregator.challenge(sig.R, pk, msg)
            self.assertEqual(sig.R, (sig.z * G) + (Q - challenge) * pk)

    def test_aggregate_detects_cheater(self):
        signing_package, shares = self._sign((1, 3), b"message")
        shares[3] = SignatureShare((shares[3].share + 1) % Q)

        with self.assertRaises(InvalidSignatureShare) as cm:
            aggregate(signing_package, shares, self.public_key_package)
        self.assertEqual(cm.exception.identifier, 3)

    def test_aggregate_requires_share_of_every_signer(self):
        _, commitments = commit(self.key_packages[3].signing_share, self.rng)
        signing_package, shares = self._sign((1, 2), b"message")
        del shares[2]

        with self.assertRaises(ProtocolError):
            aggregate(signing_package, shares, self.public_key_package)

        signing_package = SigningPackage(
            {3: commitments}, signing_package.message
        )
        with self.assertRaises(ProtocolError):
            aggregate(signing_package, shares, self.public_key_package)

    def test_aggregate_requires_threshold_commitments(self):
        nonces, commitments = commit(self.key_packages[1].signing_share, self.rng)
        signing_package = SigningPackage({1: commitments}, b"message")
        # sign refuses this package, so build the lone share by hand
        shares = {1: SignatureShare(nonces.hiding)}

        with self.assertRaisesRegex(ProtocolError, "at least 2 are required"):
            aggregate(signing_package, shares, self.public_key_package)

    def test_sign_requires_threshold_commitments(self):
        nonces, commitments = commit(self.key_packages[1].signing_share, self.rng)
        signing_package = SigningPackage({1: commitments}, b"message")

        with self.assertRaises(ProtocolError):
            sign(signing_package, nonces, self.key_packages[1])

    def test_sign_rejects_nonces_of_other_commitments(self):
        nonces1, commitments1 = commit(self.key_packages[1].signing_share, self.rng)
        _, commitments2 = commit(self.key_packages[2].signing_share, self.rng)
        stale_nonces, _ = commit(self.key_packages[1].signing_share, self.rng)
        signing_package = SigningPackage({1: commitments1, 2: commitments2}, b"m")

        with self.assertRaises(ProtocolError):
            sign(signing_package, stale_nonces, self.key_packages[1])
        with self.assertRaises(ProtocolError):
            sign(signing_package, nonces1, self.key_packages[3])

    def test_serialization(self):
        key_package = KeyPackage.deserialize(self.key_packages[2].serialize())
        self.assertEqual(key_package.identifier, 2)
        self.assertEqual(
            key_package.signing_share, self.key_packages[2].signing_share
        )
        self.assertEqual(
            key_package.verifying_key, self.public_key_package.verifying_key
        )

        public_key_package = PublicKeyPackage.deserialize(
            self.public_key_package.serialize()
        )
        self.assertEqual(
            public_key_package.verifying_shares,
            self.public_key_package.verifying_shares,
        )
        self.assertEqual(public_key_package.min_signers, 2)

        signing_package, shares = self._sign((2, 3), b"")
        decoded = SigningPackage.deserialize(signing_package.serialize())
        self.assertEqual(decoded.commitments, signing_package.commitments)
        self.assertEqual(decoded.message, b"")

        sig = aggregate(signing_package, shares, self.public_key_package)
        data = sig.serialize()
        self.assertEqual(len(data), Signature.LENGTH)
        self.assertEqual(Signature.deserialize(data), sig)

    def test_deserialization_errors(self):
        data = self.key_packages[1].serialize()

        with self.assertRaises(DeserializationError):
            KeyPackage.deserialize(data[:-1])
        with self.assertRaises(DeserializationError):
            KeyPackage.deserialize(data + b"\x00")
        with self.assertRaises(DeserializationError):
            KeyPackage.deserialize(b"\x01" + data[1:])
        with self.assertRaises(DeserializationError):
            # a key package is not a public key package
            PublicKeyPackage.deserialize(data)
        with self.assertRaises(DeserializationError):
            Signature.deserialize(b"\x02" + bytes(32) + Q.to_bytes(32, "big"))
        with self.assertRaises(DeserializationError):
            Signature.deserialize(b"\x04" + bytes(64))


class FixedRandom:
    """Replays fixed values where fresh randomness would be drawn."""

    def __init__(self, *values):
        self._values = [bytes.fromhex(value) for value in values]

    def randrange(self, start, stop):
        return int.from_bytes(self._values.pop(0), "big")

    def getrandbits(self, k):
        return int.from_bytes(self._values.pop(0), "big")


class VectorTests(unittest.TestCase):
    """
    FROST(secp256k1, SHA-256) test vectors for signers 1 and 3 of a 2-of-3
    group, from the frost-secp256k1 1.0.0 test suite.
    """

    SECRET = "0d004150d27c3bf2a42f312683d35fac7394b1e9e318249c1bfe7f0795a83114"
    VERIFYING_KEY = "02f37c34b66ced1fb51c34a90bdae006901f10625cc06c4f64663b0eae87d87b4f"
    MESSAGE = "74657374"
    COEFFICIENT = "fbf85eadae3058ea14f19148bb72b45e4399c0b16028acaf0395c9b03c823579"
    SHARES = {
        1: "08f89ffe80ac94dcb920c26f3f46140bfc7f95b493f8310f5fc1ea2b01f4254c",
        2: "04f0feac2edcedc6ce1253b7fab8c86b856a797f44d83d82a385554e6e401984",
        3: "00e95d59dd0d46b0e303e500b62b7ccb0e555d49f5b849f5e748c071da8c0dbc",
    }
    ROUND_ONE = {
        1: {
            "hiding_nonce_randomness": "bda8e748e599187762cff956f03dc6ea13fc8e04491a0427b7e6e78600f41c52",
            "binding_nonce_randomness": "2ca682429bf05df435b9927b8edb1d748278f3e42fa11ef358e49bbf4a1b780d",
            "hiding_nonce": "09764379667f9a9fa61928947bd925a7f162b21886b750d3b11c226d16b32f58",
            "binding_nonce": "b2d3f8cb9da70984354c3fc3511b1f6ed21b7205941cb5553565d2ecade8c694",
            "hiding_nonce_commitment": "0305e62a1d3f57a0b17ade569a3a4043e2a1fc3bd0b102614a8d8cc68e3322ad89",
            "binding_nonce_commitment": "03b634c2aed7f85b8eec22e97e5f916ab43a3518821480e15da2af7cffcb060a30",
            "binding_factor": "9bee5aef4012de4b94c9fc1a9a9572181079e293bf1d7545a5af0ef86f824a91",
        },
        3: {
            "hiding_nonce_randomness": "70818dd5170672c4a4285fd593d4f222417f941f3118e1244955e7a1098a35d8",
            "binding_nonce_randomness": "74ca2da071ed4a2a6cad5087d6758b48a558ab5861c61117fee05757e4b1309e",
            "hiding_nonce": "0d92e255e5b42ebc2863f8198d946fc10f388c4983073c18cbb77b88e3bf2e34",
            "binding_nonce": "1c7243ce00a499b1e7ce3403e7b731d0c820cf108feb8c5ee7c29b4ef43be5e0",
            "hiding_nonce_commitment": "036f878da0dc19ba7da9f2d9e795e2674e62ff06c990fc4464cc1ed55a2acce46b",
            "binding_nonce_commitment": "025350e2a9e32e7b1fe0161e990623600b2d301b3307641469129cff7936c4d2ce",
            "binding_factor": "cfe0db2197c94cc355b6ab05610f27f4a874898009c8bf007f2a4e2ce2c8306d",
        },
    }
    # H4(m) and H5(B) of the binding factor input
    MESSAGE_HASH = "ff9b5210ffbb3c07a73a7c8935be4a8c62cf015f6cf7ade6efac09a6513540fc"
    COMMITMENT_LIST_HASH = "fac8df6fa81b3f4d9ced4be2474894308232dc0be75dbf81f5a103579a823631"
    SIGNATURE_SHARES = {
        1: "ca54b18d7449377cfa680760a5770b9e64e201f7ea36b068effeca5fce2155e5",
        3: "da13d054e83052568706a6d161d80f112a6bc3f76aa903c022585ae7e091e65e",
    }
    SIGNATURE = (
        "024c1ad4e031872661fa6ebd05dfc7fb30db08b38d79f0edbc82051ae931381bc6"
        "a46881e25c7989d3816eae32074f1ab0d49ee908a59713ed5284c6bade7cfb02"
    )

    def test_vectors(self):
        key_packages, public_key_package = split(
            int(self.SECRET, 16), 3, 2, FixedRandom(self.COEFFICIENT)
        )
        verifying_key = public_key_package.verifying_key
        self.assertEqual(verifying_key.sec_serialize().hex(), self.VERIFYING_KEY)
        for identifier, share in self.SHARES.items():
            self.assertEqual(key_packages[identifier].signing_share, int(share, 16))

        nonces = {}
        commitments = {}
        for identifier, expected in self.ROUND_ONE.items():
            nonces[identifier], commitments[identifier] = commit(
                key_packages[identifier].signing_share,
                FixedRandom(
                    expected["hiding_nonce_randomness"],
                    expected["binding_nonce_randomness"],
                ),
            )
            self.assertEqual(nonces[identifier].hiding, int(expected["hiding_nonce"], 16))
            self.assertEqual(nonces[identifier].binding, int(expected["binding_nonce"], 16))
            self.assertEqual(
                commitments[identifier].hiding.sec_serialize().hex(),
                expected["hiding_nonce_commitment"],
            )
            self.assertEqual(
                commitments[identifier].binding.sec_serialize().hex(),
                expected["binding_nonce_commitment"],
            )

        message = bytes.fromhex(self.MESSAGE)
        signing_package = SigningPackage(commitments, message)
        self.assertEqual(h4(message).hex(), self.MESSAGE_HASH)
        self.assertEqual(
            h5(Aggregator.encode_group_commitment_list(commitments)).hex(),
            self.COMMITMENT_LIST_HASH,
        )
        binding_factors = Aggregator.binding_factors(verifying_key, signing_package)
        for identifier, expected in self.ROUND_ONE.items():
            self.assertEqual(
                binding_factors[identifier], int(expected["binding_factor"], 16)
            )

        shares = {}
        for identifier, expected in self.SIGNATURE_SHARES.items():
            shares[identifier] = sign(
                signing_package, nonces[identifier], key_packages[identifier]
            )
            self.assertEqual(shares[identifier].share, int(expected, 16))

        sig = aggregate(signing_package, shares, public_key_package)
        self.assertEqual(sig.serialize().hex(), self.SIGNATURE)
        self.assertTrue(verify(message, sig, verifying_key))


if __name__ == "__main__":
    unittest.main()
