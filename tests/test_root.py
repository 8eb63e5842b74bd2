import unittest

import tempfile
from pathlib import Path
from safe_frost.root import Artifact, DEFAULT_ROOT, Root


class Tests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Root(Path(self.tmp.name) / "ceremony")

    def tearDown(self):
        self.tmp.cleanup()

    def _touch(self, *names):
        self.root.ensure()
        for name in names:
            (self.root.path / name).write_bytes(b"")

    def test_path_for(self):
        root = Root("/tmp/frost")
        base = Path("/tmp/frost")
        self.assertEqual(root.path_for(Artifact.PUBLIC_KEY), base / "key.pub")
        self.assertEqual(root.path_for(Artifact.SIGNING_KEY, 4), base / "key.4")
        self.assertEqual(root.path_for(Artifact.NONCES, 0), base / "round1.0.nonces")
        self.assertEqual(
            root.path_for(Artifact.COMMITMENTS, 12), base / "round1.12.commitments"
        )
        self.assertEqual(root.path_for(Artifact.SIGNING_PACKAGE), base / "round1")
        self.assertEqual(root.path_for(Artifact.SIGNATURE_SHARE, 3), base / "round2.3")
        self.assertEqual(root.path_for(Artifact.SIGNATURE), base / "round2")

    def test_path_for_errors(self):
        with self.assertRaises(ValueError):
            self.root.path_for(Artifact.SIGNING_KEY)
        with self.assertRaises(ValueError):
            self.root.path_for(Artifact.NONCES, -1)
        with self.assertRaises(ValueError):
            self.root.path_for(Artifact.SIGNATURE, 1)

    def test_default(self):
        self.assertEqual(Root(), Root(DEFAULT_ROOT))
        self.assertEqual(Root().path, Path(".frost"))

    def test_immutable(self):
        with self.assertRaises(AttributeError):
            self.root.path = Path("elsewhere")
        self.assertEqual(len({Root("a"), Root("a"), Root("b")}), 2)

    def test_list(self):
        self._touch(
            "key.pub",
            "key.10",
            "key.2",
            "key.0",
            "key.01",
            "key.x",
            "round1",
            "round1.3.commitments",
            "round1.3.nonces",
            "round1.1.commitments",
            "round1.1.commitments.bak",
            "round2",
            "round2.7",
        )
        (self.root.path / "key.5").mkdir()

        self.assertEqual(
            [index for index, _ in self.root.list(Artifact.SIGNING_KEY)], [0, 2, 10]
        )
        self.assertEqual(
            self.root.list(Artifact.COMMITMENTS),
            [
                (1, self.root.path / "round1.1.commitments"),
                (3, self.root.path / "round1.3.commitments"),
            ],
        )
        self.assertEqual(
            self.root.list(Artifact.NONCES), [(3, self.root.path / "round1.3.nonces")]
        )
        self.assertEqual(
            self.root.list(Artifact.SIGNATURE_SHARE), [(7, self.root.path / "round2.7")]
        )

    def test_list_errors(self):
        with self.assertRaises(FileNotFoundError):
            self.root.list(Artifact.COMMITMENTS)
        self.root.ensure()
        with self.assertRaises(ValueError):
            self.root.list(Artifact.PUBLIC_KEY)

    def test_ensure(self):
        self.root.ensure()
        self.root.ensure()
        self.assertTrue(self.root.path.is_dir())
        self.assertEqual(self.root.list(Artifact.SIGNATURE_SHARE), [])


if __name__ == "__main__":
    unittest.main()
