import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "installers" / "bootstrap"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from terminal_anywhere_bootstrap.validation import EXECUTABLE_MAGICS, RejectReason, validate

LFS_POINTER = (
    b"version https://git-lfs.github.com/spec/v1\n"
    b"oid sha256:4d7a214614ab2935c943f9e0ff69d22eadbb8f32b1258daaa5e2ca24d17e2393\n"
    b"size 12345678\n"
)


class ArtifactValidatorTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, data: bytes, name: str = "artifact") -> Path:
        path = self.root / name
        path.write_bytes(data)
        return path

    def test_missing_file_is_empty(self):
        result = validate(self.root / "nope")
        self.assertFalse(result.accepted)
        self.assertEqual(result.reason, RejectReason.EMPTY)

    def test_zero_length_is_empty(self):
        result = validate(self._write(b""))
        self.assertEqual(result.reason, RejectReason.EMPTY)

    def test_pointer_stub_rejected_regardless_of_length(self):
        padded = LFS_POINTER + b"x" * 10000
        for data in (LFS_POINTER, padded):
            with self.subTest(size=len(data)):
                result = validate(self._write(data))
                self.assertFalse(result)
                self.assertEqual(result.reason, RejectReason.POINTER_STUB)

    def test_pointer_signature_match_is_case_insensitive(self):
        result = validate(self._write(b"version https://GIT-LFS.github.com/spec/v1\n" + b"x" * 5000))
        self.assertEqual(result.reason, RejectReason.POINTER_STUB)

    def test_pointer_signature_only_checked_on_first_line(self):
        data = b"#!/bin/sh\n# git-lfs.github.com/spec/v1\n" + b"x" * 5000
        self.assertTrue(validate(self._write(data)).accepted)

    def test_magic_prefixed_files_accepted_regardless_of_size(self):
        for magic, name in EXECUTABLE_MAGICS.items():
            with self.subTest(format=name):
                result = validate(self._write(magic + b"\x00" * 6, name=name))
                self.assertTrue(result.accepted)
                self.assertEqual(result.size, 10)
                self.assertEqual(result.signature, name)

    def test_small_unknown_file_rejected(self):
        result = validate(self._write(b"<html>404</html>"))
        self.assertEqual(result.reason, RejectReason.TOO_SMALL)
        self.assertEqual(validate(self._write(b"a" * 4095)).reason, RejectReason.TOO_SMALL)

    def test_threshold_is_inclusive(self):
        result = validate(self._write(b"a" * 4096))
        self.assertTrue(result.accepted)
        self.assertIsNone(result.signature)

    def test_threshold_is_configurable(self):
        path = self._write(b"a" * 100)
        self.assertTrue(validate(path, min_size=100).accepted)
        self.assertFalse(validate(path, min_size=101).accepted)

    def test_validate_does_not_touch_file(self):
        path = self._write(LFS_POINTER)
        validate(path)
        self.assertEqual(path.read_bytes(), LFS_POINTER)


if __name__ == "__main__":
    unittest.main()
