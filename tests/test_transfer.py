import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from imo.errors import CopyError
from imo.transfer import copy_file


class _FailingReader(io.BytesIO):
    """Yields its buffer once, then fails like a dying disk."""

    def read(self, size=-1):
        data = super().read(size)
        if not data:
            raise OSError(5, "Input/output error")
        return data


class TestCopyFile(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.base = Path(self._td.name)

    def tearDown(self):
        self._td.cleanup()

    def test_copies_bytes_across_chunks(self):
        src = self.base / "src.bin"
        dst = self.base / "dst.bin"
        payload = os.urandom(10_000)
        src.write_bytes(payload)

        copy_file(src, dst, chunk_size=4096)

        self.assertEqual(dst.read_bytes(), payload)
        self.assertEqual(src.read_bytes(), payload)

    def test_truncates_existing_destination(self):
        src = self.base / "src.bin"
        dst = self.base / "dst.bin"
        src.write_bytes(b"new")
        dst.write_bytes(b"much longer old content")

        copy_file(src, dst)

        self.assertEqual(dst.read_bytes(), b"new")

    def test_missing_source_creates_nothing(self):
        src = self.base / "missing.jpg"
        dst = self.base / "1.jpg"

        with self.assertRaises(CopyError) as ctx:
            copy_file(src, dst)

        self.assertFalse(dst.exists())
        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)
        self.assertEqual(ctx.exception.src, src)

    def test_unwritable_destination_leaves_source(self):
        src = self.base / "a.jpg"
        src.write_bytes(b"x")
        dst = self.base / "no-such-dir" / "1.jpg"

        with self.assertRaises(CopyError):
            copy_file(src, dst)

        self.assertEqual(src.read_bytes(), b"x")

    def test_preserve_metadata_copies_mtime(self):
        src = self.base / "a.jpg"
        dst = self.base / "1.jpg"
        src.write_bytes(b"x")
        os.utime(src, (1_000_000, 1_000_000))

        copy_file(src, dst, preserve_metadata=True)

        self.assertEqual(int(dst.stat().st_mtime), 1_000_000)

    def test_read_failure_midway_leaves_partial_destination(self):
        src = self.base / "a.jpg"
        dst = self.base / "1.jpg"
        src.write_bytes(b"partial-and-more")
        real_open = Path.open

        def flaky_open(path, mode="r", *args, **kwargs):
            if mode == "rb":
                return _FailingReader(b"partial")
            return real_open(path, mode, *args, **kwargs)

        with mock.patch.object(Path, "open", autospec=True, side_effect=flaky_open):
            with self.assertRaises(CopyError) as ctx:
                copy_file(src, dst, chunk_size=4)

        self.assertTrue(dst.exists())
        self.assertEqual(dst.read_bytes(), b"partial")
        self.assertEqual(ctx.exception.cause.errno, 5)
