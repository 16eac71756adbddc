from __future__ import annotations

import shutil
from pathlib import Path

from .errors import CopyError

CHUNK_SIZE = 1024 * 1024


def copy_file(
    src: Path,
    dst: Path,
    *,
    preserve_metadata: bool = False,
    chunk_size: int = CHUNK_SIZE,
) -> None:
    """Copy the bytes of `src` into `dst`, creating or truncating `dst`.

    The source is opened first, so a missing or unreadable source never
    creates anything at `dst`. A failure while streaming leaves whatever was
    already written at `dst` in place; callers must treat a `CopyError` as
    possibly leaving a truncated file behind.

    Raises CopyError wrapping the underlying OSError.
    """
    try:
        with src.open("rb") as inf, dst.open("wb") as outf:
            while True:
                chunk = inf.read(chunk_size)
                if not chunk:
                    break
                outf.write(chunk)
        # leaving the with-block closes (and flushes) dst; close errors land here too
        if preserve_metadata:
            shutil.copystat(src, dst)
    except OSError as e:
        raise CopyError(src, dst, e) from e
