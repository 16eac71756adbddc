from __future__ import annotations

from pathlib import Path
from typing import Optional


class ImoError(RuntimeError):
    """Base error type."""


class ConfigError(ImoError):
    """Config contract violation."""


class DirectoryReadError(ImoError):
    """A directory could not be listed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"cannot read directory {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class CopyError(ImoError):
    """Opening, creating or streaming during a single file copy failed."""

    def __init__(self, src: Path, dst: Path, cause: Optional[OSError]) -> None:
        reason = (cause.strerror or str(cause)) if cause is not None else "unknown"
        super().__init__(f"cannot copy {src} -> {dst}: {reason}")
        self.src = src
        self.dst = dst
        self.cause = cause
