from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List


class Verbosity(IntEnum):
    SILENT = 0
    ERRORS = 1
    ALL = 2


@dataclass(frozen=True)
class ImoConfig:
    input_dir: Path
    output_dir: Path
    # lowercase, dot-prefixed: {".jpg", ".png"}
    extensions: FrozenSet[str]
    max_depth: int = 10
    verbosity: Verbosity = Verbosity.SILENT
    scan_only: bool = False
    mkdirs: bool = True
    preserve_metadata: bool = False
    # keep per-file entries in ScanState.details (only for --write-report)
    record_details: bool = False

    @property
    def emit_errors(self) -> bool:
        return self.verbosity >= Verbosity.ERRORS

    @property
    def emit_info(self) -> bool:
        return self.verbosity >= Verbosity.ALL


@dataclass
class ScanState:
    """Counters for a single run. Created per run, never shared."""

    next_id: int = 1
    found: int = 0
    copied: int = 0
    dir_errors: int = 0
    copy_errors: int = 0
    depth_limit_stops: int = 0
    details: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.dir_errors + self.copy_errors

    def allocate_id(self) -> int:
        # Consumed even when the copy later fails; ids are never reused.
        n = self.next_id
        self.next_id += 1
        return n

    def counters(self) -> Dict[str, int]:
        return {
            "found": self.found,
            "copied": self.copied,
            "failed": self.failed,
            "copy_errors": self.copy_errors,
            "dir_errors": self.dir_errors,
            "depth_limit_stops": self.depth_limit_stops,
        }
