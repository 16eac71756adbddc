"""Depth-first traversal that flattens matching files into one directory.

Depth counting starts at 0 for the input directory itself; its immediate
sub-directories are at depth 1. A directory whose depth exceeds
`cfg.max_depth` is never listed and counts as one depth-limit stop.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Iterable, List, Tuple

from .errors import CopyError, DirectoryReadError
from .model import ImoConfig, ScanState
from .transfer import copy_file

# Platform thumbnail/index files. Exact, case-sensitive names.
SYSTEM_ARTIFACTS = frozenset(
    {".DS_Store", ".DS_STORE", "Thumbs.db", "thumb.db", "Thumb.db"}
)


def normalize_ext(ext: str) -> str:
    """'JPG' -> '.jpg'. Only case is folded; blank input stays empty."""
    if not ext.strip():
        return ""
    return f".{ext.lower()}"


def normalize_extensions(exts: Iterable[str]) -> frozenset[str]:
    return frozenset(n for n in (normalize_ext(e) for e in exts) if n)


def file_ext(name: str) -> str:
    """Lowercased text from the last dot of `name`, or "" without a dot.

    Unlike `Path.suffix`, a name like '.jpg' has the extension '.jpg'.
    """
    i = name.rfind(".")
    return name[i:].lower() if i >= 0 else ""


def is_system_artifact(name: str) -> bool:
    return name in SYSTEM_ARTIFACTS


def destination_for(dst_dir: Path, file_id: int, ext: str) -> Path:
    return dst_dir / f"{file_id}{ext.lower()}"


def _same_dir(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except (OSError, RuntimeError):
        return a == b


def _list_dir(path: Path) -> List[Tuple[Path, bool]]:
    """Entries of `path` sorted by name, each paired with its is-directory flag.

    Stat failures on any entry (e.g. a readable but not searchable directory)
    fail the whole listing.
    """
    try:
        return [(p, p.is_dir()) for p in sorted(path.iterdir(), key=lambda p: p.name)]
    except OSError as e:
        raise DirectoryReadError(path, e) from e


def _error(cfg: ImoConfig, msg: str) -> None:
    if cfg.emit_errors:
        print(f"[imo] {msg}", file=sys.stderr)


def _info(cfg: ImoConfig, msg: str) -> None:
    if cfg.emit_info:
        print(msg, flush=True)


def _record(cfg: ImoConfig, state: ScanState, **detail: Any) -> None:
    if cfg.record_details:
        state.details.append(detail)


def _process_file(cfg: ImoConfig, state: ScanState, src: Path, dst_dir: Path) -> None:
    if is_system_artifact(src.name):
        return

    ext = file_ext(src.name)
    if ext not in cfg.extensions:
        return

    state.found += 1

    if cfg.scan_only:
        _info(cfg, str(src))
        _record(cfg, state, src=str(src), action="scanned")
        return

    file_id = state.allocate_id()
    dst = destination_for(dst_dir, file_id, ext)
    _info(cfg, f'"{src}","{dst}"')

    try:
        copy_file(src, dst, preserve_metadata=cfg.preserve_metadata)
    except CopyError as e:
        state.copy_errors += 1
        _error(cfg, str(e))
        _record(
            cfg,
            state,
            src=str(src),
            dst=str(dst),
            id=file_id,
            action="failed",
            reason=str(e),
        )
        return

    state.copied += 1
    _record(cfg, state, src=str(src), dst=str(dst), id=file_id, action="copied")


def scan_dir(
    cfg: ImoConfig, state: ScanState, src_dir: Path, dst_dir: Path, depth: int
) -> None:
    if depth > cfg.max_depth:
        state.depth_limit_stops += 1
        return

    # never read the output directory back into itself
    if _same_dir(src_dir, dst_dir):
        return

    try:
        entries = _list_dir(src_dir)
    except DirectoryReadError as e:
        state.dir_errors += 1
        _error(cfg, str(e))
        return

    for entry, is_dir in entries:
        if is_dir:
            scan_dir(cfg, state, entry, dst_dir, depth + 1)
        else:
            _process_file(cfg, state, entry, dst_dir)


def scan_tree(cfg: ImoConfig) -> ScanState:
    state = ScanState()
    scan_dir(cfg, state, cfg.input_dir, cfg.output_dir, 0)
    return state
