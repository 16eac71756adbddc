from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .model import ImoConfig, ScanState
from .utils import utc_now_iso

REPORT_VERSION = 1


def build_report(cfg: ImoConfig, state: ScanState) -> Dict[str, Any]:
    return {
        "schema_version": REPORT_VERSION,
        "generated_at_utc": utc_now_iso(),
        "input_dir": str(cfg.input_dir),
        "output_dir": str(cfg.output_dir),
        "extensions": sorted(cfg.extensions),
        "max_depth": cfg.max_depth,
        "scan_only": cfg.scan_only,
        **state.counters(),
        "details": state.details,
    }


def write_report(path: Path, cfg: ImoConfig, state: ScanState) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(
        json.dumps(build_report(cfg, state), indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    tmp.replace(path)
    return path
