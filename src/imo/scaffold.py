from __future__ import annotations

from .errors import ConfigError
from .model import ImoConfig


def ensure_output_dir(cfg: ImoConfig) -> None:
    """Create the output directory when `cfg.mkdirs`; otherwise it must exist."""
    out = cfg.output_dir
    if cfg.mkdirs:
        out.mkdir(parents=True, exist_ok=True)
        return
    if not out.is_dir():
        raise ConfigError(f"output directory does not exist: {out}")
