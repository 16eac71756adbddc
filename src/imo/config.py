from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import ConfigError
from .model import ImoConfig, Verbosity
from .scan import normalize_extensions
from .utils import as_path

try:
    import tomllib  # py311+
except ModuleNotFoundError as exc:  # pragma: no cover
    raise SystemExit("Python 3.11+ required (missing tomllib).") from exc

DEFAULT_INPUT = "."
DEFAULT_OUTPUT = "image-organizer"
DEFAULT_EXTENSIONS = "jpg|jpeg|png|bmp"
DEFAULT_MAX_DEPTH = 10

_VERBOSITY_NAMES = {
    "silent": Verbosity.SILENT,
    "errors": Verbosity.ERRORS,
    "all": Verbosity.ALL,
}


def load_toml(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise ConfigError(
            f"Config file not found: {path}\n"
            "Create it by copying config.example.toml and editing paths."
        ) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e.strerror or e}") from e
    try:
        return tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config is not valid UTF-8: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"TOML parse error in {path}: {e}") from e


def resolve_path(s: str, what: str) -> Path:
    try:
        return as_path(s)
    except (OSError, RuntimeError) as e:
        raise ConfigError(f"Cannot resolve {what} path {s!r}: {e}") from e


def _get(root: Dict[str, Any], path: str) -> Any:
    cur: Any = root
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur.get(part)
    return cur


def expect(root: Dict[str, Any], path: str, typ: type, default: Any) -> Any:
    """Traverse `path` (dot-separated); return `default` when missing.

    Raises `ConfigError` on type mismatches.
    """
    v = _get(root, path)
    if v is None:
        return default
    # bool is an int subclass; keep "max_depth = true" out
    if not isinstance(v, typ) or (typ is int and isinstance(v, bool)):
        raise ConfigError(
            f"Expected {typ.__name__} for '{path}', got: {type(v).__name__}"
        )
    return v


def parse_extensions(value: Union[str, List[str]]) -> frozenset[str]:
    """Accept "jpg|png" or ["jpg", "png"]; returns {".jpg", ".png"}."""
    if isinstance(value, str):
        parts = value.split("|")
    elif isinstance(value, list) and all(isinstance(x, str) for x in value):
        parts = value
    else:
        raise ConfigError(
            f"filter.extensions must be a string or list of strings, got: {value!r}"
        )
    exts = normalize_extensions(parts)
    if not exts:
        raise ConfigError(f"No usable extensions in {value!r}")
    return exts


def parse_verbosity(value: Union[str, int]) -> Verbosity:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid verbosity: {value!r}")
    if isinstance(value, int):
        try:
            return Verbosity(value)
        except ValueError as e:
            raise ConfigError(f"Invalid verbosity level: {value}") from e
    if isinstance(value, str) and value.strip().lower() in _VERBOSITY_NAMES:
        return _VERBOSITY_NAMES[value.strip().lower()]
    raise ConfigError(
        f"scan.verbosity must be one of {', '.join(_VERBOSITY_NAMES)}, got: {value!r}"
    )


def parse_config(root: Dict[str, Any]) -> ImoConfig:
    # ---- paths
    input_dir = resolve_path(
        expect(root, "paths.input", str, DEFAULT_INPUT), "input"
    )
    output_dir = resolve_path(
        expect(root, "paths.output", str, DEFAULT_OUTPUT), "output"
    )

    # ---- filter
    raw_ext = _get(root, "filter.extensions")
    extensions = parse_extensions(DEFAULT_EXTENSIONS if raw_ext is None else raw_ext)

    # ---- scan
    max_depth = expect(root, "scan.max_depth", int, DEFAULT_MAX_DEPTH)
    if max_depth < 0:
        raise ConfigError(f"scan.max_depth must be >= 0, got: {max_depth}")
    raw_verbosity = _get(root, "scan.verbosity")
    verbosity = (
        Verbosity.SILENT if raw_verbosity is None else parse_verbosity(raw_verbosity)
    )

    return ImoConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        extensions=extensions,
        max_depth=max_depth,
        verbosity=verbosity,
        scan_only=expect(root, "scan.scan_only", bool, False),
        mkdirs=expect(root, "io.mkdirs", bool, True),
        preserve_metadata=expect(root, "io.preserve_metadata", bool, False),
    )
