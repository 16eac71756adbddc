from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .config import load_toml, parse_config, resolve_path
from .errors import ConfigError
from .model import ImoConfig, ScanState
from .report import write_report
from .scaffold import ensure_output_dir
from .scan import scan_tree
from .utils import as_path

VERSION = "1.0.0"


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="imo",
        description="Image Organizer: copy matching files from a directory tree into one flat, numbered directory.",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Optional config TOML; command-line flags override its values.",
    )
    p.add_argument("-i", "--input", default=None, help="Input directory (default: .).")
    p.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory (default: ./image-organizer).",
    )
    p.add_argument(
        "-e",
        "--ext",
        default=None,
        help="File extensions separated by '|' (default: jpg|jpeg|png|bmp).",
    )
    p.add_argument(
        "-d", "--depth", type=int, default=None, help="Search depth (default: 10)."
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=None,
        help="-v shows errors, -vv shows errors and messages.",
    )
    p.add_argument(
        "-s",
        "--scan-only",
        action="store_true",
        default=None,
        help="Search without copy.",
    )
    p.add_argument(
        "--no-mkdirs",
        action="store_true",
        help="Do not create the output directory; it must already exist.",
    )
    p.add_argument(
        "--preserve-metadata",
        action="store_true",
        default=None,
        help="Copy timestamps and permission bits along with the bytes.",
    )
    p.add_argument(
        "--print-config",
        action="store_true",
        help="Print the resolved config and exit.",
    )
    p.add_argument(
        "--write-report",
        default=None,
        help="Optional path to write a JSON run report (every qualifying file).",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return p


def _set(root: Dict[str, Any], path: str, value: Any) -> None:
    table, key = path.split(".")
    root.setdefault(table, {})[key] = value


def apply_overrides(root: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    if args.input is not None:
        _set(root, "paths.input", args.input)
    if args.output is not None:
        _set(root, "paths.output", args.output)
    if args.ext is not None:
        _set(root, "filter.extensions", args.ext)
    if args.depth is not None:
        _set(root, "scan.max_depth", args.depth)
    if args.verbose is not None:
        _set(root, "scan.verbosity", min(args.verbose, 2))
    if args.scan_only:
        _set(root, "scan.scan_only", True)
    if args.no_mkdirs:
        _set(root, "io.mkdirs", False)
    if args.preserve_metadata:
        _set(root, "io.preserve_metadata", True)
    return root


def print_config_summary(cfg: ImoConfig) -> None:
    print("imo config summary")
    print("------------------")
    print(f"input      : {cfg.input_dir}")
    print(f"output     : {cfg.output_dir}")
    print(f"extensions : {'|'.join(sorted(cfg.extensions))}")
    print(f"max_depth  : {cfg.max_depth}")
    print(f"verbosity  : {cfg.verbosity.name.lower()}")
    print(f"scan_only  : {cfg.scan_only}")
    print(f"mkdirs     : {cfg.mkdirs}")


def print_summary(cfg: ImoConfig, state: ScanState) -> None:
    exts = "|".join(e.lstrip(".") for e in sorted(cfg.extensions))
    print("")
    print(f"Image Organizer v{VERSION}")
    print("")
    print(f"Found {state.found} files with extension {exts} under directory")
    print(cfg.input_dir)
    if state.copied:
        print(f"Copied {state.copied} files to directory")
        print(cfg.output_dir)
    if state.failed:
        print(
            f"Encountered {state.failed} failures, including "
            f"{state.copy_errors} copy failures and {state.dir_errors} directory failures"
        )
    if state.depth_limit_stops:
        print(
            f"Stopped at maximum depth {cfg.max_depth} for {state.depth_limit_stops} times"
        )
    print("")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        root = load_toml(resolve_path(args.config, "config")) if args.config else {}
        cfg = parse_config(apply_overrides(root, args))
        if args.write_report:
            cfg = replace(cfg, record_details=True)
    except ConfigError as e:
        print(f"[imo] config error: {e}", file=sys.stderr)
        return 2

    if args.print_config:
        print_config_summary(cfg)
        return 0

    if cfg.mkdirs or not cfg.scan_only:
        try:
            ensure_output_dir(cfg)
        except (ConfigError, OSError) as e:
            print(f"[imo] output error: {e}", file=sys.stderr)
            return 3

    state = scan_tree(cfg)
    print_summary(cfg, state)

    if args.write_report:
        try:
            rp = write_report(as_path(args.write_report), cfg, state)
        except (OSError, RuntimeError) as e:
            print(f"[imo] report error: {e}", file=sys.stderr)
            return 4
        print(f"[imo] wrote run report: {rp}")

    # Non-zero if any failures
    return 5 if state.failed else 0
