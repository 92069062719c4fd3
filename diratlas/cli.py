"""Command-line entry: ``manifest``, ``tree``, ``roots`` and ``gui``."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .checksum import supported_algorithms
from .config import ScanConfig, resolve_timezone
from .drives import list_root_directories
from .errors import InvalidArgumentError, ManifestGenerationError
from .manifest import generate_manifest
from .models import IMPORTER_COLUMN_NAMES
from .tree import DEFAULT_MAX_DEPTH, generate_directory_tree
from .utils import format_bytes

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="diratlas", description="Directory manifests, trees and roots.")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    m = sub.add_parser("manifest", help="write a CSV manifest of the files directly under each directory")
    m.add_argument("directories", nargs="*", help="root directories, scanned in order")
    m.add_argument("-o", "--output", required=True, help="manifest CSV path")
    m.add_argument("--options", help='importer options JSON: {"directoryJsonValue": [{"directory": "..."}]}')
    m.add_argument("--timezone", default=None, help='"local" (default), "UTC" or an IANA zone name')
    m.add_argument("--algorithm", default=None,
                   help="checksum algorithm, one of: " + ", ".join(supported_algorithms()) + " (default sha256)")
    m.add_argument("--header", action="store_true",
                   help="prepend a row of importer column names (the importer itself expects none)")

    t = sub.add_parser("tree", help="print the subdirectory tree of a directory as JSON")
    t.add_argument("path")
    t.add_argument("--max-depth", type=_positive_int, default=DEFAULT_MAX_DEPTH)

    sub.add_parser("roots", help="print usable top-level directories as JSON")
    sub.add_parser("gui", help="open the directory picker window")
    return ap


def _manifest_config(args: argparse.Namespace) -> ScanConfig:
    if args.options:
        config = ScanConfig.from_json(args.options)
        if args.directories:
            config = config.with_directories(list(config.directories) + args.directories)
    elif args.directories:
        config = ScanConfig(directories=tuple(args.directories))
    else:
        raise InvalidArgumentError("No directories given")
    if args.timezone is not None:
        config = replace(config, timezone=resolve_timezone(args.timezone))
    if args.algorithm:
        config = replace(config, checksum_algorithm=args.algorithm)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "manifest":
            header = IMPORTER_COLUMN_NAMES if args.header else None
            res = generate_manifest(_manifest_config(args), args.output, header=header)
            print(f"{res.records} records -> {res.output_path} ({format_bytes(res.size_bytes)})")
        elif args.command == "tree":
            print(json.dumps(generate_directory_tree(args.path, args.max_depth), ensure_ascii=False, indent=2))
        elif args.command == "roots":
            print(json.dumps(list_root_directories(), ensure_ascii=False, indent=2))
        elif args.command == "gui":
            from .app import run
            return run()
    except InvalidArgumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ManifestGenerationError as e:
        logger.error("%s (%s)", e, e.__cause__)
        print(f"error: {e}: {e.__cause__}", file=sys.stderr)
        return 1
    return 0
