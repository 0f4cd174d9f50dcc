"""Command-line interface for fbx_bridge."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from .api import load_fbx, write_fbx
from .config import BridgeConfig
from .core.sdk import SaveFormat


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fbx-bridge",
        description="Convert FBX scenes to JSON scene terms and back.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Read FBX_BRIDGE_* settings from this .env file instead of the nearest one.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    load = commands.add_parser("load", help="Extract an FBX file into a JSON scene term.")
    load.add_argument("path", type=Path, help="FBX file to read.")
    load.add_argument("-o", "--output", type=Path, default=None, help="Write JSON here instead of stdout.")
    load.add_argument("--sample-rate", type=float, default=None, help="Animation bake rate in samples per second.")

    save = commands.add_parser("save", help="Write a JSON scene term to an FBX file.")
    save.add_argument("term", type=Path, help="JSON file holding the scene term.")
    save.add_argument("path", type=Path, help="FBX file to write.")
    save.add_argument(
        "--format",
        default=SaveFormat.BINARY.value,
        help="Writer encoding: 'binary' (default) or 'ascii'. Other values write binary.",
    )
    save.add_argument(
        "--strict-references",
        action="store_true",
        help="Fail instead of dropping references to missing nodes, meshes or materials.",
    )
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = BridgeConfig.from_env(args.env_file)

    if args.command == "load":
        return _run_load(args, config)
    return _run_save(parser, args, config)


def _run_load(args: argparse.Namespace, config: BridgeConfig) -> int:
    if args.sample_rate is not None:
        config = dataclasses.replace(config, sample_rate=args.sample_rate)

    status, value = load_fbx(args.path, config=config)
    if status != "ok":
        print(f"error: {value}", file=sys.stderr)
        return 1

    document = json.dumps(value, indent=2)
    if args.output is None:
        print(document)
    else:
        args.output.write_text(document + "\n", encoding="utf-8")
    return 0


def _run_save(parser: argparse.ArgumentParser, args: argparse.Namespace, config: BridgeConfig) -> int:
    if not args.term.exists():
        parser.error(f"File not found: {args.term}")
    try:
        term = json.loads(args.term.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        parser.error(f"{args.term} is not valid JSON: {exc}")

    if args.strict_references:
        config = dataclasses.replace(config, strict_references=True)

    status, value = write_fbx(args.path, term, format=args.format, config=config)
    if status != "ok":
        print(f"error: {value}", file=sys.stderr)
        return 1
    print(value)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
