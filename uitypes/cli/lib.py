"""Command line interface for inspecting catalogues.

Usage:
    python -m uitypes catalogues
    python -m uitypes types --catalogue pub
    python -m uitypes resolve UI.Frame UI.Button
    python -m uitypes validate UI.List state.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from uitypes.catalogue import CATALOGUES, list_catalogues
from uitypes.composer import ResolvedSchema
from uitypes.config import get_log_level
from uitypes.core import get_logger, setup_logging
from uitypes.engine import load_engine
from uitypes.errors import SchemaError
from uitypes.expression import parse

logger = get_logger("cli")


# =============================================================================
# Commands
# =============================================================================


def cmd_catalogues(_args: argparse.Namespace) -> int:
    """List the built-in catalogues."""
    for name in list_catalogues():
        print(f"{name:<6} {CATALOGUES[name].description}")
    return 0


def cmd_types(args: argparse.Namespace) -> int:
    """List the type names of a catalogue."""
    engine = load_engine(args.catalogue)
    for name in engine.registry.names():
        print(name)
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Print the resolved form of a type."""
    engine = load_engine(args.catalogue)
    resolved = engine.composer.resolve(args.name, [parse(a) for a in args.args])
    if isinstance(resolved, ResolvedSchema):
        print(json.dumps(resolved.to_dict(), indent=2))
    else:
        print(resolved)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a JSON document against a type."""
    value = _read_json(args.file)
    engine = load_engine(args.catalogue)
    result = engine.validate(value, args.name)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.valid else 1


def _read_json(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    return json.loads(Path(source).read_text(encoding="utf-8"))


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="python -m uitypes",
        description="Resolve and validate virtual UI datatypes",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: UITYPES_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    catalogues_parser = subparsers.add_parser("catalogues", help="List built-in catalogues")
    catalogues_parser.set_defaults(func=cmd_catalogues)

    types_parser = subparsers.add_parser("types", help="List type names of a catalogue")
    types_parser.set_defaults(func=cmd_types)

    resolve_parser = subparsers.add_parser("resolve", help="Show the resolved form of a type")
    resolve_parser.add_argument("name", help="Qualified type name, e.g. UI.Frame")
    resolve_parser.add_argument("args", nargs="*", help="Generic arguments as expressions")
    resolve_parser.set_defaults(func=cmd_resolve)

    validate_parser = subparsers.add_parser("validate", help="Validate a JSON document")
    validate_parser.add_argument("name", help="Qualified type name, e.g. UI.List")
    validate_parser.add_argument("file", help="JSON file, or '-' for stdin")
    validate_parser.set_defaults(func=cmd_validate)

    for sub in (types_parser, resolve_parser, validate_parser):
        sub.add_argument(
            "--catalogue",
            "-c",
            choices=list_catalogues(),
            default=None,
            help="Catalogue to load (default: UITYPES_CATALOGUE)",
        )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or get_log_level())
    try:
        return args.func(args)
    except SchemaError as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
        return 2
    except (OSError, json.JSONDecodeError) as exc:
        logger.error(f"Cannot read input: {exc}")
        return 2


__all__ = ["build_parser", "main"]
