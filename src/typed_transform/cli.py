"""Command-line interface for typed-transform."""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TextIO

import yaml

from typed_transform.config import ConfigLoadError, dump_effective_config, load_config
from typed_transform.errors import TransformError
from typed_transform.observability import (
    LoggingConfig,
    get_event_logger,
    setup_logging,
    shutdown_logging,
)
from typed_transform.transformer import Transformer

_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})
EXIT_USAGE: Final[int] = 1
EXIT_TRANSFORM: Final[int] = 2

_logger = get_event_logger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = EXIT_USAGE

    def __str__(self) -> str:
        return self.message


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typed-transform",
        description=(
            "typed-transform — decode JSON/YAML documents into typed Python objects.\n\n"
            "Common workflows:\n"
            "  typed-transform decode pkg.models:Order order.json\n"
            "  typed-transform decode pkg.models:Order order.yaml --lenient\n"
            "  typed-transform config          Show the effective config\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to a TOML config (default: ./typed_transform.toml or ./pyproject.toml).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help="Log level for JSON-lines logs on stderr (default: from config).",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    decode = commands.add_parser(
        "decode",
        parents=[common],
        help="Decode a document into a class and print its canonical JSON.",
    )
    decode.add_argument("target", help="Target class as 'module:QualifiedName'.")
    decode.add_argument("source", help="JSON or YAML file to decode ('-' reads JSON from stdin).")
    decode.add_argument(
        "--lenient",
        action="store_true",
        default=False,
        help="Pass mismatched values through and keep defaults for missing fields.",
    )
    decode.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print output with this indent instead of canonical compact JSON.",
    )

    commands.add_parser("config", parents=[common], help="Print the effective config as JSON.")
    return parser


def resolve_target(spec: str) -> type:
    """Import ``module:QualifiedName`` and return the class it names."""
    module_name, sep, qualname = spec.partition(":")
    if not sep or not module_name or not qualname:
        raise CLIError(f"target must look like 'module:ClassName', got {spec!r}")
    try:
        resolved: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise CLIError(f"cannot import module {module_name!r}: {exc}") from exc
    for part in qualname.split("."):
        try:
            resolved = getattr(resolved, part)
        except AttributeError as exc:
            raise CLIError(f"{module_name!r} has no attribute {qualname!r}") from exc
    if not isinstance(resolved, type):
        raise CLIError(f"{spec!r} does not name a class")
    return resolved


def load_document(source: str, stdin: TextIO) -> object:
    if source == "-":
        try:
            return json.load(stdin)
        except json.JSONDecodeError as exc:
            raise CLIError(f"invalid JSON on stdin: {exc}") from exc

    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"unable to read {path}: {exc}") from exc

    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise CLIError(f"invalid YAML in {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CLIError(f"invalid JSON in {path}: {exc}") from exc


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config_path)
    except ConfigLoadError as exc:
        print(f"error: {exc}", file=err)
        return EXIT_USAGE

    level = args.log_level or config.log_level
    try:
        setup_logging(LoggingConfig(level=level, stream=err))
    except ValueError as exc:
        print(f"error: {exc}", file=err)
        return EXIT_USAGE

    try:
        if args.command == "config":
            print(dump_effective_config(config), file=out)
            return 0
        return _run_decode(
            args,
            transformer=Transformer(config),
            stdin=stdin if stdin is not None else sys.stdin,
            out=out,
        )
    except CLIError as exc:
        print(f"error: {exc}", file=err)
        return exc.exit_code
    except TransformError as exc:
        _logger.info(
            "cli_decode_failed",
            path=exc.dotted_path,
            kind=type(exc).__name__,
            reason=exc.reason,
        )
        print(f"error: {type(exc).__name__}: {exc}", file=err)
        return EXIT_TRANSFORM
    finally:
        shutdown_logging()


def _run_decode(
    args: argparse.Namespace,
    *,
    transformer: Transformer,
    stdin: TextIO,
    out: TextIO,
) -> int:
    target = resolve_target(args.target)
    document = load_document(args.source, stdin)
    instance = transformer.from_json(document, target, False if args.lenient else None)
    if args.indent is None:
        print(transformer.dumps(instance), file=out)
        return 0
    encoded = transformer.to_json(instance)
    print(json.dumps(encoded, indent=args.indent, sort_keys=True, ensure_ascii=False), file=out)
    return 0


def cli_entrypoint() -> int:
    return main()


__all__ = ["CLIError", "build_parser", "cli_entrypoint", "load_document", "main", "resolve_target"]
