"""shwifty command-line interface."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import yaml

from .codegen import builder, classifier, descriptor, parser, pretty, serializer
from .codegen.options import Options
from .telemetry.logger import configure, get_logger
from .utils.config import DEFAULT_CONFIG_PATH, deep_update, load_config, parse_overrides

_FORMAT_CHOICES = ("swift", "json", "yaml")

_LOG = get_logger("shwifty.cli")


def build_parser() -> argparse.ArgumentParser:
    parser_ = argparse.ArgumentParser(
        prog="shwifty", description="Generate Swift types from algebraic data type descriptors"
    )
    parser_.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None,
        help="Optional path to a YAML configuration file.",
    )
    parser_.add_argument(
        "--set",
        dest="overrides",
        action="append",
        metavar="KEY=VALUE",
        help="Override configuration values using dot notation (e.g. options.indent=2).",
    )
    parser_.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser_.add_subparsers(dest="command", required=True)
    _add_generate_parser(subparsers)
    _add_type_parser(subparsers)
    return parser_


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    if args.verbose:
        configure(logging.DEBUG)

    try:
        options = load_options(args.config, args.overrides)
        if args.command == "generate":
            return _cmd_generate(args, options)
        if args.command == "type":
            return _cmd_type(args, options)
    except Exception as exc:  # pragma: no cover - defensive CLI guard
        _LOG.debug("command failed", exc_info=True)
        print(f"[shwifty] error: {exc}", file=sys.stderr)
        return 1
    return 1


def load_options(config_path: Path | None, overrides: Sequence[str] | None = None) -> Options:
    """Read ``options`` from ``config_path`` and apply ``--set`` overrides."""

    data: dict[str, Any] = {}
    if config_path is not None:
        data = load_config(config_path)
    data = deep_update(data, parse_overrides(overrides))
    section = data.get("options")
    if section is not None and not isinstance(section, dict):
        raise ValueError("'options' must be a mapping")
    return Options.from_mapping(section)


# ---------------------------------------------------------------------------
# Sub-command wiring


def _add_generate_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    sub = subparsers.add_parser("generate", help="Generate Swift for every declaration in a file")
    sub.add_argument("descriptors", type=Path, help="Path to a YAML descriptor file")
    sub.add_argument("--format", choices=_FORMAT_CHOICES, default="swift", help="Output format")
    sub.add_argument(
        "--expand-optional",
        action="store_true",
        help="Render Optional<A> instead of A?",
    )


def _add_type_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    sub = subparsers.add_parser("type", help="Classify a single type expression")
    sub.add_argument("expression", help="Type expression, e.g. 'Either String (Maybe a)'")
    sub.add_argument("--json", action="store_true", help="Emit the type AST as JSON")
    sub.add_argument(
        "--expand-optional",
        action="store_true",
        help="Render Optional<A> instead of A?",
    )


def _cmd_generate(args: argparse.Namespace, options: Options) -> int:
    if args.expand_optional:
        options = options.merge({"optional_expand": True})
    infos = descriptor.load_descriptors(args.descriptors)
    _LOG.info("loaded %d declaration(s) from %s", len(infos), args.descriptors)
    result = builder.get_shwifty_many(infos, options)

    if args.format == "swift":
        blocks = [
            pretty.pretty_swift_data(item.data, options)
            for item in result.generated
            if item.data is not None
        ]
        if blocks:
            print("\n\n".join(blocks))
    else:
        payload = [_artifact_payload(item) for item in result.generated]
        if args.format == "json":
            print(json.dumps(payload, indent=2))
        else:
            print(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), end="")

    for name, error in result.errors.items():
        print(f"[shwifty] {name}: {error}", file=sys.stderr)
    return 0 if result.ok else 1


def _cmd_type(args: argparse.Namespace, options: Options) -> int:
    if args.expand_optional:
        options = options.merge({"optional_expand": True})
    expr = parser.parse_type(args.expression)
    swift_type = classifier.classify_poly(expr)
    if args.json:
        print(serializer.to_json(swift_type))
    else:
        print(pretty.pretty_ty(swift_type, options))
    return 0


def _artifact_payload(item: builder.Generated) -> dict[str, Any]:
    entry: dict[str, Any] = {"name": item.name}
    swift_type = item.swift_type
    if swift_type is not None:
        entry["type"] = _plain(serializer.to_payload(swift_type))
    if item.data is not None:
        entry["declaration"] = _plain(serializer.to_payload(item.data))
    return entry


def _plain(payload: Any) -> Any:
    return json.loads(json.dumps(payload))


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
