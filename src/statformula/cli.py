"""Command-line interface for StatFormula."""

import argparse
import logging
import sys
from typing import Optional

import uvicorn

from .config import settings


def _parse_assignment(text: str) -> tuple[str, str]:
    """Split ``TOKEN=VALUE`` at the last ``=``."""
    token, sep, value = text.rpartition("=")
    if not sep or not token:
        raise argparse.ArgumentTypeError(f"expected TOKEN=VALUE, got {text!r}")
    return token, value


def _format_number(value) -> str:
    """Print integral results without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_keyed(text: str) -> tuple[str, str, str]:
    """Split ``TOKEN:KEY=VALUE`` into its parts."""
    placeholder, value = _parse_assignment(text)
    token, sep, key = placeholder.partition(":")
    if not sep or not token or not key:
        raise argparse.ArgumentTypeError(f"expected TOKEN:KEY=VALUE, got {text!r}")
    return token, key, value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="StatFormula - placeholder substitution and evaluation for game-stat formulas"
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, help=f"Logging level (default: {settings.log_level})"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Eval command
    eval_parser = subparsers.add_parser("eval", help="Substitute placeholders and evaluate a formula")
    eval_parser.add_argument("formula", help='Formula, e.g. "{base} * 2 + {attribute:str}"')
    eval_parser.add_argument(
        "--set", dest="values", action="append", type=_parse_assignment, default=[],
        metavar="TOKEN=VALUE", help="Replace TOKEN with VALUE (repeatable)",
    )
    eval_parser.add_argument(
        "--stage", dest="staged", action="append", type=_parse_assignment, default=[],
        metavar="TOKEN=VALUE", help="One-shot replacement for TOKEN (repeatable)",
    )
    eval_parser.add_argument(
        "--key", dest="keyed", action="append", type=_parse_keyed, default=[],
        metavar="TOKEN:KEY=VALUE", help="Replace {TOKEN:KEY} with VALUE (repeatable)",
    )

    return parser


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "eval":
        sys.exit(run_eval(args.formula, args.values, args.staged, args.keyed))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "statformula.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_eval(
    formula: str,
    values: list[tuple[str, str]],
    staged: list[tuple[str, str]],
    keyed: list[tuple[str, str, str]],
) -> int:
    """Evaluate a formula and print the result. Returns the exit status."""
    from .formula import FormulaParser, build_filters

    keyed_specs: dict[str, dict[str, str]] = {}
    for token, key, value in keyed:
        keyed_specs.setdefault(token, {})[key] = value

    filters = build_filters(
        values=dict(values),
        staged=dict(staged),
        keyed=[{"token": token, "values": mapping} for token, mapping in keyed_specs.items()],
    )
    evaluation = FormulaParser.evaluate_formula(formula, filters)

    if not evaluation.success:
        print(f"error: {evaluation.error}", file=sys.stderr)
        if evaluation.unresolved:
            print(f"unresolved: {', '.join(evaluation.unresolved)}", file=sys.stderr)
        return 1

    print(_format_number(evaluation.result))
    return 0


if __name__ == "__main__":
    main()
