"""
Command-line interface for Hivelang (hive).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from . import lexer, parser
from .errors import HivelangError
from .runtime.interpreter import Interpreter
from .schemas import ExecutionResult
from .version import LANGUAGE_VERSION, __version__

STARTER_SCRIPT = '''bot "StarterBot"
  description "Replies to greetings and asks for help topics"

  on input when input contains "hello"
    say f"Hello! You said: {input}"
  end

  on input
    call general.respond with { message: input } as reply
    say reply.text ?? "I'm not sure how to help with that yet."
  end

  on event "reminder"
    say f"Reminder: {input}"
  end
end
'''


def build_cli_parser() -> argparse.ArgumentParser:
    cli = argparse.ArgumentParser(prog="hive", description="Hivelang CLI")
    cli.add_argument(
        "--version",
        action="version",
        version=f"Hivelang {__version__} ({LANGUAGE_VERSION}, Python {sys.version.split()[0]})",
    )
    cli.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level for the hivelang loggers",
    )
    sub = cli.add_subparsers(dest="command", required=True)

    tokens_cmd = sub.add_parser("tokens", help="Tokenize a .hive file and list tokens")
    tokens_cmd.add_argument("file", type=Path)

    parse_cmd = sub.add_parser("parse", help="Parse a .hive file and show AST")
    parse_cmd.add_argument("file", type=Path)

    check_cmd = sub.add_parser("check", help="Check that a .hive file tokenizes and parses")
    check_cmd.add_argument("file", type=Path)

    run_cmd = sub.add_parser("run", help="Run a .hive file against one input")
    run_cmd.add_argument("file", type=Path)
    run_cmd.add_argument("--input", default="", help="Input text bound to `input`")
    run_cmd.add_argument("--vars", default=None, help="JSON object of initial variables")
    run_cmd.add_argument(
        "--simulate",
        action="store_true",
        help="Answer every tool call with an echo of its arguments",
    )

    emit_cmd = sub.add_parser("emit", help="Load a .hive file and emit a named event")
    emit_cmd.add_argument("file", type=Path)
    emit_cmd.add_argument("event", type=str)
    emit_cmd.add_argument("--input", default="", help="Input value bound to `input`")
    emit_cmd.add_argument("--simulate", action="store_true")

    init_cmd = sub.add_parser("init", help="Scaffold a starter bot.hive")
    init_cmd.add_argument("target_dir", nargs="?", default=".")
    init_cmd.add_argument("--force", action="store_true", help="Overwrite an existing bot.hive")

    return cli


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Cannot read {path}: {exc}") from exc


def simulated_tool(args: dict[str, Any], context: Any) -> dict[str, Any]:
    return {"success": True, "data": dict(args)}


def _print_result(result: ExecutionResult) -> None:
    print(json.dumps(result.model_dump(), indent=2, default=str))


def _parse_vars(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"--vars must be a JSON object: {exc}") from exc
    if not isinstance(data, dict):
        raise SystemExit("--vars must be a JSON object")
    return data


def _build_interpreter(simulate: bool) -> Interpreter:
    interpreter = Interpreter()
    if simulate:
        interpreter.set_fallback_tool_handler(simulated_tool)
    return interpreter


def main(argv: list[str] | None = None) -> None:
    cli = build_cli_parser()
    args = cli.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "init":
        dest = Path(args.target_dir)
        target = dest / "bot.hive"
        if target.exists() and not args.force:
            print(f"{target} already exists (use --force to overwrite)")
            raise SystemExit(1)
        dest.mkdir(parents=True, exist_ok=True)
        target.write_text(STARTER_SCRIPT, encoding="utf-8")
        print(json.dumps({"status": "ok", "path": str(target)}, indent=2))
        return

    source = read_source(args.file)

    try:
        if args.command == "tokens":
            for token in lexer.Lexer(source, filename=str(args.file)).tokenize():
                print(f"{token.line}:{token.column}\t{token.type}\t{token.value!r}")
            return

        if args.command == "parse":
            program = parser.parse_source(source)
            print(json.dumps(asdict(program), indent=2, default=str))
            return

        if args.command == "check":
            Interpreter().load(source)
            print("OK")
            return

        if args.command == "run":
            interpreter = _build_interpreter(args.simulate)
            result = interpreter.run_sync(source, args.input, _parse_vars(args.vars))
            _print_result(result)
            return

        if args.command == "emit":
            interpreter = _build_interpreter(args.simulate)
            interpreter.load(source)
            result = interpreter.emit_event_sync(args.event, args.input)
            _print_result(result)
            return
    except HivelangError as exc:
        print(f"{args.file}: {exc}")
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover
    main()
