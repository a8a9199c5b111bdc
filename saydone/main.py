from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO, Sequence

from . import __version__
from .config import Settings, parse_timeout, resolve_log_file
from .logs import configure_logging
from .pipeline.run_and_notify import run_and_notify


def _timeout_arg(value: str):
    try:
        return parse_timeout(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saydone",
        description="Runs a shell script and notify back when it's done.",
        epilog=(
            "Channels are configured through HIPCHAT_AUTHTOKEN/HIPCHAT_USER, "
            "SLACK_AUTHTOKEN/SLACK_USER and SAYDONE_EMAIL."
        ),
    )
    parser.add_argument(
        "--timeout",
        type=_timeout_arg,
        help="Kill the command after this long (seconds, e.g. 90 or 1.5, or ISO 8601, e.g. PT24H).",
    )
    parser.add_argument(
        "--log-file",
        type=lambda value: Path(value).expanduser(),
        help="Append diagnostics to this file. Defaults to ~/.saydone.log.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run, followed by its arguments.",
    )
    return parser


def echo_output(output: bytes, stream: BinaryIO | None = None) -> None:
    stream = stream or sys.stdout.buffer
    stream.write(output)
    stream.flush()


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        parser.print_help()
        return 0

    try:
        settings = Settings.from_env()
    except RuntimeError as exc:
        logger = configure_logging(resolve_log_file(args.log_file))
        logger.error("%s", exc)
        logger.error("Exiting...")
        return 1

    if args.timeout is not None:
        settings = replace(settings, timeout=args.timeout)
    if args.log_file is not None:
        settings = replace(settings, log_file=args.log_file)

    logger = configure_logging(settings.log_file)
    result = run_and_notify(settings, command, logger)

    # The captured output is always echoed last, whatever the notifications did.
    echo_output(result.command.output)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
