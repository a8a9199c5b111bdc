from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import Sequence

import pendulum

module_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandResult:
    argv: list[str]
    output: bytes
    returncode: int | None
    elapsed: pendulum.Interval | None = field(default=None, compare=False)
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    def describe_failure(self) -> str:
        if self.timed_out:
            return "timed out"
        if self.returncode is None:
            return "could not be started"
        return f"exit status {self.returncode}"


class CommandError(RuntimeError):
    """Raised when the child could not run, exited non-zero or timed out."""

    def __init__(self, message: str, result: CommandResult) -> None:
        super().__init__(message)
        self.result = result


def run_command(
    argv: Sequence[str],
    timeout: float | None = None,
    logger: logging.Logger | None = None,
) -> CommandResult:
    log = logger or module_logger
    argv = list(argv)
    if not argv:
        raise ValueError("A command is required.")

    log.debug("Running %r (timeout=%s)", argv, timeout)
    started = pendulum.now()

    try:
        completed = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        result = CommandResult(
            argv=argv,
            output=exc.output or b"",
            returncode=None,
            elapsed=pendulum.now() - started,
            timed_out=True,
        )
        raise CommandError(
            f"{argv[0]}: timed out after {result.elapsed.in_words()}", result
        ) from exc
    except OSError as exc:
        result = CommandResult(
            argv=argv,
            output=b"",
            returncode=None,
            elapsed=pendulum.now() - started,
        )
        raise CommandError(f"{argv[0]}: {exc}", result) from exc

    result = CommandResult(
        argv=argv,
        output=completed.stdout or b"",
        returncode=completed.returncode,
        elapsed=pendulum.now() - started,
    )
    log.debug(
        "%s exited with status %d after %s",
        argv[0],
        completed.returncode,
        result.elapsed.in_words(),
    )

    if completed.returncode != 0:
        raise CommandError(
            f"{argv[0]}: exit status {completed.returncode}", result
        )
    return result
