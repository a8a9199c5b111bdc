from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..config import Settings
from ..notifications.message import current_hostname, format_notification
from ..notifications.reporting import DispatchReport, NotificationDispatcher
from ..runner.command import CommandError, CommandResult, run_command


@dataclass(slots=True)
class PipelineResult:
    command: CommandResult
    report: DispatchReport
    error: CommandError | None = None

    @property
    def exit_code(self) -> int:
        if self.error is None:
            return 0
        returncode = self.command.returncode
        if returncode is not None and returncode > 0:
            return returncode
        return 1


def run_and_notify(
    settings: Settings,
    argv: Sequence[str],
    logger: logging.Logger,
    dispatcher: NotificationDispatcher | None = None,
) -> PipelineResult:
    error: CommandError | None = None
    try:
        result = run_command(argv, timeout=settings.timeout_seconds, logger=logger)
    except CommandError as exc:
        # Partial output is still worth a notification.
        logger.error("%s", exc)
        error = exc
        result = exc.result

    hostname = current_hostname(logger)
    message = format_notification(
        hostname,
        result.output,
        failure=result.describe_failure() if error else None,
    )

    dispatcher = dispatcher or NotificationDispatcher(settings, logger)
    report = dispatcher.dispatch(message, hostname)

    logger.debug(
        "Notifications: %d sent, %d skipped, %d failed.",
        len(report.sent),
        len(report.skipped),
        len(report.failed),
    )
    return PipelineResult(command=result, report=report, error=error)
