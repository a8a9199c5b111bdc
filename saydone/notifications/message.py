from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)

UNKNOWN_HOST = "unknown-host"


def current_hostname(log: logging.Logger | None = None) -> str:
    try:
        return socket.gethostname() or UNKNOWN_HOST
    except OSError as exc:
        (log or logger).error("Error fetching hostname: %s", exc)
        return UNKNOWN_HOST


def format_notification(
    hostname: str,
    output: bytes,
    failure: str | None = None,
) -> str:
    """Header line naming the host, then the command output verbatim."""
    if failure:
        header = f"Command running at {hostname} failed ({failure}) with the following output:"
    else:
        header = f"Command running at {hostname} is done with the following output:"
    return f"{header}\n{output.decode('utf-8', errors='replace')}"
