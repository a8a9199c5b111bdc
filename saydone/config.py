from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path

import pendulum
from dotenv import load_dotenv

DEFAULT_HIPCHAT_URL = "https://api.hipchat.com/v2/"
DEFAULT_SLACK_URL = "https://slack.com/api/"
DEFAULT_LOG_FILE = "~/.saydone.log"

MISSING_ENDPOINTS_MESSAGE = (
    "Environment vars are not set, Please set at least one endpoint vars "
    "for the application to work."
)


def load_environment() -> None:
    """Load environment variables from a .env file if present."""
    env_file = os.getenv("ENV_FILE", ".env")
    env_path = Path(env_file)
    if env_path.is_file():
        load_dotenv(env_path)
    else:
        # Fallback: load .env in current working directory if ENV_FILE is missing
        default_path = Path(".env")
        if default_path.is_file():
            load_dotenv(default_path)


def resolve_log_file(override: Path | None = None) -> Path:
    """Log file from the CLI override, else SAYDONE_LOG_FILE, else ~/.saydone.log."""
    if override is not None:
        return override
    return Path(os.getenv("SAYDONE_LOG_FILE", DEFAULT_LOG_FILE)).expanduser()


def _parse_seconds(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None


def parse_timeout(raw: str | None) -> pendulum.Duration | None:
    """Parse a timeout given in seconds ("3600", "1.5") or as ISO 8601 ("PT24H")."""
    if raw is None or not raw.strip():
        return None

    value = raw.strip()
    seconds = _parse_seconds(value)
    if seconds is not None:
        if not math.isfinite(seconds) or seconds <= 0:
            raise ValueError(f"Invalid timeout {raw!r}: must be a positive number of seconds")
        duration = pendulum.duration(seconds=seconds)
    else:
        try:
            duration = pendulum.parse(value)
        except (pendulum.parsing.exceptions.ParserError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid timeout {raw!r}: {exc}") from exc
        if not isinstance(duration, pendulum.Duration):
            raise ValueError(f"Invalid timeout {raw!r}: not a duration")

    if duration.total_seconds() <= 0:
        raise ValueError(f"Invalid timeout {raw!r}: must be positive")
    return duration


@dataclass(frozen=True)
class Settings:
    hipchat_auth_token: str = ""
    hipchat_user: str = ""
    hipchat_url: str = DEFAULT_HIPCHAT_URL
    slack_auth_token: str = ""
    slack_user: str = ""
    slack_url: str = DEFAULT_SLACK_URL
    notify_email: str = ""
    mail_from: str = ""
    smtp_host: str = "localhost"
    smtp_port: int = 25
    timeout: pendulum.Duration | None = None
    request_timeout: int = 30
    log_file: Path = Path(DEFAULT_LOG_FILE).expanduser()

    @property
    def hipchat_enabled(self) -> bool:
        return bool(self.hipchat_auth_token and self.hipchat_user)

    @property
    def slack_enabled(self) -> bool:
        return bool(self.slack_auth_token and self.slack_user)

    @property
    def email_enabled(self) -> bool:
        return bool(self.notify_email)

    @property
    def any_channel_enabled(self) -> bool:
        return self.hipchat_enabled or self.slack_enabled or self.email_enabled

    @property
    def timeout_seconds(self) -> float | None:
        if self.timeout is None:
            return None
        return self.timeout.total_seconds()

    @classmethod
    def from_env(cls) -> "Settings":
        load_environment()

        try:
            timeout = parse_timeout(os.getenv("SAYDONE_TIMEOUT"))
        except ValueError as exc:
            raise RuntimeError(f"SAYDONE_TIMEOUT: {exc}") from exc

        smtp_port_raw = os.getenv("SMTP_PORT", "25")
        request_timeout_raw = os.getenv("SAYDONE_HTTP_TIMEOUT", "30")
        try:
            smtp_port = int(smtp_port_raw)
            request_timeout = int(request_timeout_raw)
        except ValueError as exc:
            raise RuntimeError(f"Invalid numeric environment variable: {exc}") from exc

        settings = cls(
            hipchat_auth_token=os.getenv("HIPCHAT_AUTHTOKEN", "").strip(),
            hipchat_user=os.getenv("HIPCHAT_USER", "").strip(),
            hipchat_url=os.getenv("HIPCHAT_URL", DEFAULT_HIPCHAT_URL),
            slack_auth_token=os.getenv("SLACK_AUTHTOKEN", "").strip(),
            slack_user=os.getenv("SLACK_USER", "").strip(),
            slack_url=os.getenv("SLACK_URL", DEFAULT_SLACK_URL),
            notify_email=os.getenv("SAYDONE_EMAIL", "").strip(),
            mail_from=os.getenv("SAYDONE_MAIL_FROM", "").strip(),
            smtp_host=os.getenv("SMTP_HOST", "localhost"),
            smtp_port=smtp_port,
            timeout=timeout,
            request_timeout=request_timeout,
            log_file=resolve_log_file(),
        )

        if not settings.any_channel_enabled:
            raise RuntimeError(MISSING_ENDPOINTS_MESSAGE)

        return settings
