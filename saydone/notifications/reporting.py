from __future__ import annotations

"""
Fan a finished command's output out to every configured channel.

Each channel gets exactly one best-effort delivery attempt. A failing channel
is logged and reported on the console; the remaining channels still run.
"""

import logging
import smtplib
from dataclasses import dataclass, field
from typing import Callable

import requests

from ..config import Settings
from .hipchat import HipChatClient
from .mail import SmtpFactory, build_email, send_email
from .slack import SlackClient

SENT = "sent"
SKIPPED = "skipped"
FAILED = "failed"


class NotificationError(RuntimeError):
    def __init__(self, channel: str) -> None:
        super().__init__(
            f"Failed to send msg to {channel}, Please check your env vars."
        )
        self.channel = channel


@dataclass(slots=True)
class DeliveryResult:
    channel: str
    status: str
    detail: str = ""


@dataclass(slots=True)
class DispatchReport:
    results: list[DeliveryResult] = field(default_factory=list)

    def _with_status(self, status: str) -> list[DeliveryResult]:
        return [result for result in self.results if result.status == status]

    @property
    def sent(self) -> list[DeliveryResult]:
        return self._with_status(SENT)

    @property
    def skipped(self) -> list[DeliveryResult]:
        return self._with_status(SKIPPED)

    @property
    def failed(self) -> list[DeliveryResult]:
        return self._with_status(FAILED)


@dataclass(slots=True)
class Channel:
    name: str
    required: dict[str, str]
    deliver: Callable[[str, str], None]

    @property
    def missing(self) -> list[str]:
        return [env_name for env_name, value in self.required.items() if not value]


class NotificationDispatcher:
    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        session: requests.Session | None = None,
        smtp_factory: SmtpFactory = smtplib.SMTP,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._session = session
        self._smtp_factory = smtp_factory

    def channels(self) -> list[Channel]:
        s = self.settings
        return [
            Channel(
                name="hipchat",
                required={
                    "HIPCHAT_AUTHTOKEN": s.hipchat_auth_token,
                    "HIPCHAT_USER": s.hipchat_user,
                },
                deliver=self._send_hipchat,
            ),
            Channel(
                name="slack",
                required={
                    "SLACK_AUTHTOKEN": s.slack_auth_token,
                    "SLACK_USER": s.slack_user,
                },
                deliver=self._send_slack,
            ),
            Channel(
                name="email",
                required={"SAYDONE_EMAIL": s.notify_email},
                deliver=self._send_email,
            ),
        ]

    def dispatch(self, message: str, hostname: str) -> DispatchReport:
        report = DispatchReport()
        for channel in self.channels():
            missing = channel.missing
            if missing:
                self.logger.info(
                    "Skipping %s notification, %s not set.",
                    channel.name,
                    ", ".join(missing),
                )
                report.results.append(
                    DeliveryResult(channel.name, SKIPPED, ", ".join(missing))
                )
                continue

            try:
                self._attempt(channel, message, hostname)
            except NotificationError as exc:
                self.logger.error("%s", exc)
                report.results.append(DeliveryResult(channel.name, FAILED, str(exc)))
            else:
                self.logger.debug("Sent %s notification.", channel.name)
                report.results.append(DeliveryResult(channel.name, SENT))
        return report

    def _attempt(self, channel: Channel, message: str, hostname: str) -> None:
        try:
            channel.deliver(message, hostname)
        except Exception as exc:  # noqa: BLE001
            self.logger.debug("%s delivery raised %r", channel.name, exc, exc_info=True)
            raise NotificationError(channel.name) from exc

    def _send_hipchat(self, message: str, hostname: str) -> None:
        client = HipChatClient(
            self.settings.hipchat_auth_token,
            base_url=self.settings.hipchat_url,
            timeout=self.settings.request_timeout,
            session=self._session,
        )
        client.message_user(self.settings.hipchat_user, message)

    def _send_slack(self, message: str, hostname: str) -> None:
        client = SlackClient(
            self.settings.slack_auth_token,
            base_url=self.settings.slack_url,
            timeout=self.settings.request_timeout,
            session=self._session,
        )
        client.message_user(self.settings.slack_user, message)

    def _send_email(self, message: str, hostname: str) -> None:
        sender = self.settings.mail_from or f"saydone@{hostname}"
        subject = f"saydone: command finished on {hostname}"
        email = build_email(sender, self.settings.notify_email, subject, message)
        send_email(
            email,
            host=self.settings.smtp_host,
            port=self.settings.smtp_port,
            timeout=self.settings.request_timeout,
            smtp_factory=self._smtp_factory,
        )
