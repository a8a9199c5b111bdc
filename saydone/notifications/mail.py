from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Callable

logger = logging.getLogger(__name__)

SmtpFactory = Callable[..., smtplib.SMTP]


def build_email(sender: str, recipient: str, subject: str, body: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = subject
    message.set_content(body)
    return message


def send_email(
    message: EmailMessage,
    host: str = "localhost",
    port: int = 25,
    timeout: int = 30,
    smtp_factory: SmtpFactory = smtplib.SMTP,
) -> None:
    """Hand the message to the local mail submission service."""
    with smtp_factory(host, port, timeout=timeout) as server:
        server.send_message(message)
    logger.debug("Mail for %s handed to %s:%d", message["To"], host, port)
