from __future__ import annotations

import io
import os

import pytest

from saydone.logs import configure_logging

CONFIG_VARS = (
    "HIPCHAT_AUTHTOKEN",
    "HIPCHAT_USER",
    "HIPCHAT_URL",
    "SLACK_AUTHTOKEN",
    "SLACK_USER",
    "SLACK_URL",
    "SAYDONE_EMAIL",
    "SAYDONE_MAIL_FROM",
    "SMTP_HOST",
    "SMTP_PORT",
    "SAYDONE_TIMEOUT",
    "SAYDONE_HTTP_TIMEOUT",
    "SAYDONE_LOG_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # load_dotenv writes straight into os.environ; give each test its own copy.
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.setenv("SAYDONE_LOG_FILE", str(tmp_path / "saydone.log"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def console():
    return io.StringIO()


@pytest.fixture
def logger(console):
    return configure_logging(None, console=console)


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body if body is not None else {}

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self._body


class FakeSession:
    """Records posts; responses are picked by a substring of the URL."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        for fragment, response in self.responses.items():
            if fragment in url:
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(body={"ok": True})


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def send_message(self, message):
        FakeSMTP.sent.append((self.host, self.port, message))


@pytest.fixture
def fake_smtp():
    FakeSMTP.sent = []
    return FakeSMTP


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_response():
    return FakeResponse
