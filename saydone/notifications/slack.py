from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)


class SlackAPIError(RuntimeError):
    pass


class SlackClient:
    def __init__(
        self,
        auth_token: str,
        base_url: str = "https://slack.com/api/",
        timeout: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"Authorization": f"Bearer {auth_token}"}

    def post_message(self, channel: str, text: str) -> None:
        response = self._session.post(
            f"{self.base_url}chat.postMessage",
            json={"channel": channel, "text": text},
            headers=self._headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        body = response.json()
        # Slack reports API errors with HTTP 200 and ok=false.
        if not body.get("ok"):
            raise SlackAPIError(f"chat.postMessage failed: {body.get('error', 'unknown error')}")
        logger.debug("Slack accepted message for %s", channel)

    def message_user(self, user: str, text: str) -> None:
        self.post_message(f"@{user.lstrip('@')}", text)
