from __future__ import annotations

import logging
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class HipChatClient:
    def __init__(
        self,
        auth_token: str,
        base_url: str = "https://api.hipchat.com/v2/",
        timeout: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {"Authorization": f"Bearer {auth_token}"}

    def message_user(self, user: str, message: str) -> None:
        url = f"{self.base_url}user/{quote(user, safe='@')}/message"
        payload = {
            "message": message,
            "notify": True,
            "message_format": "text",
        }
        response = self._session.post(
            url, json=payload, headers=self._headers, timeout=self.timeout
        )
        response.raise_for_status()
        logger.debug("HipChat accepted message for %s (%s)", user, response.status_code)
