"""
HTTP client for the message board API.

Mirrors what the single-page frontend does: exchange an ID token at
sign-in, then send the same token as a bearer credential on every call.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import requests

from board.auth import Principal
from board.db import MessageRecord

REQUEST_TIMEOUT = 30  # seconds


class MessageBoardError(Exception):
    """Base error for failed API calls."""

    def __init__(self, status_code: int, detail: str = ""):
        super().__init__(f"{status_code}: {detail}" if detail else str(status_code))
        self.status_code = status_code
        self.detail = detail


class UnauthorizedError(MessageBoardError):
    pass


class ForbiddenError(MessageBoardError):
    pass


class ServerError(MessageBoardError):
    pass


def _error_for(response: requests.Response) -> MessageBoardError:
    try:
        detail = response.json().get("detail", "")
    except ValueError:
        detail = response.text
    if response.status_code == 401:
        return UnauthorizedError(response.status_code, detail)
    if response.status_code == 403:
        return ForbiddenError(response.status_code, detail)
    if response.status_code >= 500:
        return ServerError(response.status_code, detail)
    return MessageBoardError(response.status_code, detail)


class MessageBoardClient:
    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        api_prefix: str = "/api",
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/") + api_prefix
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            headers=headers,
            timeout=self.timeout,
            **kwargs,
        )
        if response.status_code >= 400:
            raise _error_for(response)
        return response

    def sign_in(self, id_token: str) -> Principal:
        """
        Exchange an ID token for the caller's identity and keep the token
        for subsequent requests.
        """
        response = self._request("POST", "/auth/google", json={"idToken": id_token})
        payload = response.json()
        self.token = id_token
        return Principal(uid=payload["uid"], email=payload.get("email"))

    def sign_out(self) -> None:
        self.token = None

    def me(self) -> Principal:
        payload = self._request("GET", "/me").json()
        return Principal(uid=payload["uid"], email=payload.get("email"))

    def send_message(self, text: str) -> None:
        self._request("POST", "/messages", json={"text": text})

    def list_messages(self) -> list[MessageRecord]:
        payload = self._request("GET", "/messages").json()
        return [
            MessageRecord(
                id=item["id"],
                sender=item["sender"],
                text=item["text"],
                timestamp=datetime.fromisoformat(item["timestamp"]),
            )
            for item in payload
        ]
