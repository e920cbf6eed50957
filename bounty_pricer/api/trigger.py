from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any, Callable

import requests

from bounty_pricer.errors import TriggerFailed


def sign_request(secret: str, method: str, path: str, timestamp: str, body: str) -> str:
    message = f"{method}|{path}|{timestamp}|{body}"
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


class TriggerClient:
    """Invokes a deployed price update job over HTTP with an HMAC-signed request."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        secret: str,
        timeout_s: int = 30,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.secret = secret
        self.timeout = (timeout_s, timeout_s)
        self.clock = clock

    def build_headers(self, path: str, body: str) -> dict[str, str]:
        timestamp = str(int(self.clock()))
        return {
            "Content-Type": "application/json",
            "X-API-Key": self.api_key,
            "X-Timestamp": timestamp,
            "X-Signature": sign_request(self.secret, "POST", path, timestamp, body),
        }

    def trigger(self, path: str) -> Any:
        body = json.dumps({})
        response = self.session.post(
            f"{self.base_url}{path}",
            data=body,
            headers=self.build_headers(path, body),
            timeout=self.timeout,
        )
        if not response.ok:
            raise TriggerFailed(response.status_code, response.text or "")
        if not response.text:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
