from __future__ import annotations

from contextlib import nullcontext
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, ContextManager

import requests

from bounty_pricer.errors import PriceUnavailable
from bounty_pricer.utils.retry import with_retries

BASE_URL = "https://api.coinbase.com/v2/exchange-rates"


class PriceClient:
    """Fetches USD quotes; each ``fetch_usd_price`` call opens its own session.

    Both currencies are fetched from worker threads at once, and
    ``requests.Session`` is not safe to share between threads. A ``session``
    passed in explicitly is used as-is for every call.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout_s: int = 15,
        max_attempts: int = 5,
        retry_wait_s: float = 0.0,
        session: requests.Session | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.session = session
        self.session_factory = session_factory
        self.base_url = base_url
        self.timeout = (timeout_s, timeout_s)
        self.max_attempts = max_attempts
        self.retry_wait_s = retry_wait_s

    def fetch_usd_price(self, currency: str) -> Decimal:
        with self._open_session() as session:
            try:
                return with_retries(
                    self.max_attempts,
                    lambda: self._fetch_once(session, currency),
                    wait_s=self.retry_wait_s,
                    label=f"{currency} price fetch",
                )
            except Exception as exc:  # noqa: BLE001
                raise PriceUnavailable(currency, self.max_attempts) from exc

    def _open_session(self) -> ContextManager[requests.Session]:
        if self.session is not None:
            return nullcontext(self.session)
        return self.session_factory()

    def _fetch_once(self, session: requests.Session, currency: str) -> Decimal:
        response = session.get(self.base_url, params={"currency": currency}, timeout=self.timeout)
        response.raise_for_status()
        return extract_usd_rate(response.json())


def extract_usd_rate(payload: Any) -> Decimal:
    rates = None
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict):
            rates = data.get("rates")
    value = rates.get("USD") if isinstance(rates, dict) else None
    if not value:
        raise ValueError("USD price not found in response")
    try:
        price = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"USD price is not a number: {value!r}") from exc
    if not price.is_finite() or price <= 0:
        raise ValueError(f"USD price must be positive: {value!r}")
    return price
