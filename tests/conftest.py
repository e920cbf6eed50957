from __future__ import annotations

import sqlite3
from decimal import Decimal
from typing import Any, Callable

import pytest
import requests

from bounty_pricer.models import Prices

SCHEMA = "deploy_1"

SETUP_SQL = f"""
CREATE TABLE "public"."Price" (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    eth_usd TEXT NOT NULL,
    degen_usd TEXT NOT NULL
);
CREATE TABLE "{SCHEMA}"."Bounties" (
    id INTEGER PRIMARY KEY,
    amount TEXT NOT NULL,
    chain_id INTEGER NOT NULL,
    amount_sort TEXT
);
CREATE TABLE "{SCHEMA}"."BountiesExtra" (
    bounty_id INTEGER NOT NULL,
    chain_id INTEGER NOT NULL,
    amount_sort TEXT,
    PRIMARY KEY (bounty_id, chain_id)
);
"""


class _Cursor:
    def __init__(self, owner: "SqliteConnection") -> None:
        self._owner = owner
        self._cur = owner.raw.cursor()

    def __enter__(self) -> "_Cursor":
        return self

    def __exit__(self, *exc: Any) -> None:
        self._cur.close()

    def execute(self, sql: str, params: Any = None) -> None:
        params = tuple(params or ())
        if self._owner.fail_when is not None and self._owner.fail_when(sql, params):
            raise sqlite3.OperationalError("injected failure")
        self._owner.statements.append(sql)
        self._cur.execute(sql.replace("%s", "?"), params)

    @property
    def description(self):
        return self._cur.description

    @property
    def rowcount(self) -> int:
        return self._cur.rowcount

    def fetchall(self) -> list[tuple[Any, ...]]:
        return self._cur.fetchall()


class SqliteConnection:
    """Driver-shaped wrapper over sqlite3: ``%s`` placeholders, attached databases as schemas.

    ``close`` only flags the connection so tests can inspect the data afterwards.
    """

    def __init__(self) -> None:
        self.raw = sqlite3.connect(":memory:")
        self.raw.execute("ATTACH DATABASE ':memory:' AS \"public\"")
        self.raw.execute(f"ATTACH DATABASE ':memory:' AS \"{SCHEMA}\"")
        self.raw.executescript(SETUP_SQL)
        self.raw.commit()
        self.fail_when: Callable[[str, tuple[Any, ...]], bool] | None = None
        self.fail_rollback = False
        self.statements: list[str] = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self) -> _Cursor:
        return _Cursor(self)

    def commit(self) -> None:
        self.commits += 1
        self.raw.commit()

    def rollback(self) -> None:
        self.rollbacks += 1
        if self.fail_rollback:
            raise sqlite3.OperationalError("rollback failed")
        self.raw.rollback()

    def close(self) -> None:
        self.closed = True

    def seed_price(self, eth_usd: str, degen_usd: str) -> None:
        self.raw.execute('INSERT INTO "public"."Price" (eth_usd, degen_usd) VALUES (?, ?)', (eth_usd, degen_usd))
        self.raw.commit()

    def seed_bounty(self, bounty_id: int, amount: str, chain_id: int, extra: bool = False) -> None:
        self.raw.execute(
            f'INSERT INTO "{SCHEMA}"."Bounties" (id, amount, chain_id) VALUES (?, ?, ?)',
            (bounty_id, amount, chain_id),
        )
        if extra:
            self.raw.execute(
                f'INSERT INTO "{SCHEMA}"."BountiesExtra" (bounty_id, chain_id) VALUES (?, ?)',
                (bounty_id, chain_id),
            )
        self.raw.commit()

    def prices(self) -> list[tuple[str, str]]:
        return self.raw.execute('SELECT eth_usd, degen_usd FROM "public"."Price" ORDER BY id').fetchall()

    def amount_sorts(self, table: str = "Bounties", key: str = "id") -> dict[int, str | None]:
        rows = self.raw.execute(f'SELECT {key}, amount_sort FROM "{SCHEMA}"."{table}" ORDER BY {key}').fetchall()
        return {row[0]: row[1] for row in rows}


class StaticPriceClient:
    def __init__(self, eth_usd: str, degen_usd: str) -> None:
        self.quotes = {"eth": Decimal(eth_usd), "degen": Decimal(degen_usd)}
        self.calls: list[str] = []

    def fetch_usd_price(self, currency: str) -> Decimal:
        self.calls.append(currency)
        return self.quotes[currency]


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else "json")
        self.ok = 200 <= status_code < 300

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, responses: list[Any]) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.closed = True

    def _next(self) -> Any:
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url: str, **kwargs: Any) -> Any:
        self.calls.append({"method": "GET", "url": url, **kwargs})
        return self._next()

    def post(self, url: str, **kwargs: Any) -> Any:
        self.calls.append({"method": "POST", "url": url, **kwargs})
        return self._next()


@pytest.fixture
def db() -> SqliteConnection:
    return SqliteConnection()


@pytest.fixture
def prices_2300() -> Prices:
    return Prices(eth_usd=Decimal("2300"), degen_usd=Decimal("0.01"))
