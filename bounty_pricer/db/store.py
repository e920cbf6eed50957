from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence

import psycopg2

from bounty_pricer.db.schema import (
    INSERT_PRICE_SQL,
    LATEST_PRICE_SQL,
    LIVE_QUERY_TABLES_SQL,
    qualified,
)
from bounty_pricer.errors import RowCountMismatch
from bounty_pricer.models import PriceSnapshot, Prices

LIVE_QUERY_TABLES = "live_query_tables"


def get_connection(database_url: str):
    """Open a connection with an implicit transaction; callers commit or roll back."""
    conn = psycopg2.connect(database_url)
    conn.autocommit = False
    return conn


def fetch_rows(conn, sql: str, params: Sequence[Any] | None = None) -> list[tuple[Any, ...]]:
    with conn.cursor() as cur:
        cur.execute(sql, params)
        if cur.description is None:
            raise RowCountMismatch(f"Query returned no result set: {sql.strip()}")
        return list(cur.fetchall())


def execute(conn, sql: str, params: Sequence[Any] | None = None) -> int:
    with conn.cursor() as cur:
        cur.execute(sql, params)
        return cur.rowcount


def fetch_latest_price(conn, schema: str = "public", table: str = "Price") -> PriceSnapshot | None:
    rows = fetch_rows(conn, LATEST_PRICE_SQL.format(table=qualified(schema, table)))
    if not rows:
        return None
    row_id, eth_usd, degen_usd = rows[0]
    return PriceSnapshot(
        id=int(row_id),
        eth_usd=Decimal(str(eth_usd)),
        degen_usd=Decimal(str(degen_usd)),
    )


def insert_price(conn, prices: Prices, schema: str = "public", table: str = "Price") -> None:
    execute(
        conn,
        INSERT_PRICE_SQL.format(table=qualified(schema, table)),
        (str(prices.eth_usd), str(prices.degen_usd)),
    )


def ensure_live_query_tables(conn, schema: str) -> None:
    execute(conn, LIVE_QUERY_TABLES_SQL.format(table=qualified(schema, LIVE_QUERY_TABLES)))
