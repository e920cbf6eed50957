"""SQL identifiers and statements used by the price update job.

Values are always bound as ``%s`` parameters. Schema and table names can not
be bound, so they only ever reach a statement through :func:`quote_ident`.
"""

from __future__ import annotations


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def qualified(schema: str, table: str) -> str:
    return f"{quote_ident(schema)}.{quote_ident(table)}"


LATEST_PRICE_SQL = "SELECT id, eth_usd, degen_usd FROM {table} ORDER BY id DESC LIMIT 1"

INSERT_PRICE_SQL = "INSERT INTO {table} (eth_usd, degen_usd) VALUES (%s, %s)"

LIVE_QUERY_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    table_name text PRIMARY KEY
)
"""

SELECT_BOUNTIES_SQL = "SELECT id, amount, chain_id FROM {table}"

UPDATE_BOUNTY_SQL = "UPDATE {table} SET amount_sort = %s WHERE id = %s"

SELECT_BOUNTIES_EXTRA_SQL = """
SELECT b.id, b.amount, b.chain_id
FROM {bounties} AS b
JOIN {extra} AS e ON e.bounty_id = b.id AND e.chain_id = b.chain_id
"""

UPDATE_BOUNTY_EXTRA_SQL = "UPDATE {table} SET amount_sort = %s WHERE bounty_id = %s AND chain_id = %s"
