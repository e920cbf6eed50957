"""Bounty sources: where bounty amounts are read from and ``amount_sort`` is written to.

Deployments store ``amount_sort`` either on the bounty table itself or in a
sidecar table keyed by ``(bounty_id, chain_id)``. Both expose the same
``fetch_all`` / ``update_one`` pair so the revaluation loop does not care.
"""

from __future__ import annotations

from typing import Protocol

from bounty_pricer.db import store
from bounty_pricer.db.schema import (
    SELECT_BOUNTIES_EXTRA_SQL,
    SELECT_BOUNTIES_SQL,
    UPDATE_BOUNTY_EXTRA_SQL,
    UPDATE_BOUNTY_SQL,
    qualified,
)
from bounty_pricer.models import BountyRow


class BountySource(Protocol):
    def fetch_all(self, conn) -> list[BountyRow]:
        ...

    def update_one(self, conn, bounty: BountyRow, amount_sort: str) -> None:
        ...


class BountyTableSource:
    def __init__(self, schema: str, table: str = "Bounties") -> None:
        self.table = qualified(schema, table)

    def fetch_all(self, conn) -> list[BountyRow]:
        rows = store.fetch_rows(conn, SELECT_BOUNTIES_SQL.format(table=self.table))
        return [_to_bounty(row) for row in rows]

    def update_one(self, conn, bounty: BountyRow, amount_sort: str) -> None:
        store.execute(conn, UPDATE_BOUNTY_SQL.format(table=self.table), (amount_sort, bounty.id))


class BountyExtraSource:
    def __init__(self, schema: str, table: str = "Bounties", extra_table: str = "BountiesExtra") -> None:
        self.table = qualified(schema, table)
        self.extra_table = qualified(schema, extra_table)

    def fetch_all(self, conn) -> list[BountyRow]:
        sql = SELECT_BOUNTIES_EXTRA_SQL.format(bounties=self.table, extra=self.extra_table)
        return [_to_bounty(row) for row in store.fetch_rows(conn, sql)]

    def update_one(self, conn, bounty: BountyRow, amount_sort: str) -> None:
        store.execute(
            conn,
            UPDATE_BOUNTY_EXTRA_SQL.format(table=self.extra_table),
            (amount_sort, bounty.id, bounty.chain_id),
        )


def build_source(layout: str, schema: str, table: str = "Bounties", extra_table: str = "BountiesExtra") -> BountySource:
    if layout == "extra":
        return BountyExtraSource(schema, table=table, extra_table=extra_table)
    if layout == "table":
        return BountyTableSource(schema, table=table)
    raise ValueError(f"Unknown bounty layout: {layout}")


def _to_bounty(row) -> BountyRow:
    bounty_id, amount, chain_id = row
    return BountyRow(id=int(bounty_id), amount=str(amount), chain_id=int(chain_id))
