from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Prices:
    eth_usd: Decimal
    degen_usd: Decimal


@dataclass(frozen=True)
class PriceSnapshot:
    id: int
    eth_usd: Decimal
    degen_usd: Decimal

    def prices(self) -> Prices:
        return Prices(eth_usd=self.eth_usd, degen_usd=self.degen_usd)


@dataclass(frozen=True)
class BountyRow:
    id: int
    amount: str
    chain_id: int


@dataclass(frozen=True)
class UpdateResult:
    did_update: bool
    prices: Prices
    updated_count: int = 0
    schema: Optional[str] = None
