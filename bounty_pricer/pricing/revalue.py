from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext

from bounty_pricer.db.bounties import BountySource
from bounty_pricer.models import BountyRow, Prices

logger = logging.getLogger(__name__)

TOKEN_DECIMALS = 18
AMOUNT_SORT_QUANTUM = Decimal("0.00001")


def to_token_amount(raw_amount: str) -> Decimal:
    return Decimal(int(raw_amount)).scaleb(-TOKEN_DECIMALS)


def select_price(chain_id: int, prices: Prices, degen_chain_id: int) -> Decimal:
    return prices.degen_usd if chain_id == degen_chain_id else prices.eth_usd


def compute_amount_sort(bounty: BountyRow, prices: Prices, degen_chain_id: int) -> str:
    with localcontext() as ctx:
        ctx.prec = 80
        value = to_token_amount(bounty.amount) * select_price(bounty.chain_id, prices, degen_chain_id)
        return str(value.quantize(AMOUNT_SORT_QUANTUM, rounding=ROUND_HALF_UP))


def revalue_bounties(conn, source: BountySource, prices: Prices, degen_chain_id: int) -> int:
    """Write ``amount_sort`` for every bounty of ``source``.

    Stops at the first failing update and lets the error propagate; the caller
    owns the transaction and is expected to roll back.
    """
    bounties = source.fetch_all(conn)
    for bounty in bounties:
        amount_sort = compute_amount_sort(bounty, prices, degen_chain_id)
        source.update_one(conn, bounty, amount_sort)
    logger.debug("Revalued %d bounties", len(bounties))
    return len(bounties)
