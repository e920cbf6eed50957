from __future__ import annotations

from decimal import Decimal

from bounty_pricer.errors import DivisionByZero
from bounty_pricer.models import PriceSnapshot, Prices


def percent_change(current: Decimal, previous: Decimal) -> Decimal:
    if previous == 0:
        raise DivisionByZero("Previous price is 0")
    return abs((current - previous) / previous * 100)


def should_update(current: Prices, previous: PriceSnapshot | None, threshold_percent: Decimal) -> bool:
    """Return True when there is no snapshot yet or either price moved more than the threshold."""
    if previous is None:
        return True
    return (
        percent_change(current.eth_usd, previous.eth_usd) > threshold_percent
        or percent_change(current.degen_usd, previous.degen_usd) > threshold_percent
    )
