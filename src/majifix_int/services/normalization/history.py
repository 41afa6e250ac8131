"""Bill history reconciliation.

Bill feeds (current, previous and statement batches) overlap and disagree on
freshness. They are flattened, normalized, deduplicated, ordered newest
first and cut to the retention window. Each kept bill's period starts where
the next older bill's reading ended, so start dates are assigned before
truncation. The newest bill's closing balance is finally replaced by the
authoritative account balance, which reflects payments the feeds have not
seen yet.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from itertools import chain
from typing import Any, Iterable, Mapping, Optional

from ...config import Settings, settings as default_settings
from ...models.domain import Bill
from .bills import normalize_bill, to_number

logger = logging.getLogger(__name__)


def _billed_key(bill: Bill) -> tuple[bool, datetime]:
    billed_at = bill.period.billed_at
    return (billed_at is not None, billed_at or datetime.min)


def dedupe_bills(bills: Iterable[Bill]) -> list[Bill]:
    """Drop repeats of a bill seen in more than one feed, keeping the first copy.

    Bills are the same when they share a number and a reading date.
    """
    seen: set[tuple[str, Optional[datetime]]] = set()
    unique = []
    for bill in bills:
        key = (bill.number, bill.period.billed_at)
        if key in seen:
            continue
        seen.add(key)
        unique.append(bill)
    return unique


def order_bill_history(bills: Iterable[Bill], retention_periods: int) -> list[Bill]:
    """Sort newest first, infer period starts and keep ``retention_periods`` bills.

    Undated bills sort after dated ones; equal keys keep their input order.
    """
    ordered = sorted(bills, key=_billed_key, reverse=True)
    for index in range(min(retention_periods, len(ordered))):
        successor = ordered[index + 1] if index + 1 < len(ordered) else None
        ordered[index].period.started_at = successor.period.billed_at if successor else None
    return ordered[:retention_periods]


def apply_authoritative_balance(bills: list[Bill], balance: Any) -> list[Bill]:
    """Overwrite the newest bill's closing balance with an authoritative figure.

    Absent, empty or non-numeric balances leave the bill's own value.
    """
    if not bills or balance is None or str(balance).strip() == "":
        return bills
    value = to_number(balance, default=float("nan"))
    if math.isnan(value):
        logger.warning(f"Ignoring non-numeric authoritative balance '{balance}'")
        return bills
    bills[0].balance.close = value
    return bills


def reconcile_bill_history(
    batches: Iterable[Iterable[Mapping[str, Any]]],
    retention_periods: Optional[int] = None,
    authoritative_balance: Any = None,
    settings: Settings | None = None,
) -> list[Bill]:
    """Merge raw bill batches into an ordered, period-annotated bill history."""
    settings = settings or default_settings
    if retention_periods is None:
        retention_periods = settings.default_bill_periods

    raw_bills = [raw for raw in chain.from_iterable(batch or () for batch in batches) if raw]
    bills = dedupe_bills(normalize_bill(raw, settings) for raw in raw_bills)
    logger.debug(f"Reconciling {len(bills)} bills into {retention_periods} periods")

    bills = order_bill_history(bills, retention_periods)
    return apply_authoritative_balance(bills, authoritative_balance)
