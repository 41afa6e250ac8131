"""Bill normalization."""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Any, Mapping

from ...config import Settings, settings as default_settings
from ...models.domain import Bill, BillBalance, BillItem, BillPeriod
from .dates import InvalidDateError, format_month, to_date

logger = logging.getLogger(__name__)


def to_number(value: Any, default: float = 0) -> float:
    """Numeric coercion with a fallback for absent or non-numeric input."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip().replace(",", ""))
    except ValueError:
        return default
    if math.isnan(number):
        return default
    return number


def normalize_bill(raw: Mapping[str, Any] | None, settings: Settings | None = None) -> Bill:
    """Build a canonical bill from a raw field bag."""
    settings = settings or default_settings
    raw = dict(raw or {})

    billed_at = None
    if raw.get("readingDate"):
        try:
            billed_at = to_date(raw["readingDate"], settings.default_bill_date_format)
        except InvalidDateError:
            logger.warning(f"Ignoring unparseable bill reading date '{raw['readingDate']}'")
    dued_at = billed_at + timedelta(days=settings.default_bill_pay_period) if billed_at else None

    previous_readings = BillItem(
        name="Previous Readings",
        quantity=to_number(raw.get("previousReading")),
        unit="cbm",
    )
    current_readings = BillItem(
        name="Current Readings",
        quantity=to_number(raw.get("currentReading")),
        unit="cbm",
        time=billed_at,
    )
    consumed = BillItem(
        name="Water Charge",
        quantity=to_number(raw.get("consumption")),
        unit="cbm",
        price=to_number(raw.get("currentCharges")),
        items=[previous_readings, current_readings],
    )

    return Bill(
        number=str(raw.get("number") or "").strip(),
        notes=str(raw.get("notes") or settings.default_bill_notes),
        currency=settings.default_bill_currency,
        period=BillPeriod(
            name=format_month(billed_at, settings.default_bill_month_format),
            billed_at=billed_at,
            started_at=None,
            ended_at=billed_at,
            dued_at=dued_at,
        ),
        balance=BillBalance(
            outstand=to_number(raw.get("outstandBalance")),
            open=to_number(raw.get("openBalance")),
            close=to_number(raw.get("closeBalance")),
            charges=to_number(raw.get("currentCharges")),
            debt=0,
        ),
        items=[consumed],
    )
