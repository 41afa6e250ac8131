"""Billing source backed by direct queries against the billing database."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence

from ...config import Settings, settings as default_settings
from ...db.mssql import fetch_all
from ...models.domain import Accessor, Customer
from ..normalization.accounts import normalize_accessor, normalize_account
from . import queries

logger = logging.getLogger(__name__)

QueryRunner = Callable[[str, Sequence[Any], Settings], list[dict[str, Any]]]


def _identity(account_number: Any) -> str:
    return str(account_number or "").strip().upper()


class BillingDatabase:
    """Billing source reading the vendor's SQL Server tables.

    pyodbc is blocking, so every query runs in a worker thread with its own
    connection; independent queries may run concurrently.
    """

    def __init__(self, settings: Settings | None = None, runner: QueryRunner | None = None) -> None:
        self.settings = settings or default_settings
        self._runner = runner or fetch_all

    async def _query(self, query: str, *params: Any) -> list[dict[str, Any]]:
        logger.debug(f"Running billing query with {len(params)} parameters")
        return await asyncio.to_thread(self._runner, query, params, self.settings)

    async def fetch_customer(self, account_number: str) -> Customer:
        identity = _identity(account_number)
        rows = await self._query(queries.CUSTOMER_DETAILS_QUERY, identity, identity)
        return normalize_account(rows[0] if rows else {}, self.settings)

    async def fetch_account(self, account_number: str) -> Customer:
        rows = await self._query(queries.ACCOUNT_DETAILS_QUERY, _identity(account_number))
        return normalize_account(rows[0] if rows else {}, self.settings)

    async def fetch_accessors(self, account_number: str) -> list[Accessor]:
        rows = await self._query(queries.USER_DETAILS_QUERY, _identity(account_number))
        return [normalize_accessor(row, self.settings) for row in rows if row]

    async def fetch_bill_batches(self, account_number: str) -> list[list[dict[str, Any]]]:
        """Fetch current, previous and statement bills in parallel."""
        identity = _identity(account_number)
        sampling = self.settings.default_sampling_bill_periods
        batches = await asyncio.gather(
            self._query(queries.CURRENT_BILL_QUERY, sampling, identity),
            self._query(queries.PREVIOUS_BILL_QUERY, sampling, identity),
            self._query(queries.BILL_HISTORY_QUERY, sampling, identity),
        )
        return list(batches)

    async def is_stale(self, account_number: str, last_fetched_at: Optional[datetime]) -> bool:
        """Whether a payment or due date was recorded after ``last_fetched_at``."""
        if last_fetched_at is None:
            return True
        if last_fetched_at.tzinfo is not None:
            last_fetched_at = last_fetched_at.astimezone(timezone.utc).replace(tzinfo=None)
        identity = _identity(account_number)
        rows = await self._query(
            queries.SHOULD_FETCH_QUERY, identity, identity, last_fetched_at, last_fetched_at
        )
        count = rows[0].get("count") if rows else 0
        return bool(count and int(count) > 0)

    async def list_account_numbers(
        self, offset: Optional[int] = None, limit: Optional[int] = None
    ) -> list[str]:
        offset = self.settings.default_offset if offset is None else offset
        limit = self.settings.default_limit if limit is None else limit
        rows = await self._query(queries.ACCOUNT_NUMBERS_QUERY, offset, limit)
        numbers = [str(row.get("accountNumber") or "").strip() for row in rows]
        return list(dict.fromkeys(number for number in numbers if number))

    async def count_accounts(self) -> int:
        rows = await self._query(queries.ACCOUNT_COUNT_QUERY)
        return int(rows[0].get("count") or 0) if rows else 0
