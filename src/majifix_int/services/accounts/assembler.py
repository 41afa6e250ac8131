"""Assembly of a full account from a billing source."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Protocol, Sequence

from ...config import Settings, settings as default_settings
from ...errors import AccountNotFoundError, UpstreamError
from ...models.domain import Accessor, Account, Customer
from ..normalization.accounts import merge_accounts
from ..normalization.history import reconcile_bill_history

logger = logging.getLogger(__name__)


class BillingSource(Protocol):
    async def fetch_customer(self, account_number: str) -> Customer: ...

    async def fetch_account(self, account_number: str) -> Customer: ...

    async def fetch_accessors(self, account_number: str) -> list[Accessor]: ...

    async def fetch_bill_batches(self, account_number: str) -> Sequence[Sequence[Mapping[str, Any]]]: ...

    async def is_stale(self, account_number: str, last_fetched_at: Optional[datetime]) -> bool: ...


class AccountAssembler:
    """Builds an account with accessors and reconciled bills from one source."""

    def __init__(self, source: BillingSource, settings: Settings | None = None) -> None:
        self.source = source
        self.settings = settings or default_settings

    async def assemble(self, account_number: str) -> Account:
        """Fetch and normalize the full account.

        The customer lookup resolves the canonical account number first;
        account details, accessors and bills are then fetched concurrently.
        Any failure fails the whole assembly.
        """
        customer = await self.source.fetch_customer(account_number)
        if not customer.number:
            raise AccountNotFoundError(f"No customer found for account '{account_number}'")

        account, accessors, batches = await asyncio.gather(
            self.source.fetch_account(customer.number),
            self.source.fetch_accessors(customer.number),
            self.source.fetch_bill_batches(customer.number),
        )

        merged = merge_accounts(customer, account, self.settings)
        bills = reconcile_bill_history(
            batches,
            self.settings.default_bill_periods,
            authoritative_balance=merged.balance,
            settings=self.settings,
        )
        logger.info(f"Assembled account {merged.number} with {len(bills)} bills")

        return Account(
            **{item.name: getattr(merged, item.name) for item in fields(Customer)},
            accessors=list(accessors),
            bills=bills,
            fetched_at=datetime.now(timezone.utc),
        )

    async def assemble_if_stale(
        self, account_number: str, last_fetched_at: Optional[datetime]
    ) -> Optional[Account]:
        """Assemble only when the source has changes newer than ``last_fetched_at``."""
        try:
            stale = await self.source.is_stale(account_number, last_fetched_at)
        except UpstreamError as exc:
            logger.warning(f"Freshness check failed for {account_number}, refetching: {exc}")
            stale = True
        if not stale:
            logger.debug(f"Account {account_number} unchanged since {last_fetched_at}")
            return None
        return await self.assemble(account_number)
