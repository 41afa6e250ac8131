import asyncio
from datetime import datetime

import pytest

from conftest import bill_record

from majifix_int.errors import AccountNotFoundError, UpstreamError
from majifix_int.models.domain import Accessor, Account
from majifix_int.services.accounts import AccountAssembler
from majifix_int.services.normalization import normalize_account


class DummySource:
    def __init__(self, settings, customer=None, account=None, batches=None, stale=True):
        self.settings = settings
        self.customer = customer if customer is not None else {
            "jurisdiction": "C",
            "number": "A8801866",
            "identity": "M-778",
            "name": "HAMISI",
            "house": "12",
            "balance": "750",
        }
        self.account = account if account is not None else {"number": "A8801866", "name": "JUMA HAMISI"}
        self.batches = batches if batches is not None else [
            [bill_record("04/15/2020", number="apr")],
            [bill_record("03/15/2020", number="mar"), bill_record("02/15/2020", number="feb")],
            [bill_record("01/15/2020", number="jan")],
        ]
        self.stale = stale
        self.calls: list[tuple[str, str]] = []

    async def fetch_customer(self, account_number):
        self.calls.append(("customer", account_number))
        return normalize_account(self.customer, self.settings)

    async def fetch_account(self, account_number):
        self.calls.append(("account", account_number))
        return normalize_account(self.account, self.settings)

    async def fetch_accessors(self, account_number):
        self.calls.append(("accessors", account_number))
        return [Accessor(name="Asha", phone="+255713000111")]

    async def fetch_bill_batches(self, account_number):
        self.calls.append(("bills", account_number))
        return self.batches

    async def is_stale(self, account_number, last_fetched_at):
        self.calls.append(("stale", account_number))
        if isinstance(self.stale, Exception):
            raise self.stale
        return self.stale


def test_assemble_builds_full_account(settings):
    source = DummySource(settings)

    account = asyncio.run(AccountAssembler(source, settings).assemble("a880 1866"))

    assert isinstance(account, Account)
    assert account.number == "A8801866"
    assert account.identity == "M-778"
    assert account.name == "JUMA HAMISI"
    assert account.jurisdiction == "Kinondoni"
    assert account.address == "12, Kinondoni"
    assert [accessor.name for accessor in account.accessors] == ["Asha"]
    assert [bill.number for bill in account.bills] == ["apr", "mar", "feb"]
    assert account.bills[0].balance.close == 750
    assert account.bills[2].period.started_at == datetime(2020, 1, 15)
    assert account.fetched_at is not None and account.fetched_at.tzinfo is not None


def test_assemble_uses_resolved_account_number(settings):
    source = DummySource(settings)

    asyncio.run(AccountAssembler(source, settings).assemble("m-778"))

    assert source.calls[0] == ("customer", "m-778")
    assert sorted(source.calls[1:]) == [
        ("accessors", "A8801866"),
        ("account", "A8801866"),
        ("bills", "A8801866"),
    ]


def test_assemble_unknown_account_stops_after_lookup(settings):
    source = DummySource(settings, customer={"name": "nobody"})

    with pytest.raises(AccountNotFoundError):
        asyncio.run(AccountAssembler(source, settings).assemble("X1"))

    assert source.calls == [("customer", "X1")]


def test_assemble_fetches_details_concurrently(settings):
    class BarrierSource(DummySource):
        def __init__(self, settings):
            super().__init__(settings)
            self.started = 0
            self.all_started = None

        async def _arrive(self):
            if self.all_started is None:
                self.all_started = asyncio.Event()
            self.started += 1
            if self.started == 3:
                self.all_started.set()
            await asyncio.wait_for(self.all_started.wait(), timeout=1)

        async def fetch_account(self, account_number):
            await self._arrive()
            return await super().fetch_account(account_number)

        async def fetch_accessors(self, account_number):
            await self._arrive()
            return await super().fetch_accessors(account_number)

        async def fetch_bill_batches(self, account_number):
            await self._arrive()
            return await super().fetch_bill_batches(account_number)

    source = BarrierSource(settings)
    account = asyncio.run(AccountAssembler(source, settings).assemble("A8801866"))
    assert source.started == 3
    assert len(account.bills) == 3


def test_assemble_fails_when_any_fetch_fails(settings):
    class FailingSource(DummySource):
        async def fetch_bill_batches(self, account_number):
            raise UpstreamError("Billing database query failed")

    with pytest.raises(UpstreamError, match="query failed"):
        asyncio.run(AccountAssembler(FailingSource(settings), settings).assemble("A8801866"))


def test_assemble_without_bills(settings):
    source = DummySource(settings, batches=[[], []])
    account = asyncio.run(AccountAssembler(source, settings).assemble("A8801866"))
    assert account.bills == []


def test_assemble_if_stale_skips_fresh_accounts(settings):
    source = DummySource(settings, stale=False)

    result = asyncio.run(
        AccountAssembler(source, settings).assemble_if_stale("A8801866", datetime(2024, 1, 1))
    )

    assert result is None
    assert source.calls == [("stale", "A8801866")]


def test_assemble_if_stale_assembles_changed_accounts(settings):
    source = DummySource(settings, stale=True)

    result = asyncio.run(AccountAssembler(source, settings).assemble_if_stale("A8801866", None))

    assert result is not None and result.number == "A8801866"


def test_assemble_if_stale_refetches_when_check_fails(settings):
    source = DummySource(settings, stale=UpstreamError("Billing database query failed"))

    result = asyncio.run(
        AccountAssembler(source, settings).assemble_if_stale("A8801866", datetime(2024, 1, 1))
    )

    assert result is not None
