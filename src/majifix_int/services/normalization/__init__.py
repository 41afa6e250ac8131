"""Normalization of raw billing records into canonical accounts and bills."""

from .accounts import merge_accounts, normalize_accessor, normalize_account
from .bills import normalize_bill
from .dates import InvalidDateError, format_month, to_date
from .history import (
    apply_authoritative_balance,
    dedupe_bills,
    order_bill_history,
    reconcile_bill_history,
)
from .jurisdiction import resolve_jurisdiction
from .phone import to_e164

__all__ = [
    "InvalidDateError",
    "apply_authoritative_balance",
    "dedupe_bills",
    "format_month",
    "merge_accounts",
    "normalize_accessor",
    "normalize_account",
    "normalize_bill",
    "order_bill_history",
    "reconcile_bill_history",
    "resolve_jurisdiction",
    "to_date",
    "to_e164",
]
