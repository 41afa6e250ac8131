"""Billing vendor HTTP API source."""

from .client import BillingApiClient
from .extract import (
    extract_account_details,
    extract_bill_details,
    is_success_response,
    normalize_api_options,
)

__all__ = [
    "BillingApiClient",
    "extract_account_details",
    "extract_bill_details",
    "is_success_response",
    "normalize_api_options",
]
