"""Billing database source."""

from .repository import BillingDatabase

__all__ = ["BillingDatabase"]
