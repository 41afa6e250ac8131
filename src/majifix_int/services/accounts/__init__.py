"""Account assembly."""

from .assembler import AccountAssembler, BillingSource

__all__ = ["AccountAssembler", "BillingSource"]
