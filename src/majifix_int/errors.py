"""Errors raised by billing sources."""

from __future__ import annotations

from typing import Any, Optional


class UpstreamError(RuntimeError):
    """The billing API or database reported a failure."""

    def __init__(
        self,
        message: str = "Invalid Request",
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class AccountNotFoundError(UpstreamError):
    """No customer record resolved for the requested account number."""
