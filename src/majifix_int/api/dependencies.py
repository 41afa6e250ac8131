"""Request dependencies shared by the routers."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, status

from ..config import settings
from ..errors import AccountNotFoundError, UpstreamError
from ..services.accounts import AccountAssembler, BillingSource
from ..services.billing_api import BillingApiClient
from ..services.billing_db import BillingDatabase


@lru_cache()
def get_billing_source() -> BillingSource:
    """Billing source selected by ``BILLING_SOURCE``."""
    if settings.billing_source == "sql":
        return BillingDatabase(settings)
    return BillingApiClient(settings)


def get_assembler(source: BillingSource = Depends(get_billing_source)) -> AccountAssembler:
    return AccountAssembler(source, settings)


def to_http_error(exc: Exception) -> HTTPException:
    """Translate source failures into HTTP errors."""
    if isinstance(exc, AccountNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, UpstreamError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
