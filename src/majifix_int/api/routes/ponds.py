"""Pond emptying payment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import UpstreamError
from ...schemas.accounts import PondBillNumberRequest
from ...services.accounts import BillingSource
from ...services.billing_api import BillingApiClient
from ..dependencies import get_billing_source, to_http_error

router = APIRouter(prefix="/ponds", tags=["ponds"])


@router.post("/bill-number", status_code=status.HTTP_200_OK)
async def request_pond_bill_number(
    payload: PondBillNumberRequest,
    source: BillingSource = Depends(get_billing_source),
) -> dict:
    if not isinstance(source, BillingApiClient):
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Pond bill numbers require the billing API source.",
        )
    try:
        return await source.get_pond_bill_number(
            plate_number=payload.plate_number,
            phone_number=payload.phone_number,
            pond_number=payload.pond_number,
        )
    except (UpstreamError, ValueError) as exc:
        raise to_http_error(exc) from exc
