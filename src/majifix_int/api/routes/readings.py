"""Meter readings endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import UpstreamError
from ...schemas.accounts import MeterReadingsRequest
from ...services.accounts import BillingSource
from ...services.billing_api import BillingApiClient
from ..dependencies import get_billing_source, to_http_error

router = APIRouter(prefix="/readings", tags=["readings"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meter_readings(
    payload: MeterReadingsRequest,
    source: BillingSource = Depends(get_billing_source),
) -> dict:
    if not isinstance(source, BillingApiClient):
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Meter readings require the billing API source.",
        )
    if not payload.account_number and not payload.meter_number:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either accountNumber or meterNumber is required.",
        )
    try:
        return await source.post_meter_readings(
            readings=payload.readings,
            phone_number=payload.phone_number,
            account_number=payload.account_number,
            meter_number=payload.meter_number,
        )
    except (UpstreamError, ValueError) as exc:
        raise to_http_error(exc) from exc
