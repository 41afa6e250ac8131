"""Account endpoints."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...config import settings
from ...errors import UpstreamError
from ...schemas.accounts import AccountCountResponse, AccountModel, AccountNumbersResponse
from ...services.accounts import AccountAssembler, BillingSource
from ...services.billing_db import BillingDatabase
from ..dependencies import get_assembler, get_billing_source, to_http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _require_database(source: BillingSource) -> BillingDatabase:
    if not isinstance(source, BillingDatabase):
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Account listing requires the SQL billing source.",
        )
    return source


@router.get("", response_model=AccountNumbersResponse, status_code=status.HTTP_200_OK)
async def list_account_numbers(
    offset: int | None = Query(default=None, ge=0),
    limit: int | None = Query(default=None, ge=1, le=1000),
    source: BillingSource = Depends(get_billing_source),
) -> AccountNumbersResponse:
    database = _require_database(source)
    offset = settings.default_offset if offset is None else offset
    limit = settings.default_limit if limit is None else limit
    try:
        numbers = await database.list_account_numbers(offset, limit)
    except (UpstreamError, ValueError) as exc:
        raise to_http_error(exc) from exc
    return AccountNumbersResponse(items=numbers, offset=offset, limit=limit)


@router.get("/count", response_model=AccountCountResponse, status_code=status.HTTP_200_OK)
async def count_accounts(source: BillingSource = Depends(get_billing_source)) -> AccountCountResponse:
    database = _require_database(source)
    try:
        return AccountCountResponse(count=await database.count_accounts())
    except (UpstreamError, ValueError) as exc:
        raise to_http_error(exc) from exc


@router.get(
    "/{account_number}",
    response_model=AccountModel,
    status_code=status.HTTP_200_OK,
    responses={204: {"description": "Account unchanged since the given time"}},
)
async def get_account(
    account_number: str,
    since: datetime | None = Query(default=None, description="Only fetch when changed after this time"),
    assembler: AccountAssembler = Depends(get_assembler),
):
    try:
        if since is None:
            account = await assembler.assemble(account_number)
        else:
            account = await assembler.assemble_if_stale(account_number, since)
    except (UpstreamError, ValueError) as exc:
        logger.warning(f"Failed to assemble account {account_number}: {exc}")
        raise to_http_error(exc) from exc
    if account is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return AccountModel.model_validate(account)
