"""Async HTTP client for the billing vendor API."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ...config import Settings, settings as default_settings
from ...errors import UpstreamError
from ...models.domain import Accessor, Customer
from ..normalization.accounts import normalize_account
from .extract import (
    extract_account_details,
    extract_bill_details,
    is_success_response,
    normalize_api_options,
)

logger = logging.getLogger(__name__)


class BillingApiClient:
    """Billing source backed by the vendor's HTTP API."""

    def __init__(
        self,
        settings: Settings | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.timeout = timeout if timeout is not None else self.settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else self.settings.http_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else self.settings.http_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _url(self, name: str) -> str:
        url = getattr(self.settings, name)
        if not url:
            raise ValueError(f"{name.upper()} is not configured.")
        return url

    def _options(self, **options: Any) -> dict[str, str]:
        return normalize_api_options(region=self.settings.default_phone_region, **options)

    async def _post(self, url: str, body: dict[str, str]) -> Any:
        """POST a JSON body and decode the JSON reply, retrying transport failures only."""
        async with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    logger.debug(f"POST {url} {sorted(body)}")
                    response = await client.post(url, json=body)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as exc:
                    logger.error(f"Billing API {url} replied {exc.response.status_code}")
                    raise UpstreamError(
                        f"Billing API request failed with status {exc.response.status_code}",
                        status_code=exc.response.status_code,
                    ) from exc
                except (httpx.TimeoutException, httpx.TransportError) as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.error(f"Billing API {url} unreachable after {attempt} attempts: {exc}")
                        raise UpstreamError(f"Billing API is unreachable: {exc}") from exc
                    wait_time = self.backoff_seconds * attempt
                    logger.warning(
                        f"Billing API transport error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {exc}"
                    )
                    await asyncio.sleep(wait_time)
                except ValueError as exc:
                    raise UpstreamError("Billing API replied with malformed JSON") from exc

    @staticmethod
    def _ensure_success(response: Any) -> dict:
        if not is_success_response(response):
            message = response.get("message") if isinstance(response, dict) else None
            raise UpstreamError(message or "Invalid Request", payload=response)
        return response

    async def get_customer_details(self, **options: Any) -> Customer:
        url = self._url("bill_api_customer_details_url")
        response = self._ensure_success(await self._post(url, self._options(**options)))
        return normalize_account(extract_account_details(response), self.settings)

    async def get_account_details(self, **options: Any) -> Customer:
        url = self._url("bill_api_account_details_url")
        response = self._ensure_success(await self._post(url, self._options(**options)))
        return normalize_account(extract_account_details(response), self.settings)

    async def get_bill_batches(self, **options: Any) -> list[list[dict[str, str]]]:
        """Fetch current and previous bills in parallel as raw bill batches."""
        body = self._options(**options)
        current_url = self._url("bill_api_current_url")
        previous_url = self._url("bill_api_previous_url")

        async def current() -> list[dict[str, str]]:
            response = await self._post(current_url, body)
            markers = response.get("markers") if isinstance(response, dict) else None
            return extract_bill_details(markers or [])

        async def previous() -> list[dict[str, str]]:
            response = await self._post(previous_url, body)
            if isinstance(response, list):
                return extract_bill_details(response)
            if isinstance(response, dict) and ("success" in response or "message" in response):
                # status-only reply: the account has no previous bills
                logger.debug(f"No previous bills: {response.get('message') or response.get('success')}")
                return []
            return extract_bill_details([response])

        return list(await asyncio.gather(current(), previous()))

    async def get_pond_bill_number(
        self, plate_number: str, phone_number: str, pond_number: str
    ) -> dict:
        """Request a payment (control) number for a pond emptying service."""
        url = self._url("ponds_api_bill_number_url")
        body = self._options(
            plate_number=plate_number, phone_number=phone_number, pond_number=pond_number
        )
        return dict(self._ensure_success(await self._post(url, body)))

    async def post_meter_readings(
        self,
        readings: Any,
        phone_number: Optional[str] = None,
        account_number: Optional[str] = None,
        meter_number: Optional[str] = None,
    ) -> dict:
        """Submit customer meter readings against the resolved account number."""
        url = self._url("bill_api_meter_readings_url")
        customer = await self.get_customer_details(
            account_number=account_number, meter_number=meter_number
        )
        body = self._options(
            account_number=account_number or customer.number,
            meter_number=meter_number,
            phone_number=phone_number,
            readings=readings,
        )
        return dict(self._ensure_success(await self._post(url, body)))

    async def fetch_customer(self, account_number: str) -> Customer:
        return await self.get_customer_details(account_number=account_number)

    async def fetch_account(self, account_number: str) -> Customer:
        return await self.get_account_details(account_number=account_number)

    async def fetch_accessors(self, account_number: str) -> list[Accessor]:
        # the vendor API does not expose account users
        return []

    async def fetch_bill_batches(self, account_number: str) -> list[list[dict[str, str]]]:
        return await self.get_bill_batches(account_number=account_number)

    async def is_stale(self, account_number: str, last_fetched_at: Optional[datetime]) -> bool:
        # no freshness signal over HTTP; always refetch
        return True
