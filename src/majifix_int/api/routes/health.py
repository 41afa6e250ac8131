"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/source", status_code=status.HTTP_200_OK)
def health_source() -> dict:
    """Report whether the configured billing source has what it needs to connect."""
    if settings.billing_source == "sql":
        from ...db.mssql import db_cursor

        try:
            with db_cursor(settings) as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
            return {"source": "sql", "healthy": True}
        except Exception as e:
            return {"source": "sql", "healthy": False, "error": str(e)}

    missing = [
        name
        for name in (
            "bill_api_customer_details_url",
            "bill_api_account_details_url",
            "bill_api_current_url",
            "bill_api_previous_url",
        )
        if not getattr(settings, name)
    ]
    return {"source": "api", "healthy": not missing, "missing": [name.upper() for name in missing]}
