"""Account, customer and accessor normalization."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import fields, replace
from typing import Any, Iterable, Mapping, Optional

from ...config import Settings, settings as default_settings
from ...models.domain import Accessor, Customer, GeoPoint
from .dates import InvalidDateError, to_date
from .jurisdiction import resolve_jurisdiction
from .phone import to_e164

logger = logging.getLogger(__name__)

_BOILERPLATE = re.compile(r"BLOCK NO\.|PLOT NO\.")
_WHITESPACE = re.compile(r"\s+")
_CUSTOMER_FIELDS = frozenset(item.name for item in fields(Customer))


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _key(value: Any) -> str:
    """Uppercase business key without embedded whitespace."""
    return _WHITESPACE.sub("", _text(value)).upper()


def strip_boilerplate(value: Any) -> str:
    """Remove ``BLOCK NO.`` / ``PLOT NO.`` markers from an address part."""
    return _BOILERPLATE.sub("", _text(value)).strip()


def compose_address(parts: Iterable[Any]) -> str:
    """Comma-join the non-empty address parts."""
    return ", ".join(str(part) for part in parts if part)


def _coordinate(value: Any) -> Optional[float]:
    text = _text(value)
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return number


def to_location(longitude: Any, latitude: Any) -> Optional[GeoPoint]:
    """Build a GeoJSON point when both axes are present and numeric."""
    lon = _coordinate(longitude)
    lat = _coordinate(latitude)
    if lon is None or lat is None:
        return None
    return GeoPoint(coordinates=[lon, lat])


def normalize_account(raw: Mapping[str, Any] | None, settings: Settings | None = None) -> Customer:
    """Build a canonical customer record from a raw field bag.

    Best effort: missing or malformed fields fall back to configured defaults
    or are omitted, nothing is raised.
    """
    settings = settings or default_settings
    raw = dict(raw or {})

    record: dict[str, Any] = {
        "jurisdiction": settings.default_jurisdiction,
        "category": settings.default_customer_category,
        "phone": settings.default_phone_number,
        "locale": settings.default_locale,
        "active": True,
    }
    record.update({key: value for key, value in raw.items() if key in _CUSTOMER_FIELDS and value is not None})

    jurisdiction = resolve_jurisdiction(
        _text(raw.get("jurisdiction")),
        settings.default_jurisdiction_codes,
        settings.default_jurisdiction,
    )
    record["jurisdiction"] = jurisdiction
    record["number"] = _key(raw.get("number"))
    record["identity"] = _key(raw.get("identity"))

    phone = _text(raw.get("phone")) or settings.default_phone_number
    record["phone"] = to_e164(phone, settings.default_phone_region)

    for name in ("name", "email", "plot", "city", "category", "locale"):
        record[name] = _text(record.get(name))
    record["house"] = strip_boilerplate(raw.get("house"))
    record["neighborhood"] = strip_boilerplate(raw.get("neighborhood"))
    record["address"] = compose_address(
        [record["plot"], record["house"], record["neighborhood"], jurisdiction, record["city"]]
    )
    record["location"] = to_location(raw.get("longitude"), raw.get("latitude"))

    return Customer(**record)


def normalize_accessor(raw: Mapping[str, Any] | None, settings: Settings | None = None) -> Accessor:
    """Build an account accessor (authorized user) from a raw field bag."""
    settings = settings or default_settings
    raw = dict(raw or {})

    verified_at = None
    if raw.get("verifiedAt"):
        try:
            verified_at = to_date(raw["verifiedAt"], settings.default_user_date_format)
        except InvalidDateError:
            logger.warning(f"Ignoring unparseable accessor verification date '{raw['verifiedAt']}'")

    return Accessor(
        name=_text(raw.get("name")),
        phone=to_e164(raw.get("phone"), settings.default_phone_region),
        email=_text(raw.get("email")),
        verified_at=verified_at,
    )


def merge_accounts(
    customer: Customer, account: Optional[Customer], settings: Settings | None = None
) -> Customer:
    """Overlay account detail fields on a customer record.

    Account details win on conflict. Values the account detail did not
    supply (empty, or left at the normalizer's defaults) never overwrite. The
    customer's identity is kept since account details do not carry one.
    """
    if account is None:
        return replace(customer)

    blank = normalize_account({}, settings)
    updates: dict[str, Any] = {}
    for item in fields(Customer):
        value = getattr(account, item.name)
        if value is None or value == "" or value == getattr(blank, item.name):
            continue
        updates[item.name] = value
    merged = replace(customer, **updates)
    merged.identity = customer.identity
    merged.address = compose_address(
        [merged.plot, merged.house, merged.neighborhood, merged.jurisdiction, merged.city]
    )
    return merged
