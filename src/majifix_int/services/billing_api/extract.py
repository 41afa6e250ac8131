"""Mapping of billing API payloads onto normalizer field bags."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ..normalization.phone import to_e164

_WHITESPACE = re.compile(r"\s")


def _get(data: Optional[Mapping[str, Any]], key: str) -> str:
    if not data:
        return ""
    value = data.get(key)
    return "" if value is None else str(value).strip()


def _to_normal(value: Any) -> Optional[str]:
    if not value:
        return None
    return _WHITESPACE.sub("", str(value)).upper()


def normalize_api_options(
    account_number: Any = None,
    meter_number: Any = None,
    plate_number: Any = None,
    phone_number: Any = None,
    pond_number: Any = None,
    readings: Any = None,
    region: str = "TZ",
) -> dict[str, str]:
    """Build the flat request body expected by the billing API.

    Values are uppercased and stripped of whitespace; absent options are
    left out and the phone number is sent in E.164 when it can be parsed.
    """
    options = {
        "cust_acc": _to_normal(account_number),
        "accountno": _to_normal(account_number),
        "meter_no": _to_normal(meter_number),
        "meterno": _to_normal(meter_number),
        "plateno": _to_normal(plate_number),
        "phoneno": _to_normal(phone_number),
        "pond": _to_normal(pond_number),
        "readings": _to_normal(readings),
    }
    if options["phoneno"]:
        options["phoneno"] = to_e164(options["phoneno"], region) or options["phoneno"]
    return {key: value for key, value in options.items() if value is not None}


def is_success_response(data: Any) -> bool:
    """A response succeeds only when its ``success`` field is numerically 200."""
    if not isinstance(data, Mapping):
        return False
    try:
        return float(data.get("success")) == 200
    except (TypeError, ValueError):
        return False


def extract_account_details(response: Any) -> dict[str, str]:
    """Pick the first ``feedh`` record of a customer/account details response."""
    feed = response.get("feedh") if isinstance(response, Mapping) else None
    if isinstance(feed, Mapping):
        feed = [feed]
    records = [record for record in (feed or []) if record]
    data = records[0] if records else None

    name = " ".join([_get(data, "INITIAL"), _get(data, "SURNAME")]).strip()
    return {
        "jurisdiction": _get(data, "DEPM_CODE")[:1].upper(),
        "number": _get(data, "CUSTKEY").upper(),
        "identity": _get(data, "METER_REF").upper(),
        "name": name.upper(),
        "phone": _get(data, "CELL_TEL_NO").upper(),
        "plot": _get(data, "UA_ADRESS1"),
        "house": _get(data, "UA_ADRESS2"),
        "neighborhood": _get(data, "UA_ADRESS3"),
        "city": _get(data, "UA_ADRESS4"),
        "longitude": _get(data, "X_GPS"),
        "latitude": _get(data, "Y_GPS"),
        "balance": _get(data, "Balance"),
    }


def extract_bill_details(records: Iterable[Any]) -> list[dict[str, str]]:
    """Map raw bill records (current ``markers`` or previous bills) to bill field bags."""
    bills = []
    for data in records or []:
        if not isinstance(data, Mapping) or not data:
            continue
        if not _get(data, "GEPG_CONTROL_NO") and not _get(data, "DATE_OF_READING"):
            continue
        name = " ".join([_get(data, "INITIAL"), _get(data, "SURNAME")]).strip()
        bills.append(
            {
                "accountNumber": _get(data, "CUSTKEY").upper(),
                "phone": _get(data, "CELL_TEL_NO").upper(),
                "name": name.upper(),
                "category": _get(data, "CONSUMER_TYPE_DESC").upper(),
                "number": _get(data, "GEPG_CONTROL_NO").upper(),
                "openBalance": _get(data, "OPENING_BALANCE"),
                "closeBalance": _get(data, "CURRENT_BALANCE"),
                "outstandBalance": _get(data, "CURRENT_BALANCE"),
                "currentCharges": _get(data, "CURRENT_CHARGES"),
                "currentReading": _get(data, "CR_READING"),
                "previousReading": _get(data, "PR_READING"),
                "readingDate": _get(data, "DATE_OF_READING"),
                "consumption": _get(data, "CONSUMPTION"),
            }
        )
    return bills
