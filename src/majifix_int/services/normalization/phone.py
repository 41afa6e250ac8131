"""Phone number canonicalization."""

from __future__ import annotations

import logging
from typing import Any, Optional

import phonenumbers

logger = logging.getLogger(__name__)


def to_e164(value: Any, region: str = "TZ") -> Optional[str]:
    """Format a phone number as E.164, or return ``None`` when it cannot be parsed."""
    text = str(value).strip() if value is not None else ""
    if not text:
        return None
    try:
        parsed = phonenumbers.parse(text, region)
    except phonenumbers.NumberParseException:
        logger.debug(f"Unable to parse phone number '{text}'")
        return None
    if not phonenumbers.is_possible_number(parsed):
        logger.debug(f"Phone number '{text}' is not a possible number for {region}")
        return None
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
