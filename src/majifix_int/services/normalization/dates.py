"""Date parsing against ordered lists of vendor date formats.

Formats use the billing vendor's token notation (``MM/DD/YYYY``,
``DD-MM-YY HH:mm``, ``MMMMYYYY``); any other character is matched
literally. Each format is compiled to a regular expression matched against
the start of the value, so text trailing the format (a time part after a
date-only format) is ignored. ``YYYY`` also accepts two-digit years, read
as 1969-2068. A format that already contains ``%`` is treated as a raw
``strptime`` pattern.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Iterable, Optional, Pattern

_TOKENS = {
    "YYYY": "%Y",
    "YY": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "DD": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
    "A": "%p",
}
_FIELDS = {
    "YYYY": r"(\d{4}|\d{2})",
    "YY": r"(\d{2})",
    "MMMM": r"([A-Za-z]+)",
    "MMM": r"([A-Za-z]+)",
    "MM": r"(\d{1,2})",
    "DD": r"(\d{1,2})",
    "HH": r"(\d{1,2})",
    "mm": r"(\d{1,2})",
    "ss": r"(\d{1,2})",
    "A": r"([AaPp][Mm])",
}
_NUMERIC = {"MM": "month", "DD": "day", "HH": "hour", "mm": "minute", "ss": "second"}
_TOKEN_PATTERN = re.compile("|".join(sorted(_TOKENS, key=len, reverse=True)))

_MONTHS = {name.lower(): index for index, name in enumerate(calendar.month_name) if name}
_MONTHS.update({name.lower(): index for index, name in enumerate(calendar.month_abbr) if name})


class InvalidDateError(ValueError):
    """None of the configured formats produced a valid date."""


@lru_cache(maxsize=64)
def to_strptime_format(pattern: str) -> str:
    """Translate a vendor date pattern into a ``strftime``/``strptime`` format string."""
    if "%" in pattern:
        return pattern
    return _TOKEN_PATTERN.sub(lambda match: _TOKENS[match.group(0)], pattern)


@lru_cache(maxsize=64)
def _compile(pattern: str) -> tuple[Pattern[str], tuple[str, ...]]:
    """Regular expression for a vendor pattern plus the token behind each group."""
    parts: list[str] = []
    tokens: list[str] = []
    position = 0
    for match in _TOKEN_PATTERN.finditer(pattern):
        parts.append(re.escape(pattern[position:match.start()]))
        parts.append(_FIELDS[match.group(0)])
        tokens.append(match.group(0))
        position = match.end()
    parts.append(re.escape(pattern[position:]))
    return re.compile("".join(parts)), tuple(tokens)


def _year(text: str) -> int:
    year = int(text)
    if len(text) == 2:
        year += 2000 if year < 69 else 1900
    return year


def _parse(value: str, pattern: str) -> Optional[datetime]:
    if "%" in pattern:
        try:
            return datetime.strptime(value, pattern)
        except ValueError:
            return None

    regex, tokens = _compile(pattern)
    match = regex.match(value)
    if match is None:
        return None

    parts = {"year": 1900, "month": 1, "day": 1, "hour": 0, "minute": 0, "second": 0}
    meridiem = None
    for token, text in zip(tokens, match.groups()):
        if token in ("YYYY", "YY"):
            parts["year"] = _year(text)
        elif token in ("MMMM", "MMM"):
            month = _MONTHS.get(text.lower())
            if month is None:
                return None
            parts["month"] = month
        elif token == "A":
            meridiem = text.lower()
        else:
            parts[_NUMERIC[token]] = int(text)

    if meridiem == "pm" and parts["hour"] < 12:
        parts["hour"] += 12
    elif meridiem == "am" and parts["hour"] == 12:
        parts["hour"] = 0

    try:
        return datetime(**parts)
    except ValueError:
        return None


def to_date(value: Any, formats: Iterable[str] | str) -> datetime:
    """Return the first valid parse of ``value`` in ``formats`` order.

    Callers must check the value is present before calling; an empty or
    unparseable value raises :class:`InvalidDateError`. Ambiguous strings
    resolve to whichever format is listed first.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip() if value is not None else ""
    candidates = [formats] if isinstance(formats, str) else list(formats)
    if text:
        for pattern in candidates:
            parsed = _parse(text, pattern)
            if parsed is not None:
                return parsed
    raise InvalidDateError(f"Unable to parse date '{value}' using formats {candidates}")


def format_month(value: Optional[datetime], pattern: str) -> str:
    """Render a bill period label such as ``January2024``; ``None`` renders empty."""
    if value is None:
        return ""
    return value.strftime(to_strptime_format(pattern))
