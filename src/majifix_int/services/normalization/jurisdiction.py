"""Jurisdiction code resolution."""

from __future__ import annotations

from typing import Iterable, Optional

from ...models.domain import Jurisdiction


def resolve_jurisdiction(
    code: Optional[str], table: Iterable[Jurisdiction], default: str
) -> str:
    """Map a vendor jurisdiction code to its name, never echoing an unknown code."""
    if not code:
        return default
    for entry in table:
        if entry.code == code:
            return entry.name
    return default
