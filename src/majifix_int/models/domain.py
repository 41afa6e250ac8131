"""Domain models for billing accounts, customers and bills."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class Jurisdiction:
    """Single-letter vendor code mapped to an administrative area name."""

    code: str
    name: str


@dataclass(slots=True)
class GeoPoint:
    """GeoJSON point; coordinates are ``[longitude, latitude]``."""

    coordinates: list[float]
    type: str = "Point"


@dataclass(slots=True)
class BillItem:
    name: str
    quantity: float = 0
    unit: str = "cbm"
    price: Optional[float] = None
    time: Optional[datetime] = None
    items: list["BillItem"] = field(default_factory=list)


@dataclass(slots=True)
class BillPeriod:
    name: str = ""
    billed_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    dued_at: Optional[datetime] = None


@dataclass(slots=True)
class BillBalance:
    outstand: float = 0
    open: float = 0
    close: float = 0
    charges: float = 0
    debt: float = 0


@dataclass(slots=True)
class Bill:
    """One billing period statement."""

    number: str = ""
    notes: str = ""
    currency: str = ""
    period: BillPeriod = field(default_factory=BillPeriod)
    balance: BillBalance = field(default_factory=BillBalance)
    items: list[BillItem] = field(default_factory=list)


@dataclass(slots=True)
class Accessor:
    """A user authorized to view an account."""

    name: str = ""
    phone: Optional[str] = None
    email: str = ""
    verified_at: Optional[datetime] = None


@dataclass(slots=True)
class Customer:
    """Canonical customer record as resolved from a single billing lookup."""

    number: str = ""
    identity: str = ""
    jurisdiction: str = ""
    category: str = ""
    name: str = ""
    phone: Optional[str] = None
    email: str = ""
    plot: str = ""
    house: str = ""
    neighborhood: str = ""
    city: str = ""
    address: str = ""
    locale: str = ""
    active: bool = True
    location: Optional[GeoPoint] = None
    balance: Any = None


@dataclass(slots=True)
class Account(Customer):
    """Customer record with its accessors and reconciled bill history attached."""

    accessors: list[Accessor] = field(default_factory=list)
    bills: list[Bill] = field(default_factory=list)
    fetched_at: Optional[datetime] = None
