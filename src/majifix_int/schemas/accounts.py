"""Account-facing API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GeoPointModel(CamelModel):
    type: str = "Point"
    coordinates: List[float]


class BillItemModel(CamelModel):
    name: str
    quantity: float
    unit: str
    price: float | None = None
    time: datetime | None = None
    items: List["BillItemModel"] = Field(default_factory=list)


class BillPeriodModel(CamelModel):
    name: str
    billed_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    dued_at: datetime | None = None


class BillBalanceModel(CamelModel):
    outstand: float
    open: float
    close: float
    charges: float
    debt: float


class BillModel(CamelModel):
    number: str
    notes: str
    currency: str
    period: BillPeriodModel
    balance: BillBalanceModel
    items: List[BillItemModel]


class AccessorModel(CamelModel):
    name: str
    phone: str | None = None
    email: str
    verified_at: datetime | None = None


class AccountModel(CamelModel):
    number: str
    identity: str
    jurisdiction: str
    category: str
    name: str
    phone: str | None = None
    email: str
    plot: str
    house: str
    neighborhood: str
    city: str
    address: str
    locale: str
    active: bool
    location: GeoPointModel | None = None
    balance: Any = None
    accessors: List[AccessorModel]
    bills: List[BillModel]
    fetched_at: datetime | None = None


class AccountNumbersResponse(CamelModel):
    items: List[str]
    offset: int
    limit: int


class AccountCountResponse(CamelModel):
    count: int


class PondBillNumberRequest(CamelModel):
    plate_number: str
    phone_number: str
    pond_number: str


class MeterReadingsRequest(CamelModel):
    readings: str | float
    phone_number: str | None = None
    account_number: str | None = None
    meter_number: str | None = None
