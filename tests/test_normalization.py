from datetime import datetime

import pytest

from majifix_int.config import parse_jurisdiction_codes
from majifix_int.models.domain import Customer, GeoPoint
from majifix_int.services.normalization import (
    InvalidDateError,
    format_month,
    merge_accounts,
    normalize_accessor,
    normalize_account,
    resolve_jurisdiction,
    to_date,
    to_e164,
)
from majifix_int.services.normalization.accounts import compose_address, strip_boilerplate, to_location


def test_to_date_uses_first_matching_format():
    assert to_date("01/15/2020", ["MM/DD/YYYY", "YYYY/MM/DD"]) == datetime(2020, 1, 15)
    assert to_date("2020/01/15", ["MM/DD/YYYY", "YYYY/MM/DD"]) == datetime(2020, 1, 15)


def test_to_date_ambiguous_value_follows_format_order():
    assert to_date("01/02/2020", ["MM/DD/YYYY", "DD/MM/YYYY"]) == datetime(2020, 1, 2)
    assert to_date("01/02/2020", ["DD/MM/YYYY", "MM/DD/YYYY"]) == datetime(2020, 2, 1)


def test_to_date_ignores_trailing_time():
    assert to_date("01/15/2020 10:30:00", ["MM/DD/YYYY"]) == datetime(2020, 1, 15)


def test_to_date_user_format_with_time():
    assert to_date("15-01-20 10:30", ["DD-MM-YY HH:mm"]) == datetime(2020, 1, 15, 10, 30)


def test_to_date_reads_two_digit_years_under_four_digit_token():
    assert to_date("01/15/20", ["MM/DD/YYYY"]) == datetime(2020, 1, 15)
    assert to_date("01/15/75", ["MM/DD/YYYY"]) == datetime(1975, 1, 15)
    assert to_date("01/15/2020", ["MM/DD/YYYY"]) == datetime(2020, 1, 15)


def test_to_date_month_names_and_meridiem():
    assert to_date("January2020", ["MMMMYYYY"]) == datetime(2020, 1, 1)
    assert to_date("15 Feb 2020", ["DD MMM YYYY"]) == datetime(2020, 2, 15)
    assert to_date("01/15/2020 02:30 PM", ["MM/DD/YYYY HH:mm A"]) == datetime(2020, 1, 15, 14, 30)
    with pytest.raises(InvalidDateError):
        to_date("Smarch2020", ["MMMMYYYY"])


def test_to_date_raw_strptime_pattern_is_strict():
    assert to_date("2020-01-15", ["%Y-%m-%d"]) == datetime(2020, 1, 15)
    with pytest.raises(InvalidDateError):
        to_date("2020-01-15 trailing", ["%Y-%m-%d"])


@pytest.mark.parametrize("value", ["13/45/2020", "", None, "not a date"])
def test_to_date_invalid_raises(value):
    with pytest.raises(InvalidDateError):
        to_date(value, ["MM/DD/YYYY"])


def test_to_date_is_idempotent_over_iso_output():
    formats = ["MM/DD/YYYY", "YYYY-MM-DDTHH:mm:ss"]
    parsed = to_date("03/04/2021", formats)
    assert to_date(parsed.isoformat(), formats) == parsed
    assert to_date(parsed, formats) is parsed


def test_format_month():
    assert format_month(datetime(2020, 1, 5), "MMMMYYYY") == "January2020"
    assert format_month(None, "MMMMYYYY") == ""


def test_to_e164():
    assert to_e164("0743480898") == "+255743480898"
    assert to_e164("+255 743 480 898") == "+255743480898"
    assert to_e164("") is None
    assert to_e164(None) is None
    assert to_e164("abc") is None


def test_resolve_jurisdiction():
    table = parse_jurisdiction_codes(["C:Kinondoni", "D:Magomeni", "K:Ilala", "B:Ilala"])
    assert resolve_jurisdiction("C", table, "Gerezani") == "Kinondoni"
    assert resolve_jurisdiction("B", table, "Gerezani") == "Ilala"
    assert resolve_jurisdiction("Z", table, "Gerezani") == "Gerezani"
    assert resolve_jurisdiction(None, table, "Gerezani") == "Gerezani"
    assert resolve_jurisdiction("", table, "Gerezani") == "Gerezani"


def test_address_helpers():
    assert strip_boilerplate("PLOT NO. 12") == "12"
    assert strip_boilerplate("BLOCK NO. A") == "A"
    assert strip_boilerplate(None) == ""
    assert compose_address(["", "12", None, "Kinondoni", ""]) == "12, Kinondoni"


def test_to_location():
    assert to_location("39.2", "-6.8") == GeoPoint(coordinates=[39.2, -6.8])
    assert to_location(39.2, -6.8).type == "Point"
    assert to_location("", "-6.8") is None
    assert to_location("abc", "-6.8") is None
    assert to_location("nan", "-6.8") is None
    assert to_location(None, None) is None


def test_normalize_account_canonicalizes_fields(settings):
    customer = normalize_account(
        {
            "jurisdiction": "C",
            "number": "a880 1866",
            "identity": "m-778",
            "name": "JUMA HAMISI",
            "phone": "0713000111",
            "plot": "",
            "house": "PLOT NO. 12",
            "neighborhood": "",
            "city": "",
            "longitude": "39.2",
            "latitude": "-6.8",
            "balance": "750",
        },
        settings,
    )

    assert customer.number == "A8801866"
    assert customer.identity == "M-778"
    assert customer.jurisdiction == "Kinondoni"
    assert customer.phone == "+255713000111"
    assert customer.house == "12"
    assert customer.address == "12, Kinondoni"
    assert customer.location == GeoPoint(coordinates=[39.2, -6.8])
    assert customer.category == "Domestic"
    assert customer.locale == "sw"
    assert customer.active is True
    assert customer.balance == "750"


def test_normalize_account_falls_back_to_defaults(settings):
    customer = normalize_account({"jurisdiction": "Z"}, settings)

    assert customer.number == ""
    assert customer.jurisdiction == "Gerezani"
    assert customer.phone == "+255743480898"
    assert customer.address == "Gerezani"
    assert customer.location is None


def test_normalize_account_tolerates_none(settings):
    customer = normalize_account(None, settings)
    assert isinstance(customer, Customer)
    assert customer.jurisdiction == "Gerezani"


def test_normalize_accessor(settings):
    accessor = normalize_accessor(
        {"name": "Asha", "phone": "0713000111", "email": "asha@example.com", "verifiedAt": "15-01-20 10:30"},
        settings,
    )
    assert accessor.phone == "+255713000111"
    assert accessor.verified_at == datetime(2020, 1, 15, 10, 30)

    unverified = normalize_accessor({"name": "Asha", "verifiedAt": "yesterday"}, settings)
    assert unverified.verified_at is None
    assert unverified.phone is None


def test_merge_accounts_prefers_supplied_account_values(settings):
    customer = normalize_account(
        {"jurisdiction": "C", "number": "A8801866", "identity": "M-778", "name": "HAMISI", "house": "12"},
        settings,
    )
    account = normalize_account(
        {"number": "A8801866", "name": "JUMA HAMISI", "neighborhood": "BLOCK NO. 7"}, settings
    )

    merged = merge_accounts(customer, account, settings)

    assert merged.name == "JUMA HAMISI"
    assert merged.identity == "M-778"
    assert merged.jurisdiction == "Kinondoni"
    assert merged.neighborhood == "7"
    assert merged.address == "12, 7, Kinondoni"
    assert customer.name == "HAMISI"


def test_merge_accounts_without_account_copies_customer(settings):
    customer = normalize_account({"number": "A1"}, settings)
    merged = merge_accounts(customer, None, settings)
    assert merged == customer
    assert merged is not customer
