from typing import Any

import pytest

from majifix_int.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        billing_source="api",
        bill_api_customer_details_url="https://billing.test/customer",
        bill_api_account_details_url="https://billing.test/account",
        bill_api_current_url="https://billing.test/bills/current",
        bill_api_previous_url="https://billing.test/bills/previous",
        bill_api_meter_readings_url="https://billing.test/readings",
        ponds_api_bill_number_url="https://billing.test/ponds/bill-number",
        http_backoff_seconds=0,
    )


def feed_record(**overrides: Any) -> dict[str, Any]:
    """A customer details record as the billing API returns it inside ``feedh``."""
    record = {
        "DEPM_CODE": "C12",
        "CUSTKEY": "a880 1866",
        "METER_REF": "m-778",
        "INITIAL": "Juma",
        "SURNAME": "Hamisi",
        "CELL_TEL_NO": "0713000111",
        "UA_ADRESS1": "",
        "UA_ADRESS2": "PLOT NO. 12",
        "UA_ADRESS3": "",
        "UA_ADRESS4": "",
        "X_GPS": "39.2",
        "Y_GPS": "-6.8",
        "Balance": "750",
    }
    record.update(overrides)
    return record


def bill_record(reading_date: str, **overrides: Any) -> dict[str, Any]:
    """A raw bill field bag as produced by the extractors and the SQL queries."""
    record = {
        "number": "99100",
        "readingDate": reading_date,
        "consumption": "12",
        "currentCharges": "15000",
        "previousReading": "100",
        "currentReading": "112",
        "openBalance": "2000",
        "closeBalance": "500",
        "outstandBalance": "500",
    }
    record.update(overrides)
    return record
