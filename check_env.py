#!/usr/bin/env python3
"""Helper script to check (or template) the .env file for the billing integration."""

import sys
from pathlib import Path

TEMPLATE = """# Billing source: "api" (vendor HTTP API) or "sql" (direct SQL Server access)
BILLING_SOURCE=api

# Vendor HTTP API
BILL_API_CUSTOMER_DETAILS_URL=https://billing.example.com/customer
BILL_API_ACCOUNT_DETAILS_URL=https://billing.example.com/account
BILL_API_CURRENT_URL=https://billing.example.com/bills/current
BILL_API_PREVIOUS_URL=https://billing.example.com/bills/previous
BILL_API_METER_READINGS_URL=https://billing.example.com/readings
PONDS_API_BILL_NUMBER_URL=https://billing.example.com/ponds/bill-number

# SQL Server (only when BILLING_SOURCE=sql)
MSSQL_HOST=localhost
MSSQL_DATABASE_NAME=billing
MSSQL_USER=
MSSQL_PASSWORD=

# Normalization defaults (JSON array or comma-separated lists)
DEFAULT_JURISDICTION=Gerezani
DEFAULT_BILL_PERIODS=3
DEFAULT_BILL_DATE_FORMAT=MM/DD/YYYY,YYYY/MM/DD
# DEFAULT_JURISDICTION_CODES=C:Kinondoni,D:Magomeni,E:Kawe
"""

API_KEYS = (
    "bill_api_customer_details_url",
    "bill_api_account_details_url",
    "bill_api_current_url",
    "bill_api_previous_url",
)
SQL_KEYS = ("mssql_host", "mssql_database_name", "mssql_user", "mssql_password")


def _mask(value: str) -> str:
    return value if len(value) <= 8 else value[:4] + "..." + value[-2:]


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Billing Integration Environment Checker")
    print("=" * 60)

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Please edit .env and fill in the billing endpoints or database credentials.")
        return 1

    print(f"Found .env file at: {env_file}")
    sys.path.insert(0, str(project_root / "src"))
    try:
        from majifix_int.config import Settings

        settings = Settings()
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    keys = SQL_KEYS if settings.billing_source == "sql" else API_KEYS
    missing = []
    print(f"Billing source: {settings.billing_source}")
    for key in keys:
        value = getattr(settings, key)
        if value:
            shown = _mask(value) if "password" in key else value
            print(f"  {key.upper()}: {shown}")
        else:
            missing.append(key.upper())
            print(f"  {key.upper()}: not set")

    print(f"Jurisdictions: {', '.join(f'{j.code}:{j.name}' for j in settings.default_jurisdiction_codes)}")
    print(f"Bill date formats: {list(settings.default_bill_date_format)}")
    print()
    if missing:
        print(f"Missing settings: {', '.join(missing)}")
        return 1
    print("Configuration looks complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
