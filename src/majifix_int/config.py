"""Application configuration and settings management."""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .models.domain import Jurisdiction

DEFAULT_JURISDICTION_CODES = (
    "C:Kinondoni",
    "D:Magomeni",
    "E:Kawe",
    "L:Kibaha",
    "G:Bagamoyo",
    "H:Kibaha",
    "F:Temeke",
    "M:Ubungo",
    "N:Tabata",
    "K:Ilala",
    "B:Ilala",
    "J:Tegeta",
)


def _split_values(value: Any) -> tuple[str, ...]:
    """Parse a string tuple from a JSON array or a comma-separated string."""
    if isinstance(value, (tuple, list)):
        return tuple(str(item) for item in value)
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
            if isinstance(parsed, list):
                return tuple(str(item) for item in parsed)
        except (json.JSONDecodeError, TypeError):
            pass
        return tuple(item.strip() for item in value.split(",") if item.strip())
    return tuple()


def parse_jurisdiction_codes(values: Any) -> tuple[Jurisdiction, ...]:
    """Turn ``CODE:Name`` entries into jurisdiction records, skipping blanks."""
    codes: list[Jurisdiction] = []
    for entry in values:
        if isinstance(entry, Jurisdiction):
            codes.append(entry)
            continue
        entry = str(entry).strip()
        if not entry:
            continue
        parts = entry.split(":")
        codes.append(Jurisdiction(code=parts[0], name=parts[-1]))
    return tuple(codes)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app_name: str = "Majifix Billing Integration API"
    api_prefix: str = "/api"
    allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(),
        description="Permitted web origins for browser clients (CORS).",
    )
    log_level: str = "INFO"
    billing_source: Literal["api", "sql"] = Field(
        default="api",
        description="Where account and bill records are read from.",
    )

    # Billing HTTP API
    bill_api_customer_details_url: Optional[str] = None
    bill_api_account_details_url: Optional[str] = None
    bill_api_current_url: Optional[str] = None
    bill_api_previous_url: Optional[str] = None
    bill_api_meter_readings_url: Optional[str] = None
    ponds_api_bill_number_url: Optional[str] = None
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    http_max_retries: int = Field(default=2, ge=0)
    http_backoff_seconds: float = Field(default=1.0, ge=0.0)

    # Billing SQL Server database
    mssql_host: Optional[str] = None
    mssql_database_name: Optional[str] = None
    mssql_user: Optional[str] = None
    mssql_password: Optional[str] = None
    mssql_driver: str = "ODBC Driver 18 for SQL Server"
    mssql_trust_server_certificate: bool = True
    default_offset: int = Field(default=0, ge=0)
    default_limit: int = Field(default=10, ge=1)

    # Normalization defaults
    default_jurisdiction: str = "Gerezani"
    default_customer_category: str = "Domestic"
    default_phone_number: str = "0743480898"
    default_phone_region: str = "TZ"
    default_locale: str = "sw"
    default_sampling_bill_periods: int = Field(default=6, ge=1)
    default_bill_periods: int = Field(default=3, ge=1)
    default_bill_currency: str = "TZS"
    default_bill_notes: str = "LIPIA ANKARA YAKO MAPEMA KUEPUKA USUMBUFU WA KUKATIWA MAJI"
    default_bill_pay_period: int = Field(default=7, ge=0)
    default_bill_date_format: Annotated[tuple[str, ...], NoDecode] = ("MM/DD/YYYY", "YYYY/MM/DD")
    default_user_date_format: Annotated[tuple[str, ...], NoDecode] = ("DD-MM-YY HH:mm",)
    default_bill_month_format: str = "MMMMYYYY"
    default_jurisdiction_codes: Annotated[tuple[Jurisdiction, ...], NoDecode] = Field(
        default_factory=lambda: parse_jurisdiction_codes(DEFAULT_JURISDICTION_CODES),
        description="Vendor jurisdiction code table, entries formatted as CODE:Name.",
    )

    @field_validator(
        "allowed_origins", "default_bill_date_format", "default_user_date_format", mode="before"
    )
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        return _split_values(value)

    @field_validator("default_jurisdiction_codes", mode="before")
    @classmethod
    def _parse_jurisdiction_codes(cls, value: Any) -> tuple[Jurisdiction, ...]:
        if isinstance(value, str):
            value = _split_values(value)
        return parse_jurisdiction_codes(value or ())

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if value.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return value.upper()

    @property
    def odbc_connection_string(self) -> str:
        """Build the SQL Server ODBC connection string."""
        if not self.mssql_host or not self.mssql_database_name:
            raise ValueError("MSSQL host and database name are not configured.")
        parts = [
            f"DRIVER={{{self.mssql_driver}}}",
            f"SERVER={self.mssql_host}",
            f"DATABASE={self.mssql_database_name}",
            f"UID={self.mssql_user or ''}",
            f"PWD={self.mssql_password or ''}",
        ]
        if self.mssql_trust_server_certificate:
            parts.append("TrustServerCertificate=yes")
        return ";".join(parts)


settings = Settings()
