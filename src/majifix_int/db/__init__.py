"""Database clients and utilities."""

from .mssql import db_cursor, fetch_all, get_conn

__all__ = ["db_cursor", "fetch_all", "get_conn"]
