"""SQL Server connection helpers (pyodbc).

pyodbc is imported lazily: it needs the system ODBC driver manager, which
hosts running only the HTTP billing source may not have installed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generator, Sequence

from ..config import Settings, settings as default_settings
from ..errors import UpstreamError

if TYPE_CHECKING:
    import pyodbc

logger = logging.getLogger(__name__)


def get_conn(settings: Settings | None = None, *, autocommit: bool = True) -> "pyodbc.Connection":
    """Open a connection to the billing database."""
    import pyodbc

    settings = settings or default_settings
    return pyodbc.connect(settings.odbc_connection_string, autocommit=autocommit)


@contextmanager
def db_cursor(settings: Settings | None = None) -> Generator["pyodbc.Cursor", None, None]:
    """Context manager for a cursor that always cleans up."""
    conn = get_conn(settings)
    try:
        cur = conn.cursor()
        try:
            yield cur
        finally:
            cur.close()
    finally:
        conn.close()


def fetch_all(
    query: str, params: Sequence[Any] = (), settings: Settings | None = None
) -> list[dict[str, Any]]:
    """Run a query and return its rows as dictionaries keyed by column alias."""
    import pyodbc

    try:
        with db_cursor(settings) as cur:
            cur.execute(query, *params)
            if cur.description is None:
                return []
            columns = [column[0] for column in cur.description]
            rows = [dict(zip(columns, row)) for row in cur.fetchall()]
    except pyodbc.Error as exc:
        logger.error(f"Billing database query failed: {exc}")
        raise UpstreamError(f"Billing database query failed: {exc}") from exc
    logger.debug(f"Query returned {len(rows)} rows")
    return rows
