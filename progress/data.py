"""Running PostgREST queries against the managed tables.

Every query built on the Supabase client goes through :func:`execute` so that
backend and network failures reach callers as ``ProgressError`` subclasses.
"""
import logging

import httpx
from postgrest.exceptions import APIError

from .errors import DataError, NotFoundError, from_api_error

logger = logging.getLogger(__name__)


def execute(query):
    """Execute ``query`` and return its rows (``[]`` when nothing came back)."""
    try:
        resp = query.execute()
    except APIError as e:
        raise from_api_error(e) from e
    except httpx.HTTPError as e:
        raise DataError('Network error. Please check your connection and try again.',
                        technical=str(e)) from e
    data = getattr(resp, 'data', None)
    if data is None:
        return []
    return data


def fetch_one(query, resource="Record"):
    rows = execute(query.limit(1))
    if not rows:
        raise NotFoundError(resource)
    return rows[0]


def parse_rows(model, rows):
    """Validate raw rows into ``model`` instances, dropping the ones that do not fit."""
    records = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValueError as e:
            logger.warning(f"Dropping malformed {model.__name__} row {row.get('id') if isinstance(row, dict) else row!r}: {e}")
    return records
