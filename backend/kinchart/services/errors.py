"""Uniform handling of backend failures.

A failed database or storage call aborts the action, is logged with the
underlying error, and reaches the client as a fixed, human-readable message.
Nothing is retried.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from kinchart.services.storage import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def report_failure(
    message: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> Iterator[None]:
    """Turn backend errors raised inside the block into ``HTTPException``.

    Args:
        message: Static message shown to the user, e.g. "Failed to load visits".
        status_code: Response status for the failure.
    """
    try:
        yield
    except (SQLAlchemyError, StorageError) as e:
        logger.exception("%s: %s", message, e)
        raise HTTPException(status_code=status_code, detail=message) from e
