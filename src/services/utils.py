"""Shared utility functions for service layer."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from services.exceptions import StorageError

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_ilike(value: str) -> str:
    r"""
    Escape special ILIKE characters for safe use in LIKE/ILIKE patterns.

    LIKE/ILIKE treats these characters specially:
    - % matches any sequence of characters
    - _ matches any single character
    - \\ is the escape character

    This function escapes them so they match literally.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@contextmanager
def storage_operation(operation: str) -> Iterator[None]:
    """
    Convert database errors raised inside the block into ``StorageError``.

    The original error is logged with its traceback and chained; callers only
    see the generic operation name.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Database error during %s", operation)
        raise StorageError(operation) from e
