import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator

from asyncpg import InterfaceError, PostgresError, UniqueViolationError

from app.core.exceptions import ConflictError, DatabaseError


@contextmanager
def translate_db_errors(conflict_message: str) -> Iterator[None]:
    """Turn driver failures into the application's error types."""
    try:
        yield
    except UniqueViolationError as e:
        raise ConflictError(conflict_message) from e
    except (PostgresError, InterfaceError, OSError, asyncio.TimeoutError) as e:
        logging.error(f"Database failure: {e!r}")
        raise DatabaseError() from e
