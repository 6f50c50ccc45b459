"""Language Storage Access

Each language's nouns live in their own SQLite file. Every operation opens
a fresh read-only connection through a throwaway async engine and disposes
of it on exit, so concurrent callers never share a handle.
"""
import re
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable
from urllib.parse import quote

from sqlalchemy import inspect
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.pool import NullPool

from core.config import settings
from core.errors import (
    AppError,
    Ok,
    Err,
    Result,
    StorageErrorMapper,
    invalid_format,
    raise_error,
    storage_unavailable,
)
from core.logging import db_logger

log = db_logger()

LANGUAGE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

# Opens a language's storage and yields a live connection
StorageOpener = Callable[[str], AbstractAsyncContextManager[AsyncConnection]]


def validate_language(language: str, origin: str = "storage") -> Result[str, AppError]:
    """Language identifiers become part of a file name, so keep them plain."""
    if not language or not LANGUAGE_PATTERN.fullmatch(language):
        return invalid_format("language", "letters, digits, '_' or '-'", got=language, origin=origin)
    return Ok(language)


def language_db_path(language: str) -> Path:
    """Resolve the SQLite file holding a language's data."""
    filename = settings.LANGUAGE_DB_TEMPLATE.format(language=language)
    return Path(settings.LANGUAGE_DATA_DIR) / filename


def readonly_url(path: Path) -> URL:
    """Build an aiosqlite URI connection string that opens `path` read-only."""
    return URL.create(
        "sqlite+aiosqlite",
        database=f"file:{quote(str(path.resolve()))}",
        query={"mode": "ro", "uri": "true"},
    )


@asynccontextmanager
async def open_language_db(language: str) -> AsyncIterator[AsyncConnection]:
    """Open a language database read-only for the duration of the block.

    Raises AppErrorException(StorageUnavailable) when the file is missing or
    the connection cannot be established. The connection and engine are
    released on every exit path.
    """
    path = language_db_path(language)
    if not path.is_file():
        log.warning("storage_unavailable", language=language, path=str(path), reason="missing file")
        raise_error(storage_unavailable(language, path, "file does not exist", origin="storage.open").error)

    engine = create_async_engine(readonly_url(path), poolclass=NullPool, echo=settings.LOG_SQL)
    try:
        try:
            conn = await engine.connect()
        except SQLAlchemyError as e:
            log.warning("storage_unavailable", language=language, path=str(path), error=str(e))
            raise_error(storage_unavailable(
                language, path, str(e.orig or e), origin="storage.open", cause=e
            ).error)
        log.debug("storage_opened", language=language, path=str(path))
        try:
            yield conn
        finally:
            await conn.close()
    finally:
        await engine.dispose()


async def fetch_column_names(
    conn: AsyncConnection,
    language: str,
    table: str,
) -> Result[list[str], AppError]:
    """Reflect the column names of `table` in schema order.

    Returns:
        Ok(column names)
        Err(StorageUnavailable) if the file turns out to be unreadable
        Err(QueryConstructionFailed) if the table does not exist
    """
    mapper = StorageErrorMapper(language, table, origin="storage.reflect")
    try:
        columns = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_columns(table))
    except SQLAlchemyError as e:
        return Err(mapper.map_exception(e))
    return Ok([c["name"] for c in columns])
