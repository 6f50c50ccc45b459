"""Error Boundary Mappers

Maps exceptions raised below a module boundary onto the module's AppError
codes. The storage boundary distinguishes an unusable language database
from a query that could not be built or run against it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import wraps
from typing import Awaitable, Callable, Generic, TypeVar

from sqlalchemy.exc import DBAPIError, NoSuchTableError, SQLAlchemyError

from .types import AppError, ErrorCode, ErrorContext, Err, Ok, Result
from .builders import internal_error, query_construction_failed, storage_unavailable
from .handlers import AppErrorException

T = TypeVar("T")

# SQLite messages that mean the file itself cannot be used
_UNAVAILABLE_MARKERS = (
    "unable to open",
    "file is not a database",
    "database disk image is malformed",
    "disk i/o error",
    "database is locked",
    "readonly database",
    "permission denied",
)


class ErrorMapper(ABC, Generic[T]):
    """Abstract base for error mappers at module boundaries."""

    @abstractmethod
    def map_error(self, error: AppError) -> AppError:
        """Map internal error to boundary error."""

    @abstractmethod
    def map_exception(self, exc: Exception) -> AppError:
        """Map an exception raised inside the boundary."""

    def map_result(self, result: Result[T, AppError]) -> Result[T, AppError]:
        """Map errors in Result while preserving success values."""
        match result:
            case Ok(_):
                return result
            case Err(e):
                return Err(self.map_error(e))


class StorageErrorMapper(ErrorMapper[T]):
    """Maps SQLAlchemy/SQLite failures for one language database."""

    def __init__(self, language: str, table: str, origin: str = "storage"):
        self.language = language
        self.table = table
        self.origin = origin

    def map_error(self, error: AppError) -> AppError:
        if 4000 <= error.code.value < 5000:
            return error
        return error.with_context(origin=self.origin)

    def map_exception(self, exc: Exception) -> AppError:
        if isinstance(exc, NoSuchTableError):
            return query_construction_failed(
                f"no such table: {self.table}",
                table=self.table,
                origin=self.origin,
                cause=exc,
            ).error
        if isinstance(exc, DBAPIError):
            return self._map_dbapi_error(exc)
        if isinstance(exc, SQLAlchemyError):
            return query_construction_failed(
                str(exc), table=self.table, origin=self.origin, cause=exc
            ).error
        return internal_error(
            f"Storage error: {exc}",
            origin=self.origin,
            cause=exc,
        ).error

    def _map_dbapi_error(self, exc: DBAPIError) -> AppError:
        message = str(exc.orig) if exc.orig else str(exc)
        if any(marker in message.lower() for marker in _UNAVAILABLE_MARKERS):
            return storage_unavailable(
                self.language, reason=message, origin=self.origin, cause=exc
            ).error
        return query_construction_failed(
            message,
            table=self.table,
            query=str(exc.statement) if exc.statement else None,
            origin=self.origin,
            cause=exc,
        ).error


class EngineErrorMapper(ErrorMapper[T]):
    """Stamps engine errors with the engine's origin."""

    def __init__(self, engine_name: str):
        self.engine_name = engine_name
        self.origin = f"engine.{engine_name}"

    def map_error(self, error: AppError) -> AppError:
        if error.context.origin:
            return error
        return error.with_context(origin=self.origin)

    def map_exception(self, exc: Exception) -> AppError:
        return AppError(
            code=ErrorCode.E9001_UNEXPECTED_ERROR,
            message=f"Engine error in {self.engine_name}: {exc}",
            context=ErrorContext(origin=self.origin),
            cause=exc,
        )


def map_errors(mapper: ErrorMapper[T]):
    """Decorator to map errors at async function boundaries.

    Usage:
        @map_errors(EngineErrorMapper("plurals"))
        async def resolve(...) -> Result[dict, AppError]:
            ...
    """
    def decorator(fn: Callable[..., Awaitable[Result[T, AppError]]]):
        @wraps(fn)
        async def wrapper(*args, **kwargs) -> Result[T, AppError]:
            try:
                result = await fn(*args, **kwargs)
            except AppErrorException as e:
                return Err(mapper.map_error(e.error))
            except Exception as e:
                return Err(mapper.map_exception(e))
            return mapper.map_result(result)
        return wrapper
    return decorator
