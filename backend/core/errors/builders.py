"""Domain-Specific Error Builders

Ergonomic constructors for the resolver's failure taxonomy. Each builder
returns an Err wrapping an AppError with the matching code.
"""
from pathlib import Path

from .types import AppError, ErrorCode, ErrorContext, Err


def _err(
    code: ErrorCode,
    message: str,
    *,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
        cause=cause,
    ))


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    value: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    return _err(code, message, origin=origin, field=field, value=value, **metadata)


def invalid_format(
    field: str, expected: str, got: str | None = None, origin: str = ""
) -> Err[AppError]:
    msg = f"Invalid format for '{field}': expected {expected}"
    if got is not None:
        msg += f", got '{got}'"
    return validation_error(
        msg,
        code=ErrorCode.E2002_INVALID_FORMAT,
        field=field,
        value=got,
        expected=expected,
        origin=origin,
    )


def invalid_json(message: str, path: Path | None = None, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Invalid JSON: {message}",
        code=ErrorCode.E2021_INVALID_JSON,
        path=str(path) if path else None,
        origin=origin,
    )


def contract_missing_or_empty(language: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Numeric-category contract for '{language}' is missing or empty",
        code=ErrorCode.E2030_CONTRACT_MISSING_OR_EMPTY,
        language=language,
        origin=origin,
    )


# =============================================================================
# Storage Errors (E4xxx)
# =============================================================================

def storage_unavailable(
    language: str,
    path: Path | str | None = None,
    reason: str = "",
    origin: str = "",
    cause: Exception | None = None,
) -> Err[AppError]:
    msg = f"Language storage for '{language}' is unavailable"
    if reason:
        msg += f": {reason}"
    return _err(
        ErrorCode.E4001_STORAGE_UNAVAILABLE,
        msg,
        origin=origin,
        cause=cause,
        language=language,
        path=str(path) if path else None,
    )


def query_construction_failed(
    reason: str,
    *,
    table: str | None = None,
    query: str | None = None,
    origin: str = "",
    cause: Exception | None = None,
) -> Err[AppError]:
    return _err(
        ErrorCode.E4002_QUERY_CONSTRUCTION_FAILED,
        f"Query could not be built or executed: {reason}",
        origin=origin,
        cause=cause,
        table=table,
        query=query[:200] if query else None,  # Truncate for safety
    )


def not_found(entity: str, id: str | None = None, origin: str = "") -> Err[AppError]:
    msg = f"{entity} not found"
    if id:
        msg += f": {id}"
    return _err(
        ErrorCode.E4010_NOT_FOUND,
        msg,
        origin=origin,
        entity=entity,
        entity_id=id,
    )


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def internal_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create internal/unexpected error."""
    return _err(code, message, origin=origin, cause=cause, **metadata)
