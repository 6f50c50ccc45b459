"""Monadic Error Handling

- Result[T, E]: Ok/Err container for success/failure
- AppError: error value with code, message, metadata and context
- ErrorCode: numeric error taxonomy
- Builders: constructors for the plural resolver's failure modes

Usage:
    from core.errors import Ok, Err

    match await resolver.resolve_noun_forms("English", contract, "cat"):
        case Ok(forms):
            print(forms)
        case Err(error):
            log.error(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    validation_error,
    invalid_format,
    invalid_json,
    contract_missing_or_empty,
    storage_unavailable,
    query_construction_failed,
    not_found,
    internal_error,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_error,
    raise_result,
)

from .boundaries import (
    ErrorMapper,
    StorageErrorMapper,
    EngineErrorMapper,
    map_errors,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "validation_error",
    "invalid_format",
    "invalid_json",
    "contract_missing_or_empty",
    "storage_unavailable",
    "query_construction_failed",
    "not_found",
    "internal_error",
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_error",
    "raise_result",
    "ErrorMapper",
    "StorageErrorMapper",
    "EngineErrorMapper",
    "map_errors",
]
