"""Lookup Context Middleware

Binds a correlation ID, plus the language and lookup kind parsed from
`/api/plurals/{language}/{lookup}/...`, into the structlog context. Resolver
diagnostics emitted while serving the request (missing columns, empty
results) then carry the request they belong to.
"""
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from core.logging import (
    generate_correlation_id,
    bind_context,
    clear_context,
    api_logger,
)

log = api_logger()

LOOKUP_PATH = re.compile(r"^/api/plurals/(?P<language>[^/]+)/(?P<lookup>contract|values|nouns|check)(?:/|$)")


def lookup_context(request: Request) -> dict[str, str]:
    """Logging context for one request."""
    context = {
        "correlation_id": request.headers.get("X-Correlation-ID") or generate_correlation_id(),
        "path": request.url.path,
    }
    match = LOOKUP_PATH.match(request.url.path)
    if match:
        context["language"] = match["language"]
        context["lookup"] = match["lookup"]
    return context


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LookupContextMiddleware(BaseHTTPMiddleware):
    """Scopes logging context to a request and logs how the lookup went."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        context = lookup_context(request)
        clear_context()
        bind_context(**context)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "lookup_failed",
                error_type=type(exc).__name__,
                duration_ms=_elapsed_ms(start),
            )
            clear_context()
            raise

        response.headers["X-Correlation-ID"] = context["correlation_id"]
        status = response.status_code
        log_method = log.info if status < 400 else (log.warning if status < 500 else log.error)
        log_method("lookup_completed", status=status, duration_ms=_elapsed_ms(start))
        clear_context()
        return response
