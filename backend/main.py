from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import plurals
from core.config import settings
from core.logging import configure_logging, get_logger
from core.middleware import LookupContextMiddleware
from core.errors import register_error_handlers

# Initialize logging before anything else
configure_logging(
    level=settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
    log_sql=settings.LOG_SQL,
    cache_loggers=settings.is_production,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(
        "startup",
        message="Plurals API starting up",
        data_dir=str(settings.LANGUAGE_DATA_DIR),
        contracts_dir=str(settings.CONTRACTS_DIR),
    )
    if not settings.LANGUAGE_DATA_DIR.is_dir():
        log.warning("language_data_dir_missing", path=str(settings.LANGUAGE_DATA_DIR))
    yield
    log.info("shutdown", message="Plurals API shutting down")


app = FastAPI(
    title="Plurals API",
    description="Grammatical-number form lookup over per-language noun databases",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(LookupContextMiddleware)

app.include_router(plurals.router, prefix="/api/plurals", tags=["plurals"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )
