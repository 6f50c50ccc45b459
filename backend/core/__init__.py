# Core module exports
from core.config import settings, get_settings
from core.database import (
    StorageOpener,
    open_language_db,
    language_db_path,
    fetch_column_names,
    validate_language,
)
from core.logging import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
    generate_correlation_id,
    api_logger,
    engine_logger,
    db_logger,
    contract_logger,
)
