"""Per-language data contracts.

A data contract is a JSON document describing how a language's data is
laid out. The `numbers` section is the numeric-category contract: each key
names a column holding a noun's singular form, each value the column holding
the matching grammatical-number form, e.g.

    {"numbers": {"nominativeSingular": "nominativePlural"}}
"""
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.config import settings
from core.database import validate_language
from core.errors import AppError, ErrorCode, Ok, Err, Result, invalid_json, not_found
from core.logging import contract_logger

log = contract_logger()


class DataContract(BaseModel):
    """Language data contract. Only the `numbers` section is read; other sections are ignored."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    numbers: dict[str, str] = Field(default_factory=dict)


def contract_path(language: str) -> Path:
    """Contracts are stored as `<contracts dir>/<language lowercased>.json`."""
    return Path(settings.CONTRACTS_DIR) / f"{language.lower()}.json"


def parse_contract(raw: str | bytes, path: Path | None = None) -> Result[DataContract, AppError]:
    """Parse a contract document, keeping the JSON key order of `numbers`."""
    try:
        return Ok(DataContract.model_validate_json(raw))
    except ValidationError as e:
        log.warning("contract_invalid", path=str(path) if path else None, errors=e.error_count())
        return invalid_json(str(e), path=path, origin="contracts.parse")


def load_contract(language: str) -> Result[DataContract, AppError]:
    """Load a language's data contract from disk.

    Returns:
        Ok(contract)
        Err(invalid_format) if the language identifier is not plain
        Err(not_found) if the language has no contract file
        Err(invalid_json) if the file is not a valid contract
    """
    checked = validate_language(language, origin="contracts.load")
    if checked.is_err():
        return checked

    path = contract_path(language)
    if not path.is_file():
        log.info("contract_missing", language=language, path=str(path))
        return not_found("DataContract", language, origin="contracts.load")

    try:
        raw = path.read_bytes()
    except OSError as e:
        return Err(AppError(
            code=ErrorCode.E6002_FILE_READ_ERROR,
            message=f"Cannot read contract {path}: {e}",
            metadata={"path": str(path)},
            cause=e,
        ))

    result = parse_contract(raw, path)
    if result.is_ok():
        log.debug("contract_loaded", language=language, categories=len(result.unwrap().numbers))
    return result
