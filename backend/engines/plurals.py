"""Plural Form Resolution Engine

Resolves the grammatical-number forms of nouns from a language's noun
table, driven by the language's numeric-category contract (singular-form
column -> category column).

Two lookups are offered:
- enumerate every category value stored for every noun, flattened in row
  order then contract order
- resolve one noun's forms as a category column -> form mapping

The contract's category-column order is the single ordering used to select,
extract and assemble values. Columns the contract names but the table lacks
are reported as diagnostics and left out of results; they never fail a call.
"""
from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field

from sqlalchemy import Select, column, or_, select, table
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from core.config import settings
from core.database import StorageOpener, fetch_column_names, open_language_db, validate_language
from core.errors import (
    AppError,
    EngineErrorMapper,
    ErrorCode,
    Ok,
    Err,
    Result,
    StorageErrorMapper,
    contract_missing_or_empty,
    map_errors,
    query_construction_failed,
)
from core.logging import engine_logger
from languages.contracts import DataContract
from languages.types import NumericCategoryContract, ResolvedForms

log = engine_logger()

ORIGIN = "engine.plurals"

ContractInput = NumericCategoryContract | DataContract | None

def _read_text(row: RowMapping, name: str) -> str | None:
    """Read one cell as text; BLOB cells are decoded as UTF-8."""
    value = row[name]
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def schema_index(schema: Iterable[str]) -> dict[str, str]:
    """Map casefolded column names to the table's spelling of them.

    SQLite identifiers are case-insensitive, so contract names are resolved
    against the schema the same way. The first spelling wins.
    """
    index: dict[str, str] = {}
    for name in schema:
        index.setdefault(name.casefold(), name)
    return index


def numeric_categories(contract: ContractInput) -> NumericCategoryContract:
    """Normalize the accepted contract shapes to an ordered mapping."""
    if contract is None:
        return {}
    if isinstance(contract, DataContract):
        return contract.numbers
    return contract


@dataclass(frozen=True, slots=True)
class CategoryBinding:
    """Contract category columns bound once to the noun table's schema.

    `order` keeps the contract's category columns exactly as declared
    (duplicates included). `columns` maps each one the table has to the
    table's own spelling; results stay keyed by the contract's name.
    """
    order: tuple[str, ...]
    columns: dict[str, str] = field(default_factory=dict)
    missing: tuple[str, ...] = ()

    @classmethod
    def bind(cls, categories: Iterable[str], schema: Iterable[str]) -> "CategoryBinding":
        order = tuple(categories)
        index = schema_index(schema)
        columns: dict[str, str] = {}
        missing: list[str] = []
        for name in order:
            actual = index.get(name.casefold())
            if actual is not None:
                columns.setdefault(name, actual)
            elif name not in missing:
                missing.append(name)
        return cls(order=order, columns=columns, missing=tuple(missing))

    @property
    def selected(self) -> list[str]:
        """Distinct table columns to select, in contract order."""
        return list(dict.fromkeys(self.columns.values()))

    def extract(self, row: RowMapping) -> list[tuple[str, str | None]]:
        """Pair each present category column with the row's value, in contract order."""
        return [
            (name, _read_text(row, self.columns[name]))
            for name in self.order
            if name in self.columns
        ]


def _noun_table(columns: Iterable[str]):
    return table(settings.NOUN_TABLE, *(column(name) for name in dict.fromkeys(columns)))


def build_enumerate_query(binding: CategoryBinding) -> Select:
    """SELECT <present category columns> FROM nouns"""
    nouns = _noun_table(binding.selected)
    return select(*(nouns.c[name] for name in binding.selected))


def build_lookup_query(
    binding: CategoryBinding,
    singular_columns: Sequence[str],
    noun: str,
) -> Select:
    """SELECT <present category columns> FROM nouns WHERE s1 = :noun OR s2 = :noun ...

    Column names go through SQLAlchemy's identifier quoting and the noun is
    always a bound parameter.
    """
    nouns = _noun_table([*binding.selected, *singular_columns])
    return (
        select(*(nouns.c[name] for name in binding.selected))
        .where(or_(*(nouns.c[name] == noun for name in singular_columns)))
    )


class PluralFormResolver:
    """Resolves plural forms against per-language noun tables.

    Stateless: every call opens its own read-only connection through
    `open_storage` and releases it before returning.
    """

    __slots__ = ("_open_storage",)

    def __init__(self, open_storage: StorageOpener = open_language_db):
        self._open_storage = open_storage

    @map_errors(EngineErrorMapper("plurals"))
    async def enumerate_category_values(
        self,
        language: str,
        contract: ContractInput,
    ) -> Result[list[str], AppError]:
        """List every non-NULL category value of every noun.

        Values are flattened across nouns: row order first, then contract
        category order within a row.

        Returns:
            Ok(values), possibly empty
            Err(ContractMissingOrEmpty) without touching storage
            Err(StorageUnavailable | QueryConstructionFailed)
        """
        checked = validate_language(language, origin=ORIGIN)
        if checked.is_err():
            return checked

        categories = numeric_categories(contract)
        if not categories:
            log.warning(
                "plural_contract_empty",
                language=language,
                operation="enumerate",
                code=ErrorCode.E2030_CONTRACT_MISSING_OR_EMPTY,
            )
            return contract_missing_or_empty(language, origin=ORIGIN)

        async with self._open_storage(language) as conn:
            schema = await fetch_column_names(conn, language, settings.NOUN_TABLE)
            if schema.is_err():
                return schema

            binding = self._bind(language, categories.values(), schema.unwrap())
            if not binding.selected:
                self._log_empty(language, "enumerate")
                return Ok([])

            fetched = await self._fetch(conn, language, build_enumerate_query(binding))
            if fetched.is_err():
                return fetched

        rows = fetched.unwrap()
        if not rows:
            self._log_empty(language, "enumerate")
            return Ok([])

        values: list[str] = []
        for row in rows:
            values.extend(value for _, value in binding.extract(row) if value is not None)
        return Ok(values)

    @map_errors(EngineErrorMapper("plurals"))
    async def resolve_noun_forms(
        self,
        language: str,
        contract: ContractInput,
        noun: str,
    ) -> Result[ResolvedForms, AppError]:
        """Map each category column to `noun`'s form in that column.

        A row matches when any singular-form column equals `noun`. Only the
        first matching row is used. Category columns missing from the table
        are omitted; present columns holding NULL map to None.

        Returns:
            Ok(forms), empty when the contract is empty or nothing matched
            Err(StorageUnavailable | QueryConstructionFailed)
        """
        checked = validate_language(language, origin=ORIGIN)
        if checked.is_err():
            return checked

        categories = numeric_categories(contract)
        if not categories:
            log.warning(
                "plural_contract_empty",
                language=language,
                operation="resolve",
                noun=noun,
                code=ErrorCode.E2030_CONTRACT_MISSING_OR_EMPTY,
            )
            return Ok({})

        async with self._open_storage(language) as conn:
            schema = await fetch_column_names(conn, language, settings.NOUN_TABLE)
            if schema.is_err():
                return schema
            columns = schema.unwrap()

            singular = self._singular_candidates(language, categories.keys(), columns)
            if not singular:
                return query_construction_failed(
                    "no singular-form column to match against",
                    table=settings.NOUN_TABLE,
                    origin=ORIGIN,
                )

            binding = self._bind(language, categories.values(), columns)
            if not binding.selected:
                self._log_empty(language, "resolve", noun=noun)
                return Ok({})

            fetched = await self._fetch(conn, language, build_lookup_query(binding, singular, noun))
            if fetched.is_err():
                return fetched

        rows = fetched.unwrap()
        if not rows:
            self._log_empty(language, "resolve", noun=noun)
            return Ok({})
        if len(rows) > 1:
            log.info("plural_lookup_multiple_rows", language=language, noun=noun, rows=len(rows))

        forms = dict(binding.extract(rows[0]))
        if all(value is None for value in forms.values()):
            self._log_empty(language, "resolve", noun=noun)
            return Ok({})
        return Ok(forms)

    async def is_plural(
        self,
        language: str,
        contract: ContractInput,
        word: str,
    ) -> Result[bool, AppError]:
        """True when `word` is stored as some noun's category form."""
        values = await self.enumerate_category_values(language, contract)
        return values.map(lambda found: word in found)

    def _bind(self, language: str, categories: Iterable[str], schema: Collection[str]) -> CategoryBinding:
        binding = CategoryBinding.bind(categories, schema)
        for name in binding.missing:
            log.warning(
                "plural_column_not_found",
                language=language,
                column=name,
                table=settings.NOUN_TABLE,
                code=ErrorCode.E4022_COLUMN_NOT_FOUND,
            )
        return binding

    def _singular_candidates(
        self,
        language: str,
        keys: Iterable[str],
        schema: Collection[str],
    ) -> list[str]:
        """Table columns named by the contract keys, else the conventional singular column.

        Names are returned as the table spells them.
        """
        keys = list(dict.fromkeys(keys))
        index = schema_index(schema)
        candidates = list(dict.fromkeys(
            index[key.casefold()] for key in keys if key.casefold() in index
        ))
        if candidates:
            return candidates

        log.warning(
            "plural_singular_columns_missing",
            language=language,
            columns=keys,
            fallback=settings.SINGULAR_COLUMN,
        )
        fallback = index.get(settings.SINGULAR_COLUMN.casefold())
        if fallback is not None:
            return [fallback]
        return []

    async def _fetch(
        self,
        conn: AsyncConnection,
        language: str,
        query: Select,
    ) -> Result[Sequence[RowMapping], AppError]:
        mapper = StorageErrorMapper(language, settings.NOUN_TABLE, origin=ORIGIN)
        try:
            result = await conn.execute(query)
            return Ok(result.mappings().all())
        except SQLAlchemyError as e:
            return Err(mapper.map_exception(e))

    def _log_empty(self, language: str, operation: str, **fields) -> None:
        log.info(
            "plural_result_empty",
            language=language,
            operation=operation,
            table=settings.NOUN_TABLE,
            code=ErrorCode.E4023_EMPTY_RESULT,
            **fields,
        )
