# backend/tests/test_database.py
import pytest
from sqlalchemy import text
from sqlalchemy.dialects import sqlite
from sqlalchemy.exc import OperationalError

from core.config import settings
from core.database import (
    fetch_column_names,
    language_db_path,
    open_language_db,
    readonly_url,
    validate_language,
)
from core.errors import AppErrorException, ErrorCode, Ok
from engines.plurals import CategoryBinding, build_enumerate_query, build_lookup_query, schema_index


def test_language_db_path_uses_template(data_dir, monkeypatch):
    assert language_db_path("English") == data_dir / "EnglishLanguageData.sqlite"

    monkeypatch.setattr(settings, "LANGUAGE_DB_TEMPLATE", "{language}.db")
    assert language_db_path("English") == data_dir / "English.db"


def test_readonly_url(tmp_path):
    url = readonly_url(tmp_path / "English LanguageData.sqlite")

    assert url.drivername == "sqlite+aiosqlite"
    assert url.database.startswith("file:")
    assert "%20" in url.database
    assert url.query == {"mode": "ro", "uri": "true"}


@pytest.mark.parametrize("language", ["English", "pt-BR", "zh_Hans", "EN2"])
def test_validate_language_accepts_plain_identifiers(language):
    assert validate_language(language) == Ok(language)


@pytest.mark.asyncio
async def test_open_missing_database_raises_storage_unavailable(data_dir):
    with pytest.raises(AppErrorException) as exc_info:
        async with open_language_db("English"):
            pass

    assert exc_info.value.error.code is ErrorCode.E4001_STORAGE_UNAVAILABLE
    assert exc_info.value.error.metadata["language"] == "English"


@pytest.mark.asyncio
async def test_connection_is_read_only(english_db):
    async with open_language_db("English") as conn:
        with pytest.raises(OperationalError, match="readonly"):
            await conn.execute(text("INSERT INTO nouns VALUES ('mouse', 'mouse', 'mice')"))


@pytest.mark.asyncio
async def test_fetch_column_names_in_schema_order(english_db):
    async with open_language_db("English") as conn:
        result = await fetch_column_names(conn, "English", "nouns")

    assert result == Ok(["singular", "form_one", "form_many"])


@pytest.mark.asyncio
async def test_fetch_column_names_missing_table(english_db):
    async with open_language_db("English") as conn:
        result = await fetch_column_names(conn, "English", "verbs")

    assert result.error.code is ErrorCode.E4002_QUERY_CONSTRUCTION_FAILED


def test_category_binding_keeps_contract_order():
    binding = CategoryBinding.bind(["b", "missing", "a", "b"], ["a", "b", "c"])

    assert binding.order == ("b", "missing", "a", "b")
    assert binding.selected == ["b", "a"]
    assert binding.missing == ("missing",)
    assert binding.extract({"a": "A", "b": None}) == [("b", None), ("a", "A"), ("b", None)]


def test_category_binding_matches_columns_ignoring_case():
    binding = CategoryBinding.bind(["N", "Plural", "n", "dual"], ["n", "PLURAL", "Singular"])

    assert binding.columns == {"N": "n", "Plural": "PLURAL", "n": "n"}
    assert binding.selected == ["n", "PLURAL"]
    assert binding.missing == ("dual",)
    assert binding.extract({"n": "cats", "PLURAL": b"H\xc3\xa4user"}) == [
        ("N", "cats"),
        ("Plural", "H\u00e4user"),
        ("n", "cats"),
    ]


def test_schema_index_keeps_first_spelling():
    assert schema_index(["Singular", "SINGULAR", "n"]) == {"singular": "Singular", "n": "n"}


def test_enumerate_query_selects_present_columns_only():
    binding = CategoryBinding.bind(["form_many", "dual", "form_one"], ["singular", "form_one", "form_many"])

    sql = str(build_enumerate_query(binding).compile(dialect=sqlite.dialect()))

    assert sql.split() == ["SELECT", "nouns.form_many,", "nouns.form_one", "FROM", "nouns"]


def test_lookup_query_binds_noun_and_quotes_columns():
    binding = CategoryBinding.bind(["plural form"], ["singular form", "plural form"])
    noun = "x' OR 1=1 --"

    compiled = build_lookup_query(binding, ["singular form", "singular"], noun).compile(dialect=sqlite.dialect())
    sql = str(compiled)

    assert noun not in sql
    assert '"plural form"' in sql and '"singular form"' in sql
    assert " OR " in sql
    assert list(compiled.params.values()) == [noun, noun]
