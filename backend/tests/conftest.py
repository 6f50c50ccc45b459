# backend/tests/conftest.py
import json
import sqlite3
from contextlib import asynccontextmanager

import pytest

from core.config import settings
from core.database import open_language_db


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point language storage at a throwaway directory."""
    databases = tmp_path / "databases"
    databases.mkdir()
    monkeypatch.setattr(settings, "LANGUAGE_DATA_DIR", databases)
    return databases


@pytest.fixture
def contracts_dir(tmp_path, monkeypatch):
    contracts = tmp_path / "contracts"
    contracts.mkdir()
    monkeypatch.setattr(settings, "CONTRACTS_DIR", contracts)
    return contracts


@pytest.fixture
def make_language_db(data_dir):
    """Create `<language>LanguageData.sqlite` with a single TEXT-column table.

    Rows are dicts; columns a row leaves out are stored as NULL.
    """
    def _make(language: str, columns: list[str], rows: list[dict], table: str = "nouns"):
        path = data_dir / f"{language}LanguageData.sqlite"
        conn = sqlite3.connect(path)
        try:
            column_defs = ", ".join(f'"{c}" TEXT' for c in columns)
            conn.execute(f'CREATE TABLE "{table}" ({column_defs})')
            placeholders = ", ".join("?" for _ in columns)
            conn.executemany(
                f'INSERT INTO "{table}" VALUES ({placeholders})',
                [tuple(row.get(c) for c in columns) for row in rows],
            )
            conn.commit()
        finally:
            conn.close()
        return path
    return _make


@pytest.fixture
def make_contract(contracts_dir):
    def _make(language: str, numbers: dict[str, str], **sections):
        path = contracts_dir / f"{language.lower()}.json"
        path.write_text(json.dumps({"numbers": numbers, **sections}), encoding="utf-8")
        return path
    return _make


@pytest.fixture
def english_db(make_language_db):
    """The cat/dog table used across resolver tests."""
    return make_language_db(
        "English",
        ["singular", "form_one", "form_many"],
        [
            {"singular": "cat", "form_one": "cat", "form_many": "cats"},
            {"singular": "dog", "form_one": "dog", "form_many": "dogs"},
        ],
    )


class StorageTracker:
    """Storage opener that records every open and close."""

    def __init__(self):
        self.events: list[tuple[str, str]] = []

    @property
    def opened(self) -> int:
        return sum(1 for event, _ in self.events if event == "open")

    @property
    def closed(self) -> int:
        return sum(1 for event, _ in self.events if event == "close")

    @asynccontextmanager
    async def __call__(self, language: str):
        self.events.append(("open", language))
        try:
            async with open_language_db(language) as conn:
                yield conn
        finally:
            self.events.append(("close", language))


@pytest.fixture
def storage_tracker():
    return StorageTracker()
