"""
Shared fixtures for the API test suite.

``InMemoryDatabase`` stands in for the PostgreSQL gateway. It understands the
handful of statements the repositories issue and records every call, so tests
can assert both on HTTP behaviour and on how many store round-trips a request
made.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from api.src.config import Settings
from api.src.main import create_app
from shared.metrics import HTTPMetrics


_TABLE_PATTERN = re.compile(r"\b(?:FROM|INTO|UPDATE)\s+(\w+)", re.IGNORECASE)
_INSERT_COLUMNS_PATTERN = re.compile(r"\(([^)]*)\)\s*VALUES", re.IGNORECASE)
_ASSIGNMENT_PATTERN = re.compile(r"(\w+)\s*=\s*\$(\d+)")


class InMemoryDatabase:
    """Dict-backed implementation of the persistence gateway."""

    def __init__(self):
        self.tables: Dict[str, Dict[int, Dict[str, Any]]] = {"students": {}, "users": {}}
        self.next_ids: Dict[str, int] = {"students": 1, "users": 1}
        self.calls: List[Tuple[str, str, Tuple[Any, ...]]] = []
        self.fail_with: Optional[BaseException] = None

    def _record(self, method: str, sql: str, args: Tuple[Any, ...]) -> None:
        self.calls.append((method, " ".join(sql.split()), args))
        if self.fail_with is not None:
            raise self.fail_with

    def _table(self, sql: str) -> Dict[int, Dict[str, Any]]:
        return self.tables[_TABLE_PATTERN.search(sql).group(1)]

    def insert(self, table: str, **row: Any) -> int:
        """Seed a row directly, bypassing the recorded call log."""
        row_id = row.pop("id", None) or self.next_ids[table]
        self.next_ids[table] = max(self.next_ids[table], row_id + 1)
        self.tables[table][row_id] = {"id": row_id, **row}
        return row_id

    async def fetch_all(self, sql: str, *args: Any) -> List[Dict[str, Any]]:
        self._record("fetch_all", sql, args)
        table = self._table(sql)
        return [dict(table[key]) for key in sorted(table)]

    async def fetch_one(self, sql: str, *args: Any) -> Optional[Dict[str, Any]]:
        self._record("fetch_one", sql, args)
        statement = sql.strip().upper()
        table_name = _TABLE_PATTERN.search(sql).group(1)
        table = self.tables[table_name]

        if statement.startswith("INSERT"):
            columns = [c.strip() for c in _INSERT_COLUMNS_PATTERN.search(sql).group(1).split(",")]
            row_id = self.insert(table_name, **dict(zip(columns, args)))
            return {"id": row_id}

        if statement.startswith("UPDATE"):
            row_id = args[-1]
            if row_id not in table:
                return None
            set_clause = re.split(r"\bWHERE\b", sql, flags=re.IGNORECASE)[0]
            for column, position in _ASSIGNMENT_PATTERN.findall(set_clause):
                table[row_id][column] = args[int(position) - 1]
            return dict(table[row_id])

        row = table.get(args[0])
        return dict(row) if row is not None else None

    async def execute(self, sql: str, *args: Any) -> int:
        self._record("execute", sql, args)
        table = self._table(sql)
        return 1 if table.pop(args[0], None) is not None else 0

    async def ping(self) -> None:
        self._record("ping", "SELECT 1", ())


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment files."""
    return Settings(
        _env_file=None,
        environment="development",
        log_format="console",
        log_level="WARNING",
    )


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def metrics() -> HTTPMetrics:
    """Metrics bound to a private registry."""
    return HTTPMetrics(CollectorRegistry())


@pytest.fixture
def app(settings, database, metrics):
    return create_app(settings=settings, database=database, metrics=metrics)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
