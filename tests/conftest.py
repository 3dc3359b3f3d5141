from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import pytest


class FakeQuery:
    """Minimal stand-in for the supabase-py query builder."""

    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.order_by: tuple[str, bool] | None = None
        self.limit_count: int | None = None

    def select(self, *columns, **kwargs):
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        if self.db.fail:
            raise RuntimeError("connection refused")
        rows = self.db.tables.setdefault(self.table, [])
        if self.operation == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in items:
                row = dict(item)
                row.setdefault("id", self.db.next_id(self.table))
                row.setdefault("created_at", self.db.next_timestamp())
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return SimpleNamespace(data=inserted)
        matched = [row for row in rows if self._matches(row)]
        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(matched))
        if self.operation == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(matched))
        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row.get(column) or 0, reverse=desc)
        if self.limit_count is not None:
            matched = matched[: self.limit_count]
        return SimpleNamespace(data=copy.deepcopy(matched))


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict) -> None:
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        if self.db.fail:
            raise RuntimeError("connection refused")
        self.db.rpc_calls.append((self.name, self.params))
        if self.name == "increment_address_usage":
            for row in self.db.tables.get("frequent_addresses", []):
                if row["id"] == self.params["address_id"]:
                    row["usage_count"] = (row.get("usage_count") or 0) + 1
        return SimpleNamespace(data=self.db.rpc_result)


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {}
        self.rpc_calls: list[tuple[str, dict]] = []
        self.rpc_result: Any = None
        self.fail = False
        self._counter = 0
        self._clock = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    def next_id(self, table: str) -> str:
        self._counter += 1
        return f"{table}-{self._counter}"

    def next_timestamp(self) -> str:
        self._clock += timedelta(minutes=1)
        return self._clock.isoformat()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def repository(fake_supabase):
    from routeplanner.persistence.database import RouteRepository

    return RouteRepository(fake_supabase)
