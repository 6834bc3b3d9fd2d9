"""Row-level access to the MoodLift tables.

Every service talks to the database through :class:`RowStore`, a small query
builder over raw SQL in the style of hosted row stores::

    rows = await store.table("game_sessions").select("*").eq("user_id", uid).order(
        "completed_at", ascending=False
    ).execute()

Table and column names are validated identifiers; values are always bound
parameters. Failures surface as :class:`StoreError`.
"""
from __future__ import annotations

import re
from typing import Any, Iterable
from uuid import uuid4

from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from moodlift.db import get_sessionmaker

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class StoreError(Exception):
    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.message = message
        self.table = table


def new_id() -> str:
    return uuid4().hex


def _identifier(name: str) -> str:
    value = str(name or "").strip()
    if not _IDENTIFIER_RE.match(value):
        raise StoreError(f"Invalid identifier: {name!r}")
    return value


def _parse_columns(columns: str | Iterable[str]) -> list[str]:
    if isinstance(columns, str):
        raw = [item.strip() for item in columns.split(",") if item.strip()]
    else:
        raw = [str(item).strip() for item in columns if str(item).strip()]
    if not raw or raw == ["*"]:
        return ["*"]
    return [_identifier(col) for col in raw]


class TableQuery:
    def __init__(self, session_factory: async_sessionmaker, table: str):
        self._session_factory = session_factory
        self._table = _identifier(table)
        self._mode = "select"
        self._columns: list[str] = ["*"]
        self._filters: list[tuple[str, str, Any]] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._rows: list[dict] = []
        self._patch: dict = {}

    def select(self, columns: str | Iterable[str] = "*") -> "TableQuery":
        self._mode = "select"
        self._columns = _parse_columns(columns)
        return self

    def insert(self, rows: dict | list[dict]) -> "TableQuery":
        self._mode = "insert"
        self._rows = [dict(rows)] if isinstance(rows, dict) else [dict(row) for row in rows]
        return self

    def update(self, patch: dict) -> "TableQuery":
        self._mode = "update"
        self._patch = dict(patch or {})
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        self._filters.append((_identifier(column), "=", value))
        return self

    def gte(self, column: str, value: Any) -> "TableQuery":
        self._filters.append((_identifier(column), ">=", value))
        return self

    def order(self, column: str, ascending: bool = True) -> "TableQuery":
        self._order.append((_identifier(column), bool(ascending)))
        return self

    def limit(self, count: int) -> "TableQuery":
        if int(count) < 0:
            raise StoreError("Limit must be non-negative", self._table)
        self._limit = int(count)
        return self

    def _where(self, params: dict) -> str:
        if not self._filters:
            return ""
        clauses = []
        for idx, (column, op, value) in enumerate(self._filters):
            key = f"f{idx}"
            params[key] = value
            clauses.append(f"{column} {op} :{key}")
        return " WHERE " + " AND ".join(clauses)

    def _select_sql(self, params: dict) -> str:
        sql = f"SELECT {', '.join(self._columns)} FROM {self._table}{self._where(params)}"
        if self._order:
            sql += " ORDER BY " + ", ".join(
                f"{column} {'ASC' if ascending else 'DESC'}" for column, ascending in self._order
            )
        if self._limit is not None:
            params["row_limit"] = self._limit
            sql += " LIMIT :row_limit"
        return sql

    async def _run_select(self) -> list[dict]:
        params: dict = {}
        sql = self._select_sql(params)
        async with self._session_factory() as session:
            rows = (await session.execute(sql_text(sql), params)).mappings().all()
        return [dict(row) for row in rows]

    async def _run_insert(self) -> list[dict]:
        if not self._rows:
            return []
        async with self._session_factory() as session:
            for row in self._rows:
                columns = [_identifier(col) for col in row.keys()]
                placeholders = ", ".join(f":{col}" for col in columns)
                await session.execute(
                    sql_text(f"INSERT INTO {self._table} ({', '.join(columns)}) VALUES ({placeholders})"),
                    row,
                )
            await session.commit()
        return [dict(row) for row in self._rows]

    async def _run_update(self) -> list[dict]:
        if not self._patch:
            raise StoreError("No changes provided", self._table)
        if not self._filters:
            raise StoreError("Refusing to update without a filter", self._table)
        where_params: dict = {}
        where = self._where(where_params)
        set_params: dict = {}
        assignments = []
        for column, value in self._patch.items():
            key = f"set_{_identifier(column)}"
            set_params[key] = value
            assignments.append(f"{column} = :{key}")
        async with self._session_factory() as session:
            matched = (await session.execute(
                sql_text(f"SELECT * FROM {self._table}{where}"), where_params
            )).mappings().all()
            await session.execute(
                sql_text(f"UPDATE {self._table} SET {', '.join(assignments)}{where}"),
                {**where_params, **set_params},
            )
            await session.commit()
        return [{**dict(row), **self._patch} for row in matched]

    async def execute(self) -> list[dict]:
        try:
            if self._mode == "insert":
                return await self._run_insert()
            if self._mode == "update":
                return await self._run_update()
            return await self._run_select()
        except SQLAlchemyError as exc:
            message = str(getattr(exc, "orig", None) or exc)
            raise StoreError(message, self._table) from exc

    async def maybe_single(self) -> dict | None:
        if self._mode != "select":
            raise StoreError("maybe_single() only applies to select queries", self._table)
        self._limit = 2
        rows = await self.execute()
        if len(rows) > 1:
            raise StoreError("Multiple rows returned for a single-row query", self._table)
        return rows[0] if rows else None


class RowStore:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    def table(self, name: str) -> TableQuery:
        return TableQuery(self._session_factory, name)


def get_store() -> RowStore:
    return RowStore(get_sessionmaker())
