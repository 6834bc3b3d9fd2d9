from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from moodlift.db import dispose_engine, get_engine

logger = logging.getLogger(__name__)

GAME_SESSIONS_TABLE = "game_sessions"
ASSESSMENT_RESULTS_TABLE = "assessment_results"
USER_STREAKS_TABLE = "user_streaks"
REWARD_ACTIVITIES_TABLE = "reward_activities"
CONSULTANTS_TABLE = "consultants"
SEO_METADATA_TABLE = "seo_metadata"
GAMES_TABLE = "games"
AUTH_SESSIONS_TABLE = "auth_sessions"

# (table, column, ddl) pairs added after the first release.
LATE_COLUMNS = [
    (SEO_METADATA_TABLE, "game_id", "TEXT REFERENCES games(id) ON DELETE CASCADE"),
    (GAMES_TABLE, "is_popular", "INTEGER DEFAULT 0"),
]

LATE_INDEXES = {
    (SEO_METADATA_TABLE, "game_id"): [
        f"CREATE INDEX IF NOT EXISTS idx_{SEO_METADATA_TABLE}_game_id ON {SEO_METADATA_TABLE} (game_id)",
        f"CREATE UNIQUE INDEX IF NOT EXISTS unique_{SEO_METADATA_TABLE}_game_id ON {SEO_METADATA_TABLE} (game_id)",
    ],
    (GAMES_TABLE, "is_popular"): [
        f"CREATE INDEX IF NOT EXISTS idx_{GAMES_TABLE}_is_popular ON {GAMES_TABLE} (is_popular)",
    ],
}

TABLE_DDL = [
    f"""
    CREATE TABLE IF NOT EXISTS {GAME_SESSIONS_TABLE} (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        game_title TEXT NOT NULL,
        score INTEGER DEFAULT 0,
        duration INTEGER DEFAULT 0,
        mood_before INTEGER,
        mood_after INTEGER,
        completed_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {ASSESSMENT_RESULTS_TABLE} (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        score INTEGER DEFAULT 0,
        insights TEXT,
        completed_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {USER_STREAKS_TABLE} (
        user_id TEXT PRIMARY KEY,
        current_streak INTEGER NOT NULL DEFAULT 0,
        longest_streak INTEGER NOT NULL DEFAULT 0,
        last_login_date TEXT,
        updated_at TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {REWARD_ACTIVITIES_TABLE} (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        activity_type TEXT NOT NULL,
        description TEXT,
        activity_date TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {CONSULTANTS_TABLE} (
        id TEXT PRIMARY KEY,
        full_name TEXT,
        title TEXT,
        picture_url TEXT,
        booking_url TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {GAMES_TABLE} (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        slug TEXT,
        description TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {SEO_METADATA_TABLE} (
        id TEXT PRIMARY KEY,
        page_url TEXT NOT NULL,
        title TEXT,
        description TEXT,
        keywords TEXT,
        structured_data TEXT,
        priority REAL,
        change_frequency TEXT,
        updated_at TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {AUTH_SESSIONS_TABLE} (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        email TEXT,
        refresh_token_enc TEXT,
        expires_at TEXT,
        created_at TEXT NOT NULL
    )
    """,
]

INDEX_DDL = [
    f"CREATE INDEX IF NOT EXISTS idx_{GAME_SESSIONS_TABLE}_user_completed "
    f"ON {GAME_SESSIONS_TABLE} (user_id, completed_at)",
    f"CREATE INDEX IF NOT EXISTS idx_{ASSESSMENT_RESULTS_TABLE}_user_completed "
    f"ON {ASSESSMENT_RESULTS_TABLE} (user_id, completed_at)",
    f"CREATE INDEX IF NOT EXISTS idx_{REWARD_ACTIVITIES_TABLE}_user_type_date "
    f"ON {REWARD_ACTIVITIES_TABLE} (user_id, activity_type, activity_date)",
    f"CREATE INDEX IF NOT EXISTS idx_{CONSULTANTS_TABLE}_created "
    f"ON {CONSULTANTS_TABLE} (created_at)",
]


async def init_db(engine: AsyncEngine | None = None) -> None:
    engine = engine or get_engine()
    async with engine.begin() as conn:
        for ddl in TABLE_DDL:
            await conn.execute(sql_text(ddl))

    async def ensure_column(table_name: str, column_name: str, column_ddl: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(
                    sql_text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_ddl}")
                )
        except SQLAlchemyError:
            return

    async def ensure_index(index_sql: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(sql_text(index_sql))
        except SQLAlchemyError:
            logger.warning("Could not create index: %s", index_sql)

    for table_name, column_name, column_ddl in LATE_COLUMNS:
        await ensure_column(table_name, column_name, column_ddl)
        for index_sql in LATE_INDEXES.get((table_name, column_name), []):
            await ensure_index(index_sql)

    for index_sql in INDEX_DDL:
        await ensure_index(index_sql)


def migration_sql(table_name: str, column_name: str) -> str:
    column_ddl = dict(((t, c), ddl) for t, c, ddl in LATE_COLUMNS)[(table_name, column_name)]
    statements = [f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_ddl};"]
    statements.extend(f"{sql};" for sql in LATE_INDEXES.get((table_name, column_name), []))
    return "\n".join(statements)


async def check_migrations(engine: AsyncEngine | None = None) -> dict[str, bool]:
    """Report which late columns exist without changing the schema.

    Keys are ``table.column``; a ``False`` value means the migration printed by
    ``migration_sql`` still has to be applied.
    """
    engine = engine or get_engine()
    report: dict[str, bool] = {}
    for table_name, column_name, _ in LATE_COLUMNS:
        key = f"{table_name}.{column_name}"
        try:
            async with engine.connect() as conn:
                await conn.execute(sql_text(f"SELECT {column_name} FROM {table_name} LIMIT 1"))
        except SQLAlchemyError as exc:
            if column_name not in str(exc) and table_name not in str(exc):
                raise
            report[key] = False
            continue
        report[key] = True
    return report


async def _run_check() -> int:
    missing = 0
    try:
        report = await check_migrations()
    finally:
        await dispose_engine()
    for key, present in report.items():
        table_name, column_name = key.split(".", 1)
        logger.info("Checking if %s column exists...", key)
        if present:
            logger.info("%s column exists - migration already applied", key)
            continue
        missing += 1
        logger.warning(
            "%s column does not exist! Apply this migration manually:\n%s",
            key,
            migration_sql(table_name, column_name),
        )
    return missing


async def _run_init() -> None:
    try:
        await init_db()
    finally:
        await dispose_engine()
    logger.info("Database schema is up to date.")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create or check the MoodLift schema.")
    parser.add_argument("--check", action="store_true", help="only report missing migrations")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    if args.check:
        return 1 if asyncio.run(_run_check()) else 0
    asyncio.run(_run_init())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
