import asyncio

from sqlalchemy import text as sql_text

from moodlift import db
from moodlift.db_init import check_migrations, init_db, main, migration_sql


def test_init_db_is_idempotent_and_applies_late_columns(engine):
    asyncio.run(init_db(engine))
    asyncio.run(init_db(engine))
    assert asyncio.run(check_migrations(engine)) == {"seo_metadata.game_id": True, "games.is_popular": True}


def test_check_reports_missing_columns(engine):
    async def create_legacy_tables():
        async with engine.begin() as conn:
            await conn.execute(sql_text("CREATE TABLE games (id TEXT PRIMARY KEY, title TEXT NOT NULL)"))
            await conn.execute(sql_text("CREATE TABLE seo_metadata (id TEXT PRIMARY KEY, page_url TEXT NOT NULL)"))

    asyncio.run(create_legacy_tables())
    assert asyncio.run(check_migrations(engine)) == {"seo_metadata.game_id": False, "games.is_popular": False}


def test_migration_sql_includes_column_and_index():
    sql = migration_sql("games", "is_popular")
    assert sql.startswith("ALTER TABLE games ADD COLUMN is_popular INTEGER DEFAULT 0;")
    assert "CREATE INDEX" in sql


def test_normalize_database_url():
    assert db._normalize_database_url("sqlite:///local.db") == "sqlite+aiosqlite:///local.db"
    assert db._normalize_database_url("postgres://u:p@host/db") == "postgresql+asyncpg://u:p@host/db"
    assert (
        db._normalize_database_url("postgresql://u:p@host/db?sslmode=require&channel_binding=require")
        == "postgresql+asyncpg://u:p@host/db?ssl=true"
    )


def test_cli_check_against_fresh_database():
    assert main([]) == 0
    assert main(["--check"]) == 0
