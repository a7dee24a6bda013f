import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.linkman.core.config import settings
from app.linkman.db.seed import run_seed
from app.linkman.repos.registry import build_stores


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def test_migrations_apply(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'migrations.db'}"
    _run_migrations(database_url)

    inspector = inspect(create_engine(database_url, future=True))
    tables = set(inspector.get_table_names())

    assert {
        "categories",
        "category_principals",
        "links",
        "link_principals",
        "link_categories",
        "groups",
        "group_principals",
    } <= tables
    unique_columns = [constraint["column_names"] for constraint in inspector.get_unique_constraints("categories")]
    assert ["public_marker"] in unique_columns


@pytest.mark.asyncio
async def test_seed_is_idempotent(tmp_path: Path):
    db_path = tmp_path / "seed.db"
    _run_migrations(f"sqlite+pysqlite:///{db_path}")
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    stores = build_stores("sql", async_sessionmaker(bind=engine, expire_on_commit=False))

    await run_seed(stores, settings)
    await run_seed(stores, settings)

    categories = await stores.categories.find_all()
    assert [category.name for category in categories] == [settings.PUBLIC_CATEGORY_NAME]
    assert categories[0].is_public
