import importlib
import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.linkman.core.metrics import metrics
from app.linkman.repos.registry import Stores
from app.linkman.repos.categories import SqlCategoryStore
from app.linkman.repos.groups import SqlGroupStore
from app.linkman.repos.links import SqlLinkStore
from app.linkman.repos.memory import MemoryCategoryStore, MemoryGroupStore, MemoryLinkStore



def _setup_app(database_url: str, store_backend: str = "sql"):
    os.environ["DATABASE_URL"] = database_url
    os.environ["SECRET_KEY"] = "test-secret"
    os.environ["STORE_BACKEND"] = store_backend

    import app.linkman.core.config as config
    import app.linkman.db.session as session
    import app.main as main

    importlib.reload(config)
    importlib.reload(session)
    importlib.reload(main)

    return main.create_app()


def _run_migrations(database_url: str):
    os.environ["DATABASE_URL"] = database_url
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def _sqlite_url(tmp_path: Path, name: str, driver: str = "aiosqlite") -> str:
    return f"sqlite+{driver}:///{tmp_path / name}"


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield


@pytest.fixture()
def client(tmp_path: Path):
    _run_migrations(_sqlite_url(tmp_path, "test.db", driver="pysqlite"))
    database_url = _sqlite_url(tmp_path, "test.db")
    app = _setup_app(database_url)

    with TestClient(app) as client:
        yield client


@pytest.fixture()
def memory_client(tmp_path: Path):
    app = _setup_app(_sqlite_url(tmp_path, "unused.db"), store_backend="memory")

    with TestClient(app) as client:
        yield client


@pytest.fixture()
def memory_stores() -> Stores:
    return Stores(categories=MemoryCategoryStore(), links=MemoryLinkStore(), groups=MemoryGroupStore())


@pytest.fixture()
def sql_stores(tmp_path: Path) -> Stores:
    _run_migrations(_sqlite_url(tmp_path, "stores.db", driver="pysqlite"))
    engine = create_async_engine(_sqlite_url(tmp_path, "stores.db"), poolclass=NullPool)
    session_factory = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return Stores(
        categories=SqlCategoryStore(session_factory),
        links=SqlLinkStore(session_factory),
        groups=SqlGroupStore(session_factory),
    )


@pytest.fixture(params=["memory", "sql"])
def stores(request):
    return request.getfixturevalue(f"{request.param}_stores")
