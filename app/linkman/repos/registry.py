from __future__ import annotations

from dataclasses import dataclass

from app.linkman.repos.base import CategoryStore, GroupStore, LinkStore
from app.linkman.repos.categories import SqlCategoryStore
from app.linkman.repos.groups import SqlGroupStore
from app.linkman.repos.links import SqlLinkStore
from app.linkman.repos.memory import MemoryCategoryStore, MemoryGroupStore, MemoryLinkStore

BACKEND_SQL = "sql"
BACKEND_MEMORY = "memory"


@dataclass
class Stores:
    categories: CategoryStore
    links: LinkStore
    groups: GroupStore


def build_stores(backend: str, session_factory=None) -> Stores:
    backend = (backend or BACKEND_SQL).strip().lower()
    if backend == BACKEND_MEMORY:
        return Stores(categories=MemoryCategoryStore(), links=MemoryLinkStore(), groups=MemoryGroupStore())
    if backend != BACKEND_SQL:
        raise ValueError(f"unsupported store backend: {backend}")
    if session_factory is None:
        from app.linkman.db.session import SessionLocal

        session_factory = SessionLocal
    return Stores(
        categories=SqlCategoryStore(session_factory),
        links=SqlLinkStore(session_factory),
        groups=SqlGroupStore(session_factory),
    )
