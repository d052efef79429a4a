from __future__ import annotations
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from app import config

logger = logging.getLogger(__name__)


def make_engine(url: str):
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live on one connection; share it across sessions
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url)


engine = make_engine(config.DATABASE_URL)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def init_db() -> None:
    # Table models register themselves on SQLModel.metadata when imported
    from app.accounts.models import UserAccount
    from app.catalog.models import Software  # noqa: F401
    from app.access.models import AccessRequest  # noqa: F401
    from app.auth import hash_password

    SQLModel.metadata.create_all(engine)
    if not config.SEED_DEMO_USERS:
        return
    with Session(engine) as s:
        if s.exec(select(UserAccount).limit(1)).first() is None:
            s.add(UserAccount(username="employee", password_hash=hash_password("employee123"), role="Employee"))
            s.add(UserAccount(username="manager", password_hash=hash_password("manager123"), role="Manager"))
            s.add(UserAccount(username="admin", password_hash=hash_password("admin123"), role="Admin"))
            s.commit()
            logger.info("Seeded demo accounts: employee, manager, admin")


@contextmanager
def get_session() -> Iterator[Session]:
    with Session(engine) as s:
        yield s
