"""Shared fixtures for integration tests requiring live PostgreSQL."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import Connection, Engine, create_engine, delete
from sqlalchemy.orm import Session, sessionmaker

from site_commands.config import get_settings
from site_commands.storage.orm import Base, SiteRecord


@pytest.fixture(scope="module")
def engine() -> Iterator[Engine]:
    """Sync engine from settings (module-scoped)."""
    engine = create_engine(get_settings().database_url)
    yield engine
    engine.dispose()


@pytest.fixture()
def connection(engine: Engine) -> Iterator[Connection]:
    """Connection inside a transaction that is rolled back after the test.

    The ``sites`` table is created (if missing) and emptied inside the
    same transaction, so existing rows are untouched.
    """
    with engine.connect() as conn:
        trans = conn.begin()
        Base.metadata.create_all(conn)
        conn.execute(delete(SiteRecord))
        yield conn
        trans.rollback()


@pytest.fixture()
def session_factory(connection: Connection) -> sessionmaker[Session]:
    """Sessions joined to the test transaction; their commits become savepoints."""
    return sessionmaker(
        bind=connection,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
