"""Integration tests for SqlSiteDirectory against real PostgreSQL.

Requires a reachable PostgreSQL configured through POSTGRES_* variables.
Run with: ``pytest tests/integration/test_sql_sites.py --run-db -v``
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from site_commands.descriptor import SiteQuery
from site_commands.errors import ConfigurationError
from site_commands.sites.sql import SqlSiteDirectory
from site_commands.storage.orm import SiteRecord
from site_commands.utils import run_on_all_sites

pytestmark = pytest.mark.requires_db


def _seed(factory: sessionmaker[Session], *names: str, deleted: bool = False) -> None:
    with factory() as session:
        session.add_all([SiteRecord(name=n, is_deleted=deleted) for n in names])
        session.commit()


class TestSqlSiteDirectory:
    def test_ids_are_uuidv7(self, session_factory: sessionmaker[Session]) -> None:
        _seed(session_factory, "alpha")
        result = SqlSiteDirectory(session_factory).query(SiteQuery())
        assert isinstance(result, list)
        assert result[0].id.version == 7

    def test_excludes_deleted_and_orders(
        self, session_factory: sessionmaker[Session]
    ) -> None:
        _seed(session_factory, "beta", "alpha")
        _seed(session_factory, "gone", deleted=True)

        result = SqlSiteDirectory(session_factory).query(SiteQuery())

        assert isinstance(result, list)
        # Same transaction, same now(): name breaks the tie.
        assert [s.name for s in result] == ["alpha", "beta"]

    def test_count_respects_limit(
        self, session_factory: sessionmaker[Session]
    ) -> None:
        _seed(session_factory, "a1", "a2", "a3")
        directory = SqlSiteDirectory(session_factory)

        assert directory.query(SiteQuery(count=True)) == 3
        assert directory.query(SiteQuery(count=True, limit=2)) == 2

    def test_duplicate_name_rejected(
        self, session_factory: sessionmaker[Session]
    ) -> None:
        _seed(session_factory, "alpha")
        with pytest.raises(IntegrityError):
            _seed(session_factory, "alpha")

    def test_fan_out_visits_database_sites(
        self, session_factory: sessionmaker[Session]
    ) -> None:
        _seed(session_factory, "alpha", "beta")
        directory = SqlSiteDirectory(session_factory)
        seen: list[str | None] = []

        def callback(args: list[str], assoc_args: dict[str, object]) -> None:
            site = directory.current_site()
            seen.append(site.name if site else None)

        visited = run_on_all_sites(callback, [], {}, SiteQuery(), directory)

        assert visited == 2
        assert seen == ["alpha", "beta"]
        assert directory.current_site() is None

    def test_count_query_cannot_fan_out(
        self, session_factory: sessionmaker[Session]
    ) -> None:
        callback = MagicMock()
        directory = SqlSiteDirectory(session_factory)
        with pytest.raises(ConfigurationError):
            run_on_all_sites(callback, [], {}, SiteQuery(count=True), directory)
        callback.assert_not_called()
