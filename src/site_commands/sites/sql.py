"""Site directory backed by the ``sites`` table."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker

from site_commands.descriptor import SiteQuery
from site_commands.sites.base import Site, SiteDirectory
from site_commands.storage.orm import SiteRecord


def make_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a sync session factory for CLI operations.

    psycopg v3 handles the PostgreSQL URL; SQLite URLs work unchanged.
    """
    engine = create_engine(database_url)
    return sessionmaker(engine, expire_on_commit=False)


class SqlSiteDirectory(SiteDirectory):
    """Reads sites from the database; switching is tracked in-process.

    Sites are returned oldest first (``created_at``, then ``name``),
    so a fan-out visits them in a stable order between runs.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        super().__init__()
        self._session_factory = session_factory

    def query(self, site_query: SiteQuery) -> list[Site] | int:
        stmt = select(SiteRecord).order_by(SiteRecord.created_at, SiteRecord.name)
        if site_query.exclude_deleted:
            stmt = stmt.where(SiteRecord.is_deleted.is_(False))
        if site_query.limit is not None:
            stmt = stmt.limit(site_query.limit)

        with self._session_factory() as session:
            if site_query.count:
                subquery = stmt.order_by(None).subquery()
                return session.execute(
                    select(func.count()).select_from(subquery)
                ).scalar_one()

            records = session.execute(stmt).scalars().all()
            return [
                Site(id=record.id, name=record.name, is_deleted=record.is_deleted)
                for record in records
            ]
