"""Test doubles shared across test modules."""

from __future__ import annotations

import uuid

from site_commands.descriptor import SiteQuery
from site_commands.sites.base import Site
from site_commands.sites.memory import InMemorySiteDirectory


class RecordingSiteDirectory(InMemorySiteDirectory):
    """In-memory directory that records every query, switch and restore."""

    def __init__(self, sites: list[Site], *, count_result: int | None = None) -> None:
        super().__init__(sites)
        self.events: list[tuple[str, str | None]] = []
        self.queries: list[SiteQuery] = []
        self._count_result = count_result

    def query(self, site_query: SiteQuery) -> list[Site] | int:
        self.queries.append(site_query)
        if self._count_result is not None:
            return self._count_result
        return super().query(site_query)

    def switch_to(self, site: Site) -> None:
        super().switch_to(site)
        self.events.append(("switch", site.name))

    def restore(self) -> None:
        super().restore()
        current = self.current_site()
        self.events.append(("restore", current.name if current else None))


def make_site(name: str, *, is_deleted: bool = False) -> Site:
    return Site(id=uuid.uuid4(), name=name, is_deleted=is_deleted)
