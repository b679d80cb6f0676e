"""In-memory site directory for tests and single-process setups."""

from __future__ import annotations

from collections.abc import Iterable

from site_commands.descriptor import SiteQuery
from site_commands.sites.base import Site, SiteDirectory


class InMemorySiteDirectory(SiteDirectory):
    """Site directory over a fixed list, kept in insertion order."""

    def __init__(self, sites: Iterable[Site] = ()) -> None:
        super().__init__()
        self._sites = list(sites)

    def query(self, site_query: SiteQuery) -> list[Site] | int:
        matched = [
            site
            for site in self._sites
            if not (site_query.exclude_deleted and site.is_deleted)
        ]
        if site_query.limit is not None:
            matched = matched[: site_query.limit]
        if site_query.count:
            return len(matched)
        return matched
