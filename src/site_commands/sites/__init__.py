"""Site (tenant) directories used by the multisite fan-out.

Note: ``SqlSiteDirectory`` lives in ``sites.sql`` and is NOT re-exported
here so that importing the in-memory directory does not pull in
SQLAlchemy. Import directly: ``from site_commands.sites.sql import
SqlSiteDirectory``.
"""

from site_commands.sites.base import Site, SiteDirectory
from site_commands.sites.memory import InMemorySiteDirectory

__all__ = ["InMemorySiteDirectory", "Site", "SiteDirectory"]
