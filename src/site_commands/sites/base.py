"""Site directory contract: enumerate sites and switch the active one."""

from __future__ import annotations

import abc
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from site_commands.descriptor import SiteQuery

logger = structlog.get_logger()


@dataclass(frozen=True)
class Site:
    """One tenant of the installation.

    Borrowed by the fan-out for a single iteration; the directory that
    produced it owns the actual switching.
    """

    id: uuid.UUID
    name: str
    is_deleted: bool = False


class SiteDirectory(abc.ABC):
    """Enumerates sites and keeps a stack of active-site switches.

    ``switch_to`` pushes the currently active site and activates the
    given one; ``restore`` pops back to the previous one. Callers should
    prefer :meth:`switched_to`, which pairs the two on every exit path.
    """

    def __init__(self) -> None:
        self._current: Site | None = None
        self._stack: list[Site | None] = []

    @abc.abstractmethod
    def query(self, site_query: SiteQuery) -> list[Site] | int:
        """Return matching sites in a stable order, or a count if asked."""

    def current_site(self) -> Site | None:
        """Active site, or None for the default (network-level) context."""
        return self._current

    def switch_to(self, site: Site) -> None:
        self._stack.append(self._current)
        self._current = site
        logger.debug("site_switched", site_id=str(site.id), depth=len(self._stack))

    def restore(self) -> None:
        if not self._stack:
            raise RuntimeError("restore() called without a matching switch_to()")
        self._current = self._stack.pop()
        logger.debug("site_restored", depth=len(self._stack))

    @contextmanager
    def switched_to(self, site: Site) -> Iterator[Site]:
        """Activate ``site`` for the block and restore afterwards, even on error."""
        self.switch_to(site)
        try:
            yield site
        finally:
            self.restore()
