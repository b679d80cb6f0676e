"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from site_commands.sites.base import Site
from tests.helpers import RecordingSiteDirectory, make_site


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-db",
        action="store_true",
        default=False,
        help="Run tests that require a live PostgreSQL instance",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if config.getoption("--run-db"):
        return
    skip_db = pytest.mark.skip(reason="needs --run-db flag")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)


@pytest.fixture()
def abc_sites() -> list[Site]:
    """Three live sites A, B, C in fan-out order."""
    return [make_site("A"), make_site("B"), make_site("C")]


@pytest.fixture()
def recording_sites(abc_sites: list[Site]) -> RecordingSiteDirectory:
    return RecordingSiteDirectory(abc_sites)
