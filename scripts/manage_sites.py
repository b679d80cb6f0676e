"""CLI for site registry management.

Usage::

    uv run python -m scripts.manage_sites <command> [options]

Commands:
    create-site     Register a new site
    list-sites      List sites (deleted ones only with --all)
    delete-site     Soft-delete a site (skipped by --all-sites fan-out)
    restore-site    Undo a soft delete
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from site_commands.config import settings
from site_commands.sites.sql import make_session_factory
from site_commands.storage.orm import SiteRecord


def get_sync_session() -> Session:
    """Create sync session for CLI operations."""
    return make_session_factory(settings.database_url)()


def _get_site(session: Session, name: str) -> SiteRecord | None:
    return session.execute(
        select(SiteRecord).where(SiteRecord.name == name)
    ).scalar_one_or_none()


def create_site(args: argparse.Namespace) -> None:
    """Register a new site."""
    with get_sync_session() as session:
        if _get_site(session, args.name) is not None:
            print(f"Site already exists: {args.name}", file=sys.stderr)
            sys.exit(1)

        site = SiteRecord(name=args.name)
        session.add(site)
        session.commit()
        print(f"Site created: {args.name} (id: {site.id})")


def list_sites(args: argparse.Namespace) -> None:
    """List sites in fan-out order."""
    with get_sync_session() as session:
        stmt = select(SiteRecord).order_by(SiteRecord.created_at, SiteRecord.name)
        if not args.all:
            stmt = stmt.where(SiteRecord.is_deleted.is_(False))
        sites = session.execute(stmt).scalars().all()

        if not sites:
            print("No sites found.")
            return

        print("Sites:")
        for i, site in enumerate(sites, 1):
            status = "deleted" if site.is_deleted else "active"
            print(f"  {i}. {site.name} ({status}, id: {site.id})")


def _set_deleted(name: str, deleted: bool) -> None:
    with get_sync_session() as session:
        site = _get_site(session, name)
        if site is None:
            print(f"Site not found: {name}", file=sys.stderr)
            sys.exit(1)

        if site.is_deleted == deleted:
            state = "deleted" if deleted else "active"
            print(f"Site already {state}: {name}", file=sys.stderr)
            sys.exit(1)

        site.is_deleted = deleted
        session.commit()
        print(f"Site {'deleted' if deleted else 'restored'}: {name}")


def delete_site(args: argparse.Namespace) -> None:
    """Soft-delete a site."""
    _set_deleted(args.name, deleted=True)


def restore_site(args: argparse.Namespace) -> None:
    """Restore a soft-deleted site."""
    _set_deleted(args.name, deleted=False)


def main() -> None:
    """Parse arguments and dispatch to command handler."""
    parser = argparse.ArgumentParser(description="Site registry CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    # create-site
    p = sub.add_parser("create-site", help="Register a new site")
    p.add_argument("--name", required=True, help="Site name")

    # list-sites
    p = sub.add_parser("list-sites", help="List sites")
    p.add_argument("--all", action="store_true", help="Include deleted sites")

    # delete-site
    p = sub.add_parser("delete-site", help="Soft-delete a site")
    p.add_argument("--name", required=True, help="Site name")

    # restore-site
    p = sub.add_parser("restore-site", help="Restore a deleted site")
    p.add_argument("--name", required=True, help="Site name")

    args = parser.parse_args()
    commands: dict[str, Callable[[argparse.Namespace], None]] = {
        "create-site": create_site,
        "list-sites": list_sites,
        "delete-site": delete_site,
        "restore-site": restore_site,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
