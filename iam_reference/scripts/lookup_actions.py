#!/usr/bin/env python3
"""CLI entrypoint for the IAM action reference."""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from iam_reference.policy_catalog import harvest, renderer, resolver, snapshot
from iam_reference.policy_catalog.catalog import Catalog
from iam_reference.policy_catalog.snapshot import CatalogPaths

DEFAULT_PROJECT_DIR = Path.home() / ".iampolicyhelper"
PROJECT_DIR_ENV = "IAM_REFERENCE_HOME"

logger = logging.getLogger("iam_reference.policy_catalog.cli")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def resolve_project_dir(path: str | None) -> Path:
    if path:
        return Path(path).expanduser().resolve()
    env_value = os.environ.get(PROJECT_DIR_ENV)
    if env_value:
        return Path(env_value).expanduser().resolve()
    return DEFAULT_PROJECT_DIR


def resolve_pages(pages: str) -> Path:
    resolved = Path(pages).expanduser().resolve()
    if not resolved.is_dir():
        raise SystemExit(f"Pages directory not found: {resolved}")
    return resolved


def load_checked_catalog(paths: CatalogPaths) -> Catalog:
    if not paths.raw_data_path.exists():
        raise SystemExit("No snapshot found. Run 'ingest' first.")
    if snapshot.needs_refresh(paths):
        logger.warning(
            "Snapshot %s was not written by %s; consider running 'ingest' again",
            paths.raw_data_path,
            snapshot.VERSION_TAG,
        )
    return Catalog.build(snapshot.load_snapshot(paths.raw_data_path))


def command_ingest(args: argparse.Namespace) -> None:
    paths = CatalogPaths(resolve_project_dir(args.home))
    pages = resolve_pages(args.pages)
    logger.info("Harvesting service pages from %s", pages)
    services = harvest.scan_directory(pages)
    snapshot.store(paths, services)
    logger.info(
        "Snapshot written to %s (%d services, %d actions)",
        paths.raw_data_path,
        len(services),
        sum(len(service.actions) for service in services),
    )


def command_lookup(args: argparse.Namespace) -> None:
    paths = CatalogPaths(resolve_project_dir(args.home))
    catalog = load_checked_catalog(paths)
    index = resolver.build_index(catalog)
    query = " ".join(args.query)
    print(renderer.render_action(catalog, resolver.resolve(index, query)))


def command_check(args: argparse.Namespace) -> None:
    paths = CatalogPaths(resolve_project_dir(args.home))
    version = snapshot.load_version(paths.version_path)
    print("Snapshot:".ljust(16), paths.raw_data_path)
    print("Present:".ljust(16), "yes" if paths.raw_data_path.exists() else "no")
    print("Version:".ljust(16), version or "missing", f"(expected {snapshot.VERSION_TAG})")
    if paths.raw_data_path.exists():
        catalog = Catalog.build(snapshot.load_snapshot(paths.raw_data_path))
        print("Services:".ljust(16), len(catalog))
        print("Actions:".ljust(16), catalog.action_count)
    print("Needs refresh:".ljust(16), "yes" if snapshot.needs_refresh(paths) else "no")


def build_parser() -> argparse.ArgumentParser:
    parser_obj = argparse.ArgumentParser(description="Look up IAM actions by name")
    parser_obj.add_argument(
        "--home",
        help=f"Project directory holding the snapshot (overrides {PROJECT_DIR_ENV})",
    )
    parser_obj.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser_obj.add_subparsers(dest="command")

    ingest_parser = subparsers.add_parser("ingest", help="Build the snapshot from saved pages")
    ingest_parser.add_argument(
        "--pages", required=True, help="Directory of downloaded service reference pages"
    )
    ingest_parser.set_defaults(func=command_ingest)

    lookup_parser = subparsers.add_parser("lookup", help="Resolve and print an action")
    lookup_parser.add_argument("query", nargs="*", help="Action name, e.g. s3:getobject")
    lookup_parser.set_defaults(func=command_lookup)

    check_parser = subparsers.add_parser("check", help="Report snapshot status")
    check_parser.set_defaults(func=command_check)

    return parser_obj


def main(argv: list[str] | None = None) -> None:
    parser_obj = build_parser()
    args = parser_obj.parse_args(argv)
    if not getattr(args, "command", None):
        parser_obj.print_help()
        return
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
