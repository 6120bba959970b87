"""Harvesting of downloaded service reference pages into services.

Pages are flattened into span-annotated cell rows and staged per URL; once
every page is staged the rows go through grid resolution and record
extraction. Fetching the pages is left to the caller.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from .extract import (
    ACTIONS_TABLE,
    CONDITION_KEYS_TABLE,
    RESOURCE_TYPES_TABLE,
    extract_actions,
    extract_condition_keys,
    extract_resource_types,
)
from .grid import Cell, TableError, parse_span, resolve_grid
from .models import Service

logger = logging.getLogger(__name__)

PAGE_EXTENSIONS = {".html", ".htm"}

TABLE_HEADINGS = (
    ("actions", ACTIONS_TABLE),
    ("resource types", RESOURCE_TYPES_TABLE),
    ("condition keys", CONDITION_KEYS_TABLE),
)


@dataclass
class ServiceCells:
    """Raw cell rows collected for one service page."""

    url: str
    name: str = ""
    prefix: str = ""
    tables: dict[str, list[list[Cell]]] = field(
        default_factory=lambda: {table: [] for _, table in TABLE_HEADINGS}
    )


class StagingTable:
    """URL-keyed pages under construction, guarded by a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pages: dict[str, ServiceCells] = {}

    def register(self, url: str) -> None:
        with self._lock:
            self._pages.setdefault(url, ServiceCells(url=url))

    def set_identity(self, url: str, name: str, prefix: str) -> None:
        with self._lock:
            page = self._pages.setdefault(url, ServiceCells(url=url))
            page.name = name
            page.prefix = prefix

    def add_rows(self, url: str, table: str, rows: list[list[Cell]]) -> None:
        with self._lock:
            page = self._pages.setdefault(url, ServiceCells(url=url))
            page.tables[table].extend(rows)

    def pages(self) -> list[ServiceCells]:
        with self._lock:
            return list(self._pages.values())


def cells_from_row(row: Tag, *, row_index: int, table: str) -> list[Cell]:
    cells: list[Cell] = []
    for td in row.find_all("td", recursive=False):
        cells.append(
            Cell(
                rowspan=parse_span(
                    _attr(td, "rowspan"), row_index=row_index, attribute="rowspan", table=table
                ),
                colspan=parse_span(
                    _attr(td, "colspan"), row_index=row_index, attribute="colspan", table=table
                ),
                text=td.get_text(),
            )
        )
    return cells


def _attr(tag: Tag, name: str) -> str | None:
    value = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def classify_table(heading: str) -> str | None:
    lowered = heading.strip().lower()
    for prefix, table in TABLE_HEADINGS:
        if lowered.startswith(prefix):
            return table
    return None


def parse_page(text: str, url: str, staging: StagingTable) -> None:
    """Stage the service identity and table rows found in one page."""
    stage_soup(BeautifulSoup(text, "lxml"), url, staging)


def stage_soup(soup: BeautifulSoup, url: str, staging: StagingTable) -> None:
    staging.register(url)

    for paragraph in soup.select("#main-content p"):
        paragraph_text = paragraph.get_text()
        if "service prefix" not in paragraph_text:
            continue
        name = paragraph_text.split("(")[0].strip()
        prefix = "".join(code.get_text() for code in paragraph.find_all("code")).strip()
        staging.set_identity(url, name, prefix)

    for container in soup.select(".table-container"):
        heading = "".join(th.get_text() for th in container.select("table tr th"))
        table = classify_table(heading)
        if table is None:
            continue
        body_rows = [
            row for row in container.select("table tr") if row.find("td", recursive=False)
        ]
        rows = [
            cells_from_row(row, row_index=row_index, table=table)
            for row_index, row in enumerate(body_rows)
        ]
        logger.debug("%s: staged %d %s rows", url, len(rows), table)
        staging.add_rows(url, table, rows)


def build_service(page: ServiceCells) -> Service:
    actions = extract_actions(resolve_grid(page.tables[ACTIONS_TABLE], table=ACTIONS_TABLE))
    resource_types = extract_resource_types(
        resolve_grid(page.tables[RESOURCE_TYPES_TABLE], table=RESOURCE_TYPES_TABLE)
    )
    condition_keys = extract_condition_keys(
        resolve_grid(page.tables[CONDITION_KEYS_TABLE], table=CONDITION_KEYS_TABLE)
    )
    return Service(
        url=page.url,
        name=page.name,
        prefix=page.prefix,
        actions=tuple(actions),
        resource_types=tuple(resource_types),
        condition_keys=tuple(condition_keys),
    )


def build_services(staging: StagingTable) -> list[Service]:
    services: list[Service] = []
    for page in staging.pages():
        if not "".join(page.url.split()):
            continue
        try:
            services.append(build_service(page))
        except TableError:
            logger.error("Failed to build service from %s", page.url)
            raise
    services.sort(key=lambda service: service.name)
    logger.info("Built %d services", len(services))
    return services


def iter_page_files(root: Path) -> Iterator[Path]:
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in PAGE_EXTENSIONS:
            yield path


def page_url(soup: BeautifulSoup, path: Path) -> str:
    """The page's canonical link, falling back to the file URI."""
    canonical = soup.find("link", rel="canonical")
    if isinstance(canonical, Tag):
        href = _attr(canonical, "href")
        if href:
            return href
    return path.resolve().as_uri()


def scan_directory(pages_dir: Path) -> list[Service]:
    """Parse every saved page under ``pages_dir`` and build its services."""
    staging = StagingTable()
    count = 0
    for file_path in iter_page_files(pages_dir):
        soup = BeautifulSoup(file_path.read_text(encoding="utf-8", errors="ignore"), "lxml")
        stage_soup(soup, page_url(soup, file_path), staging)
        count += 1
    logger.info("Scanned %d pages under %s", count, pages_dir)
    return build_services(staging)
