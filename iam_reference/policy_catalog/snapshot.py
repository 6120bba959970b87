"""Snapshot persistence: the service list as JSON plus a version tag."""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, cast

from .models import Service

logger = logging.getLogger(__name__)

VERSION_TAG = "v0.1.1"
RAW_DATA_FILENAME = "rawData.json"
VERSION_FILENAME = "version.txt"


class SnapshotError(ValueError):
    pass


class CatalogPaths:
    def __init__(self, project_dir: Path) -> None:
        self.project_dir = project_dir
        self.raw_data_path = project_dir / RAW_DATA_FILENAME
        self.version_path = project_dir / VERSION_FILENAME


def save_snapshot(path: Path, services: Iterable[Service]) -> None:
    data = [service.to_dict() for service in services]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, ensure_ascii=False)
    logger.info("Wrote %d services to %s", len(data), path)


def load_snapshot(path: Path) -> list[Service]:
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"{path}: not valid JSON ({exc})") from exc
    if not isinstance(data, list):
        raise SnapshotError(f"{path}: expected a list of services")
    services: list[Service] = []
    for position, entry in enumerate(cast(list[Any], data)):
        try:
            services.append(Service.from_dict(entry))
        except (KeyError, TypeError) as exc:
            raise SnapshotError(f"{path}: service {position} is malformed ({exc!r})") from exc
    return services


def save_version(path: Path, version_tag: str = VERSION_TAG) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(version_tag, encoding="utf-8")


def load_version(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip(" \n")


def needs_refresh(paths: CatalogPaths, version_tag: str = VERSION_TAG) -> bool:
    """True when the snapshot is missing or was written under another version tag."""
    if not paths.raw_data_path.exists():
        return True
    return load_version(paths.version_path) != version_tag


def store(paths: CatalogPaths, services: Iterable[Service]) -> None:
    save_snapshot(paths.raw_data_path, services)
    save_version(paths.version_path)
