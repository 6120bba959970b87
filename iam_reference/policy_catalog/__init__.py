"""IAM action reference catalog package."""
from __future__ import annotations

from pathlib import Path

from . import catalog, extract, grid, harvest, models, renderer, resolver, snapshot

__all__ = [
    "grid",
    "extract",
    "models",
    "catalog",
    "resolver",
    "harvest",
    "snapshot",
    "renderer",
    "load_catalog",
]


def load_catalog(project_dir: Path) -> catalog.Catalog:
    """Convenience wrapper to build a catalog from the snapshot in ``project_dir``."""
    paths = snapshot.CatalogPaths(project_dir)
    return catalog.Catalog.build(snapshot.load_snapshot(paths.raw_data_path))
