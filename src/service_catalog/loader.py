"""Catalog file loading.

Reads service catalogs from JSON or YAML files with structural checks
before full schema validation:

- Top-level must be an object with a 'packages' list, or a bare list
- Package count must stay under MAX_PACKAGE_COUNT
- Each record must be an object with a 'title'
- Every record must pass the catalog ruleset
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

from .catalog import CatalogValidationError, build_package
from .schema import ServiceCatalog

logger = logging.getLogger(__name__)

MAX_CATALOG_BYTES = 5 * 1024 * 1024
MAX_PACKAGE_COUNT = 1000


class CatalogLoadError(Exception):
    """Raised when a catalog file cannot be loaded."""


def load_catalog_file(path: Union[str, Path]) -> ServiceCatalog:
    """Load and validate a catalog file.

    Args:
        path: Path to a .json, .yaml or .yml catalog file.

    Returns:
        The validated ServiceCatalog.

    Raises:
        CatalogLoadError: On any read, parse or validation failure.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogLoadError(f"Catalog file not found: {path}")

    if path.stat().st_size > MAX_CATALOG_BYTES:
        raise CatalogLoadError(
            f"Catalog exceeds the maximum allowed size of "
            f"{MAX_CATALOG_BYTES // (1024 * 1024)} MB."
        )

    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        raise CatalogLoadError("Catalog file is empty.")

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CatalogLoadError(f"Catalog file could not be parsed: {exc}")

    catalog = parse_catalog(data, source=str(path))
    logger.info("Loaded %s service packages from %s", catalog.total_packages, path)
    return catalog


def parse_catalog(data: Any, source: str = "inline") -> ServiceCatalog:
    """Validate already-decoded catalog data."""
    if isinstance(data, list):
        data = {"version": "1.0.0", "packages": data}

    _validate_catalog_structure(data)

    packages = []
    seen = set()
    for i, record in enumerate(data["packages"]):
        try:
            package = build_package(record)
        except CatalogValidationError as exc:
            raise CatalogLoadError(f"Package at index {i} is invalid: {exc}")
        if package.id in seen:
            raise CatalogLoadError(f"Duplicate package id '{package.id}' at index {i}")
        seen.add(package.id)
        packages.append(package)

    return ServiceCatalog(
        version=str(data.get("version", "1.0.0")),
        source=source,
        packages=packages,
    )


def save_catalog_file(catalog: ServiceCatalog, path: Union[str, Path]) -> None:
    """Write a catalog to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(catalog.model_dump(mode="json"), f, indent=2, ensure_ascii=False, default=str)


def _validate_catalog_structure(data: Any) -> None:
    """Validate the essential shape of a catalog document."""
    if not isinstance(data, dict):
        raise CatalogLoadError(
            "Catalog must be an object with a 'packages' key or a list of packages."
        )

    if "packages" not in data:
        raise CatalogLoadError("Catalog is missing the required 'packages' field.")

    packages = data["packages"]
    if not isinstance(packages, list):
        raise CatalogLoadError("'packages' must be a list.")

    if len(packages) > MAX_PACKAGE_COUNT:
        raise CatalogLoadError(
            f"Catalog contains {len(packages)} packages, which exceeds "
            f"the maximum of {MAX_PACKAGE_COUNT}."
        )

    for i, entry in enumerate(packages):
        if not isinstance(entry, dict):
            raise CatalogLoadError(f"Package entry at index {i} is not an object.")
        if "title" not in entry:
            raise CatalogLoadError(f"Package entry at index {i} is missing 'title'.")
