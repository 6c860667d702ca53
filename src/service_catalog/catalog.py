"""Service catalog management.

The catalog service is constructed once per process and shared read-only
by matching passes. Every read hands out an immutable snapshot, so an
administrative edit never changes the packages an in-flight matching
pass is looking at.
"""

import logging
import re
import threading
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from .defaults import DEFAULT_PACKAGES
from .schema import ServiceCatalog, ServicePackage, ServiceTier

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "category", "tier", "price_band", "timeline")

# Minimum number of included features per tier
TIER_MIN_FEATURES = {
    ServiceTier.FOUNDATION: 3,
    ServiceTier.GROWTH: 4,
    ServiceTier.ENTERPRISE: 5,
}


class CatalogError(Exception):
    """Raised for catalog management failures (unknown or duplicate ids)."""


class CatalogValidationError(CatalogError):
    """Raised when a package record fails the catalog ruleset."""

    def __init__(self, issues: list[str]):
        self.issues = issues
        super().__init__("; ".join(issues))


def slugify(title: str) -> str:
    """Derive a package id from its title."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-")


def validate_package(data: dict[str, Any]) -> list[str]:
    """Check a package record against the catalog ruleset.

    Returns a list of issues; an empty list means the record is valid.
    """
    issues = []

    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(f"Missing required field: {field}")

    tier_value = data.get("tier")
    tier = None
    if tier_value is not None:
        if isinstance(tier_value, (list, tuple, set)):
            issues.append("A package must belong to exactly one tier")
        else:
            try:
                tier = ServiceTier(str(getattr(tier_value, "value", tier_value)).lower())
            except ValueError:
                issues.append(
                    f"Unknown tier '{tier_value}'; expected one of "
                    f"{', '.join(t.value for t in ServiceTier)}"
                )

    includes = data.get("includes") or []
    if not isinstance(includes, list):
        issues.append("'includes' must be a list of features")
    elif tier is not None and len(includes) < TIER_MIN_FEATURES[tier]:
        issues.append(
            f"{tier.value} packages need at least {TIER_MIN_FEATURES[tier]} "
            f"included features, got {len(includes)}"
        )

    return issues


def build_package(data: dict[str, Any]) -> ServicePackage:
    """Validate a raw record and turn it into a ServicePackage.

    The id is derived from the title when the record does not carry one.
    """
    issues = validate_package(data)
    if issues:
        raise CatalogValidationError(issues)

    record = dict(data)
    record.setdefault("id", slugify(record["title"]))
    if isinstance(record["tier"], str):
        record["tier"] = record["tier"].lower()
    try:
        return ServicePackage.model_validate(record)
    except ValidationError as exc:
        raise CatalogValidationError([str(exc)]) from exc


class CatalogService:
    """In-memory service catalog keyed by package id.

    Reads return snapshots; writes replace the underlying map under a lock.
    """

    def __init__(
        self,
        packages: Optional[Iterable[Union[ServicePackage, dict[str, Any]]]] = None,
        version: str = "1.0.0",
        source: Optional[str] = None,
    ):
        self._lock = threading.RLock()
        self._packages: dict[str, ServicePackage] = {}
        self.version = version
        self.source = source
        if packages is None:
            packages = DEFAULT_PACKAGES
            self.source = source or "defaults"
        self._replace(packages)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CatalogService":
        """Create a catalog service from a JSON or YAML catalog file."""
        from .loader import load_catalog_file

        catalog = load_catalog_file(path)
        return cls(catalog.packages, version=catalog.version, source=catalog.source)

    # =========================================================================
    # Read access
    # =========================================================================

    def packages(self) -> tuple[ServicePackage, ...]:
        """Return an immutable snapshot of the current packages."""
        with self._lock:
            return tuple(self._packages.values())

    def get(self, package_id: str) -> ServicePackage:
        with self._lock:
            try:
                return self._packages[package_id]
            except KeyError:
                raise CatalogError(f"Service package not found: {package_id}") from None

    def __len__(self) -> int:
        with self._lock:
            return len(self._packages)

    def __contains__(self, package_id: object) -> bool:
        with self._lock:
            return package_id in self._packages

    def to_catalog(self) -> ServiceCatalog:
        """Export the current snapshot as a ServiceCatalog document."""
        return ServiceCatalog(
            version=self.version,
            source=self.source,
            packages=list(self.packages()),
        )

    def search(
        self,
        query: Optional[str] = None,
        tier: Optional[Union[ServiceTier, str]] = None,
        industry: Optional[str] = None,
    ) -> list[ServicePackage]:
        """Find packages by free text, tier and industry tag."""
        results = list(self.packages())

        if query:
            q = query.lower()
            results = [
                p for p in results
                if q in p.title.lower()
                or q in p.description.lower()
                or q in p.category.lower()
                or any(q in feature.lower() for feature in p.includes)
            ]

        if tier:
            wanted = ServiceTier(str(getattr(tier, "value", tier)).lower())
            results = [p for p in results if p.tier == wanted]

        if industry:
            ind = industry.lower()
            results = [
                p for p in results
                if any(ind in tag.lower() or tag.lower() in ("universal", "all") for tag in p.industry_tags)
            ]

        return results

    # =========================================================================
    # Administrative operations
    # =========================================================================

    def reload(
        self,
        source: Union[ServiceCatalog, Iterable[Union[ServicePackage, dict[str, Any]]], str, Path],
    ) -> int:
        """Replace the whole catalog atomically.

        Args:
            source: A ServiceCatalog, an iterable of packages/records,
                or a path to a catalog file.

        Returns:
            Number of packages now in the catalog.
        """
        if isinstance(source, (str, Path)):
            from .loader import load_catalog_file

            catalog = load_catalog_file(source)
            self.version = catalog.version
            self.source = catalog.source
            packages = catalog.packages
        elif isinstance(source, ServiceCatalog):
            self.version = source.version
            self.source = source.source
            packages = source.packages
        else:
            packages = source

        self._replace(packages)
        logger.info("Catalog reloaded with %s packages", len(self))
        return len(self)

    def create(self, data: dict[str, Any]) -> ServicePackage:
        """Add a new package; the id is the slugified title."""
        record = {k: v for k, v in data.items() if k != "id"}
        package = build_package(record)
        with self._lock:
            if package.id in self._packages:
                raise CatalogError(f"A package with id '{package.id}' already exists")
            self._packages[package.id] = package
        logger.info("Created service package %s", package.id)
        return package

    def update(self, package_id: str, changes: dict[str, Any]) -> ServicePackage:
        """Apply changes to an existing package. The id never changes."""
        with self._lock:
            current = self.get(package_id)
            record = current.model_dump(mode="json")
            record.update({k: v for k, v in changes.items() if k != "id"})
            record["id"] = package_id
            package = build_package(record)
            self._packages[package_id] = package
        logger.info("Updated service package %s", package_id)
        return package

    def delete(self, package_id: str) -> ServicePackage:
        with self._lock:
            package = self.get(package_id)
            del self._packages[package_id]
        logger.info("Deleted service package %s", package_id)
        return package

    def duplicate(self, package_id: str, title: Optional[str] = None) -> ServicePackage:
        """Copy a package under a new title and a unique id."""
        with self._lock:
            source = self.get(package_id)
            new_title = title or f"{source.title} (Copy)"
            record = source.model_dump(mode="json")
            record["title"] = new_title
            record["id"] = self._unique_id(slugify(new_title))
            package = build_package(record)
            self._packages[package.id] = package
        logger.info("Duplicated service package %s as %s", package_id, package.id)
        return package

    # =========================================================================
    # Helpers
    # =========================================================================

    def _replace(self, packages: Iterable[Union[ServicePackage, dict[str, Any]]]) -> None:
        if isinstance(packages, (str, bytes, dict)):
            raise TypeError("packages must be an iterable of ServicePackage or dict records")

        new_map: dict[str, ServicePackage] = {}
        for item in packages:
            package = item if isinstance(item, ServicePackage) else build_package(item)
            if package.id in new_map:
                raise CatalogError(f"Duplicate package id in catalog: {package.id}")
            new_map[package.id] = package

        with self._lock:
            self._packages = new_map

    def _unique_id(self, base: str) -> str:
        candidate = base
        counter = 2
        while candidate in self._packages:
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate
