"""Pydantic models for the service package catalog."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceTier(str, Enum):
    """Service package size class."""
    FOUNDATION = "foundation"
    GROWTH = "growth"
    ENTERPRISE = "enterprise"


class PackageContent(BaseModel):
    """Narrative content shown alongside a recommended package."""
    model_config = ConfigDict(frozen=True)

    what_you_get: str = ""
    why_this_fits: str = ""
    timeline: str = ""
    next_steps: list[str] = Field(default_factory=list)


class ServicePackage(BaseModel):
    """Complete service package catalog entry.

    Packages are immutable once created; catalog edits produce new instances.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    id: str = Field(..., description="Slug derived from the package title")
    title: str = Field(..., description="Package title")
    description: str = Field(..., description="Short description of the engagement")
    category: str = Field(..., description="Service category, e.g. strategy or operations")

    # Classification
    tier: ServiceTier = Field(..., description="Package size class")
    price_band: str = Field(..., description="Display price band, e.g. '$10k - $25k'")
    timeline: str = Field(..., description="Delivery timeline, e.g. '4-6 weeks'")

    # Matching inputs
    includes: list[str] = Field(default_factory=list, description="Included features, in display order")
    industry_tags: list[str] = Field(default_factory=list, description="Industries served")
    eligibility_criteria: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Answer values this package is designed for, keyed by question id"
    )

    content: PackageContent = Field(default_factory=PackageContent)


class ServiceCatalog(BaseModel):
    """A versioned set of service packages."""
    version: str = Field(default="1.0.0", description="Catalog schema version")
    generated_at: datetime = Field(default_factory=datetime.utcnow)
    source: Optional[str] = Field(None, description="File or seed the catalog came from")
    packages: list[ServicePackage] = Field(default_factory=list)

    @property
    def total_packages(self) -> int:
        return len(self.packages)
