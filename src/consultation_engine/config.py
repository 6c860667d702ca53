"""Centralized configuration management for the consultation engine."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class MatchingWeightsConfig(BaseModel):
    """Weights for the service matching criteria.

    These weights control how much each criterion contributes to the final
    match score. They sum to 1.0.
    """
    business_type: float = Field(0.25, description="Client business type vs. package industry tags")
    company_size: float = Field(0.20, description="Client company size vs. package tier")
    industry: float = Field(0.15, description="Client industry vs. package industry tags")
    budget_range: float = Field(0.15, description="Client budget vs. package price band")
    timeline: float = Field(0.10, description="Client urgency vs. package delivery timeline")
    primary_goals: float = Field(0.10, description="Client goals found in package description or features")
    complexity_level: float = Field(0.05, description="Project complexity vs. package tier")


class ConfidenceThresholdsConfig(BaseModel):
    """Thresholds for match confidence and recommendation type.

    A criterion counts as covered when its sub-score exceeds
    covered_score_floor.
    """
    high_score_threshold: float = Field(0.7, description="Minimum match score for high confidence")
    high_coverage_ratio: float = Field(0.6, description="Minimum covered-criteria ratio for high confidence")
    medium_score_threshold: float = Field(0.5, description="Minimum match score for medium confidence")
    medium_coverage_ratio: float = Field(0.4, description="Minimum covered-criteria ratio for medium confidence")
    covered_score_floor: float = Field(0.1, description="Sub-score above which a criterion is covered")


class MatchingLimitsConfig(BaseModel):
    """Bucket sizes for matching results."""
    max_primary: int = Field(3, description="Maximum primary matches")
    max_alternative: int = Field(5, description="Maximum alternative matches")
    default_max_results: int = Field(5, description="Default primary + alternative budget")


class RoutingThresholdsConfig(BaseModel):
    """Decision table for lead routing, evaluated top to bottom."""
    fast_track_qualification: int = Field(80, description="Minimum qualification for fast-track")
    fast_track_completeness: int = Field(70, description="Minimum completeness for fast-track")
    continue_qualification: int = Field(60, description="Minimum qualification to continue")
    continue_completeness: int = Field(50, description="Minimum completeness to continue")
    redirect_qualification: int = Field(40, description="Qualification below this redirects to resources")
    redirect_completeness: int = Field(30, description="Completeness below this redirects to resources")
    fast_track_score: int = 95
    continue_score: int = 75
    qualify_further_score: int = 55
    redirect_score: int = 30


class ReadinessWeightsConfig(BaseModel):
    """Weights for blending the readiness score."""
    completeness: float = 0.4
    depth: float = 0.4
    consistency: float = 0.2


class EngineConfig(BaseModel):
    """Complete configuration for the consultation engine."""
    matching_weights: MatchingWeightsConfig = Field(default_factory=MatchingWeightsConfig)
    confidence_thresholds: ConfidenceThresholdsConfig = Field(default_factory=ConfidenceThresholdsConfig)
    matching_limits: MatchingLimitsConfig = Field(default_factory=MatchingLimitsConfig)
    routing_thresholds: RoutingThresholdsConfig = Field(default_factory=RoutingThresholdsConfig)
    readiness_weights: ReadinessWeightsConfig = Field(default_factory=ReadinessWeightsConfig)


# Shared by analyzers, matchers and routers built without an explicit config
_config: Optional[EngineConfig] = None

CONFIG_ENV_VAR = "CONSULTATION_ENGINE_CONFIG"
CONFIG_FILE_NAMES = ("consultation-config.yaml", "consultation-config.yml")
USER_CONFIG_PATH = Path(".config") / "consultation-engine" / "config.yaml"


def get_config() -> EngineConfig:
    """Return the process-wide engine settings, creating defaults on first use."""
    global _config
    if _config is None:
        _config = EngineConfig()
    return _config


def load_config(path: Path) -> EngineConfig:
    """Replace the process-wide settings with the contents of a YAML file.

    Sections left out of the file keep their default weights and thresholds.
    An empty file yields the defaults. Out-of-shape values raise pydantic's
    ValidationError.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = EngineConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Drop any loaded file and go back to the built-in scoring constants."""
    global _config
    _config = EngineConfig()


def find_config_file() -> Optional[Path]:
    """Locate the settings file for this run, if one exists.

    The CONSULTATION_ENGINE_CONFIG environment variable wins, then a
    consultation-config.yaml (or .yml) in the working directory, then the
    per-user file under ~/.config/consultation-engine/.
    """
    candidates = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(Path(name) for name in CONFIG_FILE_NAMES)
    candidates.append(Path.home() / USER_CONFIG_PATH)

    for path in candidates:
        if path.exists():
            return path
    return None


CONFIG_TEMPLATE_HEADER = """# Consultation Engine Configuration
# =================================
#
# matching_weights       share of each criterion in a package's match score (sum to 1.0)
# confidence_thresholds  score and coverage cut-offs for high/medium/low confidence
#                        and for primary/alternative/consider recommendations
# matching_limits        caps on primary and alternative matches per submission
# routing_thresholds     qualification/completeness gates and the routing score
#                        reported for fast-track, continue, qualify-further, redirect
# readiness_weights      blend of completeness, depth and consistency in readiness
#
# Place this file at ./consultation-config.yaml or
# ~/.config/consultation-engine/config.yaml, point CONSULTATION_ENGINE_CONFIG
# at it, or pass it with --config.

"""


def save_default_config(path: Path) -> None:
    """Write the built-in settings as a commented YAML template."""
    data = EngineConfig().model_dump()
    yaml_content = CONFIG_TEMPLATE_HEADER + yaml.dump(
        data, default_flow_style=False, sort_keys=False, allow_unicode=True
    )

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
