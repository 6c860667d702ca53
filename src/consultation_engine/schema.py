"""Pydantic models for the Consultation Engine.

Input schema for questionnaire answers and output schemas for readiness,
matching, routing and consultation reports.
"""

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Re-export catalog types for convenience
from service_catalog.schema import PackageContent, ServicePackage, ServiceTier


class InvalidInputError(ValueError):
    """Raised when an input has the wrong shape (not a mapping, not a list)."""


# =============================================================================
# Enums
# =============================================================================


class ConfidenceLevel(str, Enum):
    """Confidence in a single service match."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationType(str, Enum):
    """Which bucket a service match belongs to."""
    PRIMARY = "primary"
    ALTERNATIVE = "alternative"
    CONSIDER = "consider"


class RoutingRecommendation(str, Enum):
    """Next workflow action for a lead."""
    CONTINUE = "continue"
    FAST_TRACK = "fast-track"
    QUALIFY_FURTHER = "qualify-further"
    REDIRECT_TO_RESOURCES = "redirect-to-resources"


class QualityBand(str, Enum):
    """Readiness quality band."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


# =============================================================================
# Input
# =============================================================================

AnswerValue = Optional[Union[str, list[str]]]


class QuestionnaireAnswers(BaseModel):
    """Free-form questionnaire answers.

    The fields below are the keys the scorers know about. Any other key is
    accepted and kept as-is; unknown keys count towards completeness and
    depth but otherwise score neutrally.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    business_type: AnswerValue = None
    industry: AnswerValue = None
    company_size: AnswerValue = None
    annual_revenue: AnswerValue = None
    budget_range: AnswerValue = None
    timeline: AnswerValue = None
    primary_goals: AnswerValue = None
    complexity_level: AnswerValue = None

    def as_mapping(self) -> dict[str, Any]:
        """Answers actually supplied, including unknown keys."""
        return self.model_dump(exclude_unset=True)


def coerce_answers(answers: Any) -> dict[str, Any]:
    """Normalize supported answer inputs to a plain dict.

    Raises:
        InvalidInputError: If answers is neither a mapping nor QuestionnaireAnswers.
    """
    if isinstance(answers, QuestionnaireAnswers):
        return answers.as_mapping()
    if isinstance(answers, Mapping):
        return dict(answers)
    raise InvalidInputError(
        f"Questionnaire answers must be a mapping, got {type(answers).__name__}"
    )


class ClientInfo(BaseModel):
    """Client details printed on a consultation report."""
    name: str = "Valued Client"
    email: Optional[str] = None
    company: Optional[str] = None
    business_type: Optional[str] = None
    primary_goals: list[str] = Field(default_factory=list)
    generated_date: datetime = Field(default_factory=datetime.utcnow)


# =============================================================================
# Response analysis
# =============================================================================


class AIReadinessResult(BaseModel):
    """How trustworthy automated recommendations are for a set of answers."""
    score: int
    quality: QualityBand
    completeness: int
    depth: int
    consistency: int
    recommendations: list[str] = Field(default_factory=list)


class ResponseAnalysis(BaseModel):
    """Readiness plus the separate business qualification score."""
    readiness: AIReadinessResult
    qualification_score: int


# =============================================================================
# Matching
# =============================================================================


class CriterionScore(BaseModel):
    """Sub-score for one matching criterion."""
    criterion: str
    weight: float
    score: float
    weighted_score: float
    reasons: list[str] = Field(default_factory=list)


class ServiceMatch(BaseModel):
    """A scored fit between the answers and one service package."""
    service: ServicePackage
    match_score: float = Field(..., ge=0.0, le=1.0)
    match_reasons: list[str] = Field(default_factory=list)
    confidence_level: ConfidenceLevel
    recommendation_type: RecommendationType
    criteria: list[CriterionScore] = Field(default_factory=list)


class MatchingResult(BaseModel):
    """Ranked matches for one questionnaire submission."""
    primary_matches: list[ServiceMatch] = Field(default_factory=list)
    alternative_matches: list[ServiceMatch] = Field(default_factory=list)
    all_matches: list[ServiceMatch] = Field(default_factory=list)
    total_services_evaluated: int = 0
    matching_confidence: float = 0.0


# =============================================================================
# Routing
# =============================================================================


class QuestionRoutingResult(BaseModel):
    """Routing decision for a lead."""
    model_config = ConfigDict(populate_by_name=True)

    recommendation: RoutingRecommendation
    score: int
    reasoning: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list, alias="nextSteps")
    plan_recommendations: list[str] = Field(default_factory=list, alias="planRecommendations")


# =============================================================================
# Consultation report
# =============================================================================


class ConsultationInput(BaseModel):
    """A pre-generated consultation to turn into a report."""
    client: ClientInfo = Field(default_factory=ClientInfo)
    primary_service: Optional[ServicePackage] = None
    alternative_services: list[ServicePackage] = Field(default_factory=list)
    key_insights: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    analysis_summary: Optional[str] = None
    confidence_score: float = Field(0.0, ge=0.0, le=1.0)


class ReportSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str


class ReportRecommendations(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: ServicePackage
    alternatives: list[ServicePackage] = Field(default_factory=list)
    reasoning: list[str] = Field(default_factory=list)


class RoadmapPhase(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: int
    title: str
    focus: str
    milestones: list[str]


class ImplementationRoadmap(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeline: str
    phases: list[RoadmapPhase]


class ReportMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    generator: str
    template_version: str
    consultation_score: int
    estimated_read_time: int


class ConsultationReport(BaseModel):
    """A titled, sectioned consultation report. Regenerate rather than edit."""
    model_config = ConfigDict(frozen=True)

    title: str
    client_info: ClientInfo
    executive_summary: str
    sections: list[ReportSection]
    recommendations: ReportRecommendations
    implementation_roadmap: ImplementationRoadmap
    next_steps: list[str]
    metadata: ReportMetadata


# =============================================================================
# Orchestration
# =============================================================================


class ConsultationOutcome(BaseModel):
    """Everything produced for one questionnaire submission."""
    analysis: ResponseAnalysis
    routing: QuestionRoutingResult
    matching: MatchingResult
    report: Optional[ConsultationReport] = None
    processed_at: datetime = Field(default_factory=datetime.utcnow)
