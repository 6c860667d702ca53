"""Service Matcher - scores service packages against questionnaire answers.

Each package is scored on seven weighted criteria. Every criterion yields
a 0-1 sub-score plus the reasons that justify it; an unanswered question
scores a neutral 0.5 with no reason.
"""

import logging
from collections.abc import Sequence
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from service_catalog.schema import ServicePackage, ServiceTier

from .config import EngineConfig, get_config
from .normalizer import answer_key, answer_list, answer_text, is_answered
from .schema import (
    ConfidenceLevel,
    CriterionScore,
    InvalidInputError,
    MatchingResult,
    QuestionnaireAnswers,
    RecommendationType,
    ServiceMatch,
    coerce_answers,
)

logger = logging.getLogger(__name__)

Evaluation = tuple[float, list[str]]

NEUTRAL_SCORE = 0.5


class ServiceMatcher:
    """Ranks service packages for one set of questionnaire answers.

    Scoring principles:
    - Every criterion is explainable through its reasons
    - Missing answers are neutral, never penalized
    - Confidence and bucket are derived from the scores, never set directly
    """

    UNIVERSAL_TAGS = ("universal", "all")

    RELATED_INDUSTRIES = {
        "technology": ["software", "saas", "tech", "digital"],
        "retail": ["ecommerce", "e-commerce", "shop", "consumer"],
        "healthcare": ["medical", "health", "wellness", "clinic"],
        "finance": ["fintech", "banking", "insurance", "accounting"],
        "professional services": ["consulting", "agency", "legal", "services"],
        "manufacturing": ["industrial", "production", "supply chain"],
        "hospitality": ["restaurant", "hotel", "food", "travel"],
        "education": ["edtech", "training", "learning", "school"],
        "real estate": ["property", "construction"],
        "nonprofit": ["charity", "ngo", "non-profit"],
    }

    SIZE_TIERS = {
        "solo": {ServiceTier.FOUNDATION},
        "startup": {ServiceTier.FOUNDATION},
        "small": {ServiceTier.FOUNDATION, ServiceTier.GROWTH},
        "medium": {ServiceTier.GROWTH},
        "large": {ServiceTier.GROWTH, ServiceTier.ENTERPRISE},
        "enterprise": {ServiceTier.ENTERPRISE},
    }

    COMPLEXITY_TIERS = {
        "simple": {ServiceTier.FOUNDATION},
        "basic": {ServiceTier.FOUNDATION},
        "low": {ServiceTier.FOUNDATION},
        "moderate": {ServiceTier.GROWTH},
        "medium": {ServiceTier.GROWTH},
        "complex": {ServiceTier.GROWTH, ServiceTier.ENTERPRISE},
        "high": {ServiceTier.ENTERPRISE},
        "advanced": {ServiceTier.ENTERPRISE},
    }

    # Client budget -> price band fragments it can afford
    BUDGET_PRICE_BANDS = {
        "bootstrap": ["$2.5k"],
        "minimal": ["$2.5k"],
        "under-5k": ["$2.5k", "$5k"],
        "5k-15k": ["$5k", "$10k", "$15k"],
        "15k-50k": ["$15k", "$25k", "$50k"],
        "50k-100k": ["$50k", "$75k", "$100k"],
        "100k+": ["$100k", "custom"],
        "100k-plus": ["$100k", "custom"],
    }

    URGENT_WORDS = ("immediate", "urgent")
    FAST_TIMELINE_WORDS = ("day", "week")

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config if config is not None else get_config()
        self.weights = self.config.matching_weights
        self.thresholds = self.config.confidence_thresholds
        self.limits = self.config.matching_limits

    def match(
        self,
        answers: Union[QuestionnaireAnswers, dict[str, Any]],
        packages: Sequence[Union[ServicePackage, dict[str, Any]]],
        max_results: Optional[int] = None,
    ) -> MatchingResult:
        """Score every package and bucket the ranked matches.

        Args:
            answers: Questionnaire answers
            packages: Catalog snapshot to score against
            max_results: Budget shared by primary and alternative buckets

        Returns:
            MatchingResult with primary, alternative and ranked full lists
        """
        data = coerce_answers(answers)
        catalog = self._coerce_packages(packages)
        if max_results is None:
            max_results = self.limits.default_max_results
        if not isinstance(max_results, int) or max_results < 0:
            raise InvalidInputError(f"max_results must be a non-negative integer, got {max_results!r}")

        matches = [self.score_package(data, package) for package in catalog]
        matches.sort(key=lambda m: m.match_score, reverse=True)

        primary = [
            m for m in matches
            if m.match_score >= self.thresholds.high_score_threshold
            and m.confidence_level == ConfidenceLevel.HIGH
        ][:min(self.limits.max_primary, max_results)]

        remaining = max(0, max_results - len(primary))
        alternatives = [
            m for m in matches
            if self.thresholds.medium_score_threshold <= m.match_score < self.thresholds.high_score_threshold
        ][:min(self.limits.max_alternative, remaining)]

        if matches:
            mean_score = sum(m.match_score for m in matches) / len(matches)
            matching_confidence = round(min(mean_score * 1.2, 1.0), 2)
        else:
            matching_confidence = 0.0

        logger.debug(
            "Matched %s packages: %s primary, %s alternative",
            len(matches), len(primary), len(alternatives),
        )

        return MatchingResult(
            primary_matches=primary,
            alternative_matches=alternatives,
            all_matches=matches,
            total_services_evaluated=len(catalog),
            matching_confidence=matching_confidence,
        )

    def score_package(self, answers: dict[str, Any], package: ServicePackage) -> ServiceMatch:
        """Score a single package."""
        evaluators: list[tuple[str, float, Callable[[Any, ServicePackage], Evaluation]]] = [
            ("business_type", self.weights.business_type, self._score_business_type),
            ("company_size", self.weights.company_size, self._score_company_size),
            ("industry", self.weights.industry, self._score_industry),
            ("budget_range", self.weights.budget_range, self._score_budget),
            ("timeline", self.weights.timeline, self._score_timeline),
            ("primary_goals", self.weights.primary_goals, self._score_goals),
            ("complexity_level", self.weights.complexity_level, self._score_complexity),
        ]

        criteria = []
        reasons: list[str] = []
        for name, weight, evaluate in evaluators:
            value = answers.get(name)
            if is_answered(value):
                score, criterion_reasons = evaluate(value, package)
            else:
                score, criterion_reasons = NEUTRAL_SCORE, []
            reasons.extend(criterion_reasons)
            criteria.append(CriterionScore(
                criterion=name,
                weight=weight,
                score=score,
                weighted_score=round(score * weight, 4),
                reasons=criterion_reasons,
            ))

        total = round(min(1.0, max(0.0, sum(c.score * c.weight for c in criteria))), 2)
        confidence = self._determine_confidence(total, criteria)

        return ServiceMatch(
            service=package,
            match_score=total,
            match_reasons=reasons,
            confidence_level=confidence,
            recommendation_type=self._determine_recommendation_type(total, confidence),
            criteria=criteria,
        )

    # =========================================================================
    # Criterion evaluators
    # =========================================================================

    def _score_business_type(self, value: Any, package: ServicePackage) -> Evaluation:
        return self._score_industry_fit(
            value,
            package,
            exact="Specializes in {} businesses",
            related="Experience with businesses related to {}",
        )

    def _score_industry(self, value: Any, package: ServicePackage) -> Evaluation:
        return self._score_industry_fit(
            value,
            package,
            exact="Deep expertise in the {} industry",
            related="Experience in industries adjacent to {}",
        )

    def _score_industry_fit(
        self,
        value: Any,
        package: ServicePackage,
        exact: str,
        related: str,
    ) -> Evaluation:
        """Exact tag match > related industry > universal package > no fit."""
        text = answer_text(value)
        if text is None:
            return NEUTRAL_SCORE, []
        client = text.strip().lower()
        tags = [t.lower() for t in package.industry_tags]
        specific = [t for t in tags if t not in self.UNIVERSAL_TAGS]

        # Tags are looked up in the answer, never the answer inside a tag
        if any(tag in client for tag in specific):
            return 1.0, [exact.format(text.strip())]

        for canonical, synonyms in self.RELATED_INDUSTRIES.items():
            group = [canonical] + synonyms
            client_in_group = any(term in client for term in group)
            package_in_group = any(any(term in tag for term in group) for tag in specific)
            if client_in_group and package_in_group:
                return 0.7, [related.format(text.strip())]

        if any(tag in self.UNIVERSAL_TAGS for tag in tags):
            return 0.6, ["Applicable across all industries"]

        return 0.3, []

    def _score_company_size(self, value: Any, package: ServicePackage) -> Evaluation:
        size = answer_key(value)
        compatible = self.SIZE_TIERS.get(size or "", set())
        if package.tier in compatible:
            return 1.0, [f"Designed for {size} companies"]
        if package.tier == ServiceTier.GROWTH:
            return 0.7, ["Growth-tier package can be scaled to your size"]
        return 0.4, []

    def _score_budget(self, value: Any, package: ServicePackage) -> Evaluation:
        budget = answer_key(value)
        band = package.price_band.lower()
        acceptable = self.BUDGET_PRICE_BANDS.get(budget or "", [])
        if any(fragment in band for fragment in acceptable):
            return 1.0, [f"Fits your budget ({package.price_band})"]
        return 0.4, []

    def _score_timeline(self, value: Any, package: ServicePackage) -> Evaluation:
        client = (answer_text(value) or "").lower()
        service = package.timeline.lower()

        if any(word in client for word in self.URGENT_WORDS):
            if any(word in service for word in self.FAST_TIMELINE_WORDS):
                return 1.0, [f"Fast delivery ({package.timeline}) for your immediate needs"]
            return 0.3, []

        if "month" in client:
            if "month" in service or "week" in service:
                return 1.0, [f"Delivery timeline ({package.timeline}) fits your schedule"]
            return 0.7, []

        return 0.6, []

    def _score_goals(self, value: Any, package: ServicePackage) -> Evaluation:
        goals = answer_list(value)
        if not goals:
            return NEUTRAL_SCORE, []

        description = package.description.lower()
        features = [f.lower() for f in package.includes]
        matched = 0
        for goal in goals:
            needle = goal.strip().lower()
            if needle in description or any(needle in feature for feature in features):
                matched += 1

        if matched == 0:
            return 0.4, []
        score = min(matched / len(goals) * 1.2, 1.0)
        return score, [f"Addresses {matched} of your {len(goals)} primary goals"]

    def _score_complexity(self, value: Any, package: ServicePackage) -> Evaluation:
        level = answer_key(value)
        if package.tier in self.COMPLEXITY_TIERS.get(level or "", set()):
            return 1.0, [f"Suited to {level} project complexity"]
        return 0.5, []

    # =========================================================================
    # Classification
    # =========================================================================

    def _determine_confidence(self, total: float, criteria: list[CriterionScore]) -> ConfidenceLevel:
        covered = sum(1 for c in criteria if c.score > self.thresholds.covered_score_floor)
        ratio = covered / len(criteria) if criteria else 0.0

        if total >= self.thresholds.high_score_threshold and ratio >= self.thresholds.high_coverage_ratio:
            return ConfidenceLevel.HIGH
        if total >= self.thresholds.medium_score_threshold and ratio >= self.thresholds.medium_coverage_ratio:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW

    def _determine_recommendation_type(self, total: float, confidence: ConfidenceLevel) -> RecommendationType:
        if total >= self.thresholds.high_score_threshold and confidence == ConfidenceLevel.HIGH:
            return RecommendationType.PRIMARY
        if total >= self.thresholds.medium_score_threshold:
            return RecommendationType.ALTERNATIVE
        return RecommendationType.CONSIDER

    @staticmethod
    def _coerce_packages(packages: Any) -> list[ServicePackage]:
        if not isinstance(packages, (list, tuple)):
            raise InvalidInputError(
                f"Service packages must be a list, got {type(packages).__name__}"
            )
        result = []
        for i, package in enumerate(packages):
            if isinstance(package, ServicePackage):
                result.append(package)
            elif isinstance(package, dict):
                try:
                    result.append(ServicePackage.model_validate(package))
                except ValidationError as e:
                    raise InvalidInputError(
                        f"Service package at index {i} is invalid: {e}"
                    ) from e
            else:
                raise InvalidInputError(
                    f"Service package at index {i} must be a ServicePackage, got {type(package).__name__}"
                )
        return result
