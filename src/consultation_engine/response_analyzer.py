"""Response Analyzer - quality and qualification signals for answers.

Derives three orthogonal quality signals from a questionnaire submission
(completeness, depth, consistency), blends them into a readiness score,
and separately estimates the lead's business value (qualification).

All methods are pure functions of the answers; an empty submission
scores zero everywhere except consistency, which starts at its baseline.
"""

from typing import Any, Optional, Union

from .config import EngineConfig, get_config
from .normalizer import (
    BUDGET_TIERS,
    COMPANY_SIZE_TIERS,
    IMMEDIATE_TIMELINES,
    LOW_URGENCY_TIMELINES,
    REVENUE_TIERS,
    answer_key,
    answer_list,
    is_answered,
    lookup_tier,
)
from .schema import (
    AIReadinessResult,
    QualityBand,
    QuestionnaireAnswers,
    ResponseAnalysis,
    coerce_answers,
)

Answers = Union[QuestionnaireAnswers, dict[str, Any]]


class ResponseAnalyzer:
    """Scores the quality of questionnaire answers and the lead behind them."""

    CONSISTENCY_BASELINE = 80

    # (field, field, penalty at distance >= 3, penalty at distance 2)
    TIER_CONFLICTS = [
        ("budget_range", BUDGET_TIERS, "annual_revenue", REVENUE_TIERS, 20, 10),
        ("company_size", COMPANY_SIZE_TIERS, "annual_revenue", REVENUE_TIERS, 15, 8),
    ]
    URGENT_BOOTSTRAP_PENALTY = 10
    RELAXED_HIGH_BUDGET_PENALTY = 5

    QUALITY_BANDS = [
        (85, QualityBand.EXCELLENT),
        (70, QualityBand.GOOD),
        (50, QualityBand.FAIR),
        (0, QualityBand.POOR),
    ]

    IMPROVEMENT_MESSAGES = {
        "completeness": "Answer the remaining questions so recommendations cover your whole business.",
        "depth": "Add more detail to open-ended answers, such as specific challenges and desired outcomes.",
        "consistency": "Review your budget, revenue and company size answers; some of them appear to conflict.",
    }
    READY_MESSAGE = "Your responses are detailed enough for high-confidence recommendations."
    IMPROVEMENT_THRESHOLD = 70

    # Qualification points by ordinal tier
    BUDGET_POINTS = [5, 12, 20, 25, 30]
    REVENUE_POINTS = [3, 8, 14, 20, 25]
    SIZE_POINTS = {
        "solo": 3,
        "startup": 6,
        "small": 8,
        "medium": 12,
        "large": 15,
        "enterprise": 15,
    }
    TIMELINE_POINTS = {
        "immediate": 20,
        "immediately": 20,
        "urgent": 20,
        "asap": 20,
        "1-month": 18,
        "within-a-month": 18,
        "1-3-months": 15,
        "3-6-months": 10,
        "6-months+": 5,
        "6-months-plus": 5,
        "flexible": 5,
        "exploring": 2,
    }
    HIGH_VALUE_GOALS = [
        "increase revenue",
        "scale operations",
        "digital transformation",
        "market expansion",
        "improve efficiency",
        "customer acquisition",
        "automation",
        "growth",
    ]
    MAX_POINTS = {
        "budget_range": 30,
        "annual_revenue": 25,
        "timeline": 20,
        "company_size": 15,
        "primary_goals": 10,
    }
    POINTS_PER_GOAL = 2

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config if config is not None else get_config()

    def analyze(self, answers: Answers) -> ResponseAnalysis:
        """Readiness and qualification for one submission."""
        data = coerce_answers(answers)
        return ResponseAnalysis(
            readiness=self.assess_readiness(data),
            qualification_score=self.calculate_qualification_score(data),
        )

    # =========================================================================
    # Quality signals
    # =========================================================================

    def calculate_completeness(self, answers: Answers) -> int:
        """Percentage of question keys that carry an answer."""
        data = coerce_answers(answers)
        if not data:
            return 0
        answered = sum(1 for value in data.values() if is_answered(value))
        return round(answered / len(data) * 100)

    def calculate_depth(self, answers: Answers) -> int:
        """Answer richness, up to 10 points per question key."""
        data = coerce_answers(answers)
        if not data:
            return 0
        earned = sum(self._depth_points(value) for value in data.values() if is_answered(value))
        possible = len(data) * 10
        return round(earned / possible * 100)

    def calculate_consistency(self, answers: Answers) -> int:
        """Start from the baseline and deduct for contradictory answers."""
        data = coerce_answers(answers)
        score = self.CONSISTENCY_BASELINE

        for field_a, table_a, field_b, table_b, far_penalty, near_penalty in self.TIER_CONFLICTS:
            tier_a = lookup_tier(data.get(field_a), table_a)
            tier_b = lookup_tier(data.get(field_b), table_b)
            if tier_a is None or tier_b is None:
                continue
            distance = abs(tier_a - tier_b)
            if distance >= 3:
                score -= far_penalty
            elif distance == 2:
                score -= near_penalty

        timeline = answer_key(data.get("timeline"))
        budget_tier = lookup_tier(data.get("budget_range"), BUDGET_TIERS)
        if budget_tier is not None and timeline is not None:
            if timeline in IMMEDIATE_TIMELINES and budget_tier == 0:
                score -= self.URGENT_BOOTSTRAP_PENALTY
            if timeline in LOW_URGENCY_TIMELINES and budget_tier >= 3:
                score -= self.RELAXED_HIGH_BUDGET_PENALTY

        return max(0, min(100, score))

    def assess_readiness(self, answers: Answers) -> AIReadinessResult:
        """Blend the quality signals into a readiness score and band."""
        data = coerce_answers(answers)
        completeness = self.calculate_completeness(data)
        depth = self.calculate_depth(data)
        consistency = self.calculate_consistency(data)

        weights = self.config.readiness_weights
        score = round(
            completeness * weights.completeness
            + depth * weights.depth
            + consistency * weights.consistency
        )

        return AIReadinessResult(
            score=score,
            quality=self._quality_band(score),
            completeness=completeness,
            depth=depth,
            consistency=consistency,
            recommendations=self._improvement_recommendations(
                {"completeness": completeness, "depth": depth, "consistency": consistency}
            ),
        )

    # =========================================================================
    # Qualification
    # =========================================================================

    def calculate_qualification_score(self, answers: Answers) -> int:
        """Business-value score over the fields the client actually answered.

        Absent fields are dropped from both earned and possible points, so a
        short but strong submission can still qualify.
        """
        data = coerce_answers(answers)
        earned = 0
        possible = 0

        for field, max_points in self.MAX_POINTS.items():
            value = data.get(field)
            if not is_answered(value):
                continue
            possible += max_points
            earned += self._qualification_points(field, value)

        if possible == 0:
            return 0
        return round(earned / possible * 100)

    def _qualification_points(self, field: str, value: Any) -> int:
        if field == "budget_range":
            tier = lookup_tier(value, BUDGET_TIERS)
            return self.BUDGET_POINTS[tier] if tier is not None else 0
        if field == "annual_revenue":
            tier = lookup_tier(value, REVENUE_TIERS)
            return self.REVENUE_POINTS[tier] if tier is not None else 0
        if field == "timeline":
            return self.TIMELINE_POINTS.get(answer_key(value) or "", 0)
        if field == "company_size":
            return self.SIZE_POINTS.get(answer_key(value) or "", 0)
        if field == "primary_goals":
            aligned = sum(1 for goal in answer_list(value) if self._is_high_value_goal(goal))
            return min(aligned * self.POINTS_PER_GOAL, self.MAX_POINTS["primary_goals"])
        return 0

    def _is_high_value_goal(self, goal: str) -> bool:
        goal_lower = goal.strip().lower()
        return any(hv in goal_lower for hv in self.HIGH_VALUE_GOALS)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _depth_points(value: Any) -> int:
        if isinstance(value, (list, tuple)):
            items = sum(1 for item in value if is_answered(item))
            if items >= 3:
                return 10
            if items >= 2:
                return 7
            return 5
        if isinstance(value, str):
            length = len(value.strip())
            if length >= 200:
                return 10
            if length >= 100:
                return 8
            if length >= 50:
                return 6
            if length >= 20:
                return 4
            return 2
        return 5

    def _quality_band(self, score: int) -> QualityBand:
        for minimum, band in self.QUALITY_BANDS:
            if score >= minimum:
                return band
        return QualityBand.POOR

    def _improvement_recommendations(self, components: dict[str, int]) -> list[str]:
        """Advice for each weak component, weakest first."""
        weak = sorted(
            (name for name, value in components.items() if value < self.IMPROVEMENT_THRESHOLD),
            key=lambda name: components[name],
        )
        if not weak:
            return [self.READY_MESSAGE]
        return [self.IMPROVEMENT_MESSAGES[name] for name in weak]
