"""Routing Decision Engine - picks the next workflow step for a lead.

The decision table is evaluated top to bottom, so every
(qualification, completeness) pair lands in exactly one branch:

1. fast-track             qualification >= 80 and completeness >= 70
2. continue               qualification >= 60 and completeness >= 50
3. redirect-to-resources  qualification < 40 or completeness < 30
4. qualify-further        everything else
"""

from typing import Optional, Union

from .config import EngineConfig, get_config
from .schema import InvalidInputError, QuestionRoutingResult, RoutingRecommendation

Number = Union[int, float]


class RoutingDecisionEngine:
    """Maps qualification and completeness to a routing outcome."""

    REASONING = {
        RoutingRecommendation.FAST_TRACK: [
            "High qualification score indicates a strong business fit and budget alignment",
            "Responses are comprehensive enough for personalized recommendations",
        ],
        RoutingRecommendation.CONTINUE: [
            "Solid qualification score shows good potential for a successful engagement",
            "Responses provide enough detail to generate tailored recommendations",
        ],
        RoutingRecommendation.REDIRECT_TO_RESOURCES: [
            "Qualification or response completeness is below the threshold for a personalized consultation",
            "Self-service resources are the best starting point at this stage",
        ],
        RoutingRecommendation.QUALIFY_FURTHER: [
            "Moderate qualification score needs more information before recommending a plan",
            "Additional detail will clarify the right service level",
        ],
    }

    NEXT_STEPS = {
        RoutingRecommendation.FAST_TRACK: [
            "Schedule a priority strategy consultation",
            "Prepare a tailored proposal for growth or enterprise services",
        ],
        RoutingRecommendation.CONTINUE: [
            "Generate personalized service recommendations",
            "Book a discovery call to refine requirements",
        ],
        RoutingRecommendation.REDIRECT_TO_RESOURCES: [
            "Share self-service guides and planning templates",
            "Invite the lead to revisit the questionnaire when ready",
        ],
        RoutingRecommendation.QUALIFY_FURTHER: [
            "Send follow-up qualification questions",
            "Offer a short introductory call",
        ],
    }

    PLAN_RECOMMENDATIONS = {
        RoutingRecommendation.FAST_TRACK: ["enterprise", "growth"],
        RoutingRecommendation.CONTINUE: ["growth", "foundation", "strategic"],
        RoutingRecommendation.REDIRECT_TO_RESOURCES: ["foundation"],
        RoutingRecommendation.QUALIFY_FURTHER: ["foundation", "strategic"],
    }

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config if config is not None else get_config()
        self.thresholds = self.config.routing_thresholds

    def route(self, qualification: Number, completeness: Number) -> QuestionRoutingResult:
        """Choose the routing outcome.

        Args:
            qualification: Qualification score, 0-100
            completeness: Response completeness, 0-100

        Returns:
            QuestionRoutingResult with fixed score, reasoning and next steps
        """
        self._check_range("qualification", qualification)
        self._check_range("completeness", completeness)
        t = self.thresholds

        if qualification >= t.fast_track_qualification and completeness >= t.fast_track_completeness:
            return self._result(RoutingRecommendation.FAST_TRACK, t.fast_track_score)
        if qualification >= t.continue_qualification and completeness >= t.continue_completeness:
            return self._result(RoutingRecommendation.CONTINUE, t.continue_score)
        if qualification < t.redirect_qualification or completeness < t.redirect_completeness:
            return self._result(RoutingRecommendation.REDIRECT_TO_RESOURCES, t.redirect_score)
        return self._result(RoutingRecommendation.QUALIFY_FURTHER, t.qualify_further_score)

    def _result(self, recommendation: RoutingRecommendation, score: int) -> QuestionRoutingResult:
        return QuestionRoutingResult(
            recommendation=recommendation,
            score=score,
            reasoning=list(self.REASONING[recommendation]),
            next_steps=list(self.NEXT_STEPS[recommendation]),
            plan_recommendations=list(self.PLAN_RECOMMENDATIONS[recommendation]),
        )

    @staticmethod
    def _check_range(name: str, value: Number) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"{name} must be a number, got {type(value).__name__}")
        if not 0 <= value <= 100:
            raise InvalidInputError(f"{name} must be between 0 and 100, got {value}")
