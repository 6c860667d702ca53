"""Report Assembler - turns matches into a consultation report.

Builds the final, titled report from either a pre-generated consultation
or a raw MatchingResult. Every section body is filled from fixed
templates; nothing here generates free text.

Callers must supply a primary recommendation. A report without one is a
contract violation upstream and fails immediately.
"""

import math
from typing import Any, Optional, Union

from service_catalog.schema import ServicePackage

from .schema import (
    ClientInfo,
    ConsultationInput,
    ConsultationReport,
    ImplementationRoadmap,
    InvalidInputError,
    MatchingResult,
    ReportMetadata,
    ReportRecommendations,
    ReportSection,
    RoadmapPhase,
)

GENERATOR_ID = "consultation-engine"
TEMPLATE_VERSION = "1.0.0"
DEFAULT_TIMELINE = "8-12 weeks"
WORDS_PER_MINUTE = 200

ClientLike = Union[ClientInfo, dict[str, Any], None]


class MissingPrimaryMatchError(ValueError):
    """Raised when a report is requested without a primary recommendation."""


class ReportAssembler:
    """Assembles consultation reports.

    Two entry points:
    - from_consultation: a rich consultation with insights and action items
    - from_matching: client data plus a MatchingResult (quick path)
    """

    ROADMAP_PHASES = [
        (
            "Discovery & Planning",
            "Confirm objectives, baseline current performance and agree success metrics",
            [
                "Kickoff workshop completed",
                "Current-state assessment delivered",
                "Success metrics agreed",
            ],
        ),
        (
            "Implementation",
            "Deliver the core engagement work in prioritized increments",
            [
                "Priority initiatives launched",
                "Processes and tooling in place",
                "Progress review with stakeholders",
            ],
        ),
        (
            "Optimization & Growth",
            "Measure results, refine what works and plan the next stage",
            [
                "Results measured against baseline",
                "Optimization recommendations delivered",
                "Long-term growth plan agreed",
            ],
        ),
    ]

    DEFAULT_NEXT_STEPS = [
        "Review this report with your leadership team",
        "Schedule a follow-up call to discuss the recommended package",
    ]

    def from_consultation(self, consultation: ConsultationInput) -> ConsultationReport:
        """Build a report from a pre-generated consultation."""
        if not isinstance(consultation, ConsultationInput):
            raise InvalidInputError(
                f"Expected a ConsultationInput, got {type(consultation).__name__}"
            )
        primary = consultation.primary_service
        if primary is None:
            raise MissingPrimaryMatchError("Consultation has no primary service to report on")

        client = consultation.client
        confidence_pct = round(consultation.confidence_score * 100)
        alternatives = list(consultation.alternative_services)
        timeline = primary.timeline or DEFAULT_TIMELINE

        sections = [
            ReportSection(
                title="Business Analysis",
                content=consultation.analysis_summary or self._business_analysis(client),
            ),
            ReportSection(
                title="Key Insights",
                content=self._bullets(consultation.key_insights)
                or "No additional insights were recorded for this consultation.",
            ),
            ReportSection(
                title="Recommendations",
                content=self._recommendation_body(primary, alternatives),
            ),
            ReportSection(
                title="Implementation Approach",
                content=(
                    f"The engagement runs over {timeline} in three phases. Discovery and "
                    f"planning confirms priorities, implementation delivers the core work, "
                    f"and a final optimization phase measures results and plans what comes next."
                ),
            ),
            ReportSection(
                title="Expected Outcomes",
                content=self._outcomes_body(primary),
            ),
        ]

        reasoning = list(consultation.key_insights[:3]) or [
            f"{primary.title} best matches your business profile and goals"
        ]

        return self._build(
            client=client,
            primary=primary,
            alternatives=alternatives,
            reasoning=reasoning,
            sections=sections,
            confidence_pct=confidence_pct,
            next_steps=list(consultation.action_items) or self._package_next_steps(primary),
        )

    def from_matching(self, client: ClientLike, matching: MatchingResult) -> ConsultationReport:
        """Build a report from client data and a matching result."""
        if not isinstance(matching, MatchingResult):
            raise InvalidInputError(f"Expected a MatchingResult, got {type(matching).__name__}")
        if not matching.primary_matches:
            raise MissingPrimaryMatchError(
                "Matching result has no primary match; route the lead before requesting a report"
            )

        client_info = self._coerce_client(client)
        top = matching.primary_matches[0]
        primary = top.service
        alternatives = [m.service for m in matching.alternative_matches]
        confidence_pct = round(top.match_score * 100)

        sections = [
            ReportSection(
                title="Assessment Summary",
                content=(
                    f"We evaluated {matching.total_services_evaluated} service packages against "
                    f"your questionnaire responses. Overall matching confidence is "
                    f"{round(matching.matching_confidence * 100)}%, with "
                    f"{len(matching.primary_matches)} strong match(es) identified."
                ),
            ),
            ReportSection(
                title="Matching Analysis",
                content=(
                    f"{primary.title} scored {confidence_pct}% with "
                    f"{top.confidence_level.value} confidence.\n"
                    + (self._bullets(top.match_reasons) or "- Best overall fit across your responses")
                ),
            ),
            ReportSection(
                title="Primary Recommendation",
                content=self._recommendation_body(primary, []),
            ),
            ReportSection(
                title="Alternative Options",
                content=self._bullets(
                    f"{m.service.title} ({round(m.match_score * 100)}% match, {m.service.price_band})"
                    for m in matching.alternative_matches
                ) or "No alternative packages met the matching threshold.",
            ),
        ]

        return self._build(
            client=client_info,
            primary=primary,
            alternatives=alternatives,
            reasoning=list(top.match_reasons) or [f"{primary.title} is the strongest overall match"],
            sections=sections,
            confidence_pct=confidence_pct,
            next_steps=self._package_next_steps(primary),
        )

    # =========================================================================
    # Shared assembly
    # =========================================================================

    def _build(
        self,
        client: ClientInfo,
        primary: ServicePackage,
        alternatives: list[ServicePackage],
        reasoning: list[str],
        sections: list[ReportSection],
        confidence_pct: int,
        next_steps: list[str],
    ) -> ConsultationReport:
        return ConsultationReport(
            title=f"Business Consultation Report for {client.company or client.name}",
            client_info=client,
            executive_summary=self._executive_summary(client, primary, confidence_pct),
            sections=sections,
            recommendations=ReportRecommendations(
                primary=primary,
                alternatives=alternatives,
                reasoning=reasoning,
            ),
            implementation_roadmap=self._roadmap(primary),
            next_steps=next_steps,
            metadata=ReportMetadata(
                generator=GENERATOR_ID,
                template_version=TEMPLATE_VERSION,
                consultation_score=confidence_pct,
                estimated_read_time=estimate_read_time(sections),
            ),
        )

    def _executive_summary(self, client: ClientInfo, primary: ServicePackage, confidence_pct: int) -> str:
        business = client.business_type or "growing"
        goals = ", ".join(g.lower() for g in client.primary_goals) or "your stated objectives"
        return (
            f"Based on your {business} business and your focus on {goals}, we recommend "
            f"{primary.title} with {confidence_pct}% confidence. {primary.description}"
        )

    def _roadmap(self, primary: ServicePackage) -> ImplementationRoadmap:
        phases = [
            RoadmapPhase(phase=i, title=title, focus=focus, milestones=list(milestones))
            for i, (title, focus, milestones) in enumerate(self.ROADMAP_PHASES, start=1)
        ]
        return ImplementationRoadmap(timeline=primary.timeline or DEFAULT_TIMELINE, phases=phases)

    def _business_analysis(self, client: ClientInfo) -> str:
        who = client.company or client.name
        business = client.business_type or "growing"
        goals = ", ".join(g.lower() for g in client.primary_goals) or "improving overall performance"
        return (
            f"{who} is a {business} business whose priorities are {goals}. The recommendations "
            f"below focus on the engagements most likely to move those priorities forward."
        )

    def _recommendation_body(self, primary: ServicePackage, alternatives: list[ServicePackage]) -> str:
        lines = [
            f"We recommend {primary.title} ({primary.price_band}, {primary.timeline}).",
            primary.description,
        ]
        if primary.content.why_this_fits:
            lines.append(primary.content.why_this_fits)
        if alternatives:
            lines.append("Alternatives worth considering:")
            lines.append(self._bullets(f"{a.title} ({a.price_band})" for a in alternatives))
        return "\n".join(lines)

    def _outcomes_body(self, primary: ServicePackage) -> str:
        lines = []
        if primary.content.what_you_get:
            lines.append(primary.content.what_you_get)
        if primary.includes:
            lines.append("Deliverables include:")
            lines.append(self._bullets(primary.includes))
        return "\n".join(lines) or f"Outcomes are defined during {primary.title} discovery."

    def _package_next_steps(self, primary: ServicePackage) -> list[str]:
        return list(primary.content.next_steps) or list(self.DEFAULT_NEXT_STEPS)

    @staticmethod
    def _bullets(items) -> str:
        return "\n".join(f"- {item}" for item in items)

    @staticmethod
    def _coerce_client(client: ClientLike) -> ClientInfo:
        if client is None:
            return ClientInfo()
        if isinstance(client, ClientInfo):
            return client
        if isinstance(client, dict):
            return ClientInfo.model_validate(client)
        raise InvalidInputError(f"Client info must be a mapping, got {type(client).__name__}")


def estimate_read_time(sections: list[ReportSection]) -> int:
    """Minutes to read all section titles and bodies at 200 words per minute."""
    words = sum(len(s.title.split()) + len(s.content.split()) for s in sections)
    return math.ceil(words / WORDS_PER_MINUTE)
