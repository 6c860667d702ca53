"""Tests for the Report Assembler."""

import pytest
from pydantic import ValidationError

from consultation_engine.config import EngineConfig
from consultation_engine.matcher import ServiceMatcher
from consultation_engine.report import (
    DEFAULT_TIMELINE,
    GENERATOR_ID,
    TEMPLATE_VERSION,
    MissingPrimaryMatchError,
    ReportAssembler,
    estimate_read_time,
)
from consultation_engine.schema import (
    ClientInfo,
    ConsultationInput,
    InvalidInputError,
    MatchingResult,
    ReportSection,
)
from service_catalog.schema import ServicePackage


def make_package(package_id: str, **overrides) -> ServicePackage:
    data = {
        "id": package_id,
        "title": package_id.replace("-", " ").title(),
        "description": "Increase revenue through better customer acquisition",
        "category": "growth",
        "tier": "growth",
        "price_band": "$15k - $25k",
        "timeline": "1-3 months",
        "includes": ["Growth strategy", "Sales process", "Automation", "Reviews"],
        "industry_tags": ["technology", "saas"],
    }
    data.update(overrides)
    return ServicePackage.model_validate(data)


ANSWERS = {
    "business_type": "SaaS",
    "company_size": "medium",
    "industry": "technology",
    "budget_range": "15k-50k",
    "timeline": "1-3 months",
    "primary_goals": ["Increase revenue", "Customer acquisition"],
    "complexity_level": "moderate",
}


@pytest.fixture
def assembler():
    return ReportAssembler()


@pytest.fixture
def matching():
    """One primary match and one alternative."""
    packages = [
        make_package("saas-growth"),
        make_package(
            "enterprise-advisory",
            tier="enterprise",
            description="Senior advisory for leadership teams",
            industry_tags=["universal"],
            price_band="$50k - $100k",
        ),
    ]
    return ServiceMatcher(EngineConfig()).match({**ANSWERS, "budget_range": None}, packages)


@pytest.fixture
def client():
    return ClientInfo(
        name="Jane Doe",
        company="Acme Analytics",
        business_type="SaaS",
        primary_goals=["Increase revenue", "Customer acquisition"],
    )


class TestFromMatching:
    """Reports built from a MatchingResult."""

    def test_report_structure(self, assembler, client, matching):
        report = assembler.from_matching(client, matching)
        assert report.title == "Business Consultation Report for Acme Analytics"
        assert [s.title for s in report.sections] == [
            "Assessment Summary",
            "Matching Analysis",
            "Primary Recommendation",
            "Alternative Options",
        ]
        assert report.recommendations.primary.id == "saas-growth"
        assert [a.id for a in report.recommendations.alternatives] == ["enterprise-advisory"]
        assert report.client_info.name == "Jane Doe"

    def test_executive_summary(self, assembler, client, matching):
        report = assembler.from_matching(client, matching)
        score = round(matching.primary_matches[0].match_score * 100)
        assert report.executive_summary == (
            "Based on your SaaS business and your focus on increase revenue, customer acquisition, "
            f"we recommend Saas Growth with {score}% confidence. "
            "Increase revenue through better customer acquisition"
        )

    def test_metadata(self, assembler, client, matching):
        report = assembler.from_matching(client, matching)
        assert report.metadata.generator == GENERATOR_ID
        assert report.metadata.template_version == TEMPLATE_VERSION
        assert report.metadata.consultation_score == round(matching.primary_matches[0].match_score * 100)
        assert report.metadata.estimated_read_time == estimate_read_time(report.sections)
        assert report.metadata.estimated_read_time >= 1

    def test_roadmap(self, assembler, client, matching):
        roadmap = assembler.from_matching(client, matching).implementation_roadmap
        assert roadmap.timeline == "1-3 months"
        assert [p.phase for p in roadmap.phases] == [1, 2, 3]
        assert all(p.milestones for p in roadmap.phases)

    def test_default_next_steps(self, assembler, client, matching):
        report = assembler.from_matching(client, matching)
        assert report.next_steps == ReportAssembler.DEFAULT_NEXT_STEPS

    def test_default_client(self, assembler, matching):
        report = assembler.from_matching(None, matching)
        assert report.title == "Business Consultation Report for Valued Client"
        assert report.executive_summary.startswith(
            "Based on your growing business and your focus on your stated objectives"
        )

    def test_client_from_dict(self, assembler, matching):
        report = assembler.from_matching({"name": "Sam"}, matching)
        assert report.title == "Business Consultation Report for Sam"

    def test_missing_primary(self, assembler, client):
        with pytest.raises(MissingPrimaryMatchError):
            assembler.from_matching(client, MatchingResult())

    def test_rejects_wrong_type(self, assembler, client):
        with pytest.raises(InvalidInputError):
            assembler.from_matching(client, {"primary_matches": []})

    def test_report_is_immutable(self, assembler, client, matching):
        report = assembler.from_matching(client, matching)
        with pytest.raises(ValidationError):
            report.title = "Edited"


class TestFromConsultation:
    """Reports built from a pre-generated consultation."""

    @pytest.fixture
    def consultation(self, client):
        return ConsultationInput(
            client=client,
            primary_service=make_package("saas-growth"),
            alternative_services=[make_package("ops-sprint", title="Ops Sprint")],
            key_insights=[
                "Strong product-market fit",
                "Sales cycle is long",
                "Churn is under control",
                "Pricing is below market",
            ],
            action_items=["Book a growth session"],
            confidence_score=0.87,
        )

    def test_report_structure(self, assembler, consultation):
        report = assembler.from_consultation(consultation)
        assert [s.title for s in report.sections] == [
            "Business Analysis",
            "Key Insights",
            "Recommendations",
            "Implementation Approach",
            "Expected Outcomes",
        ]
        assert report.metadata.consultation_score == 87
        assert report.next_steps == ["Book a growth session"]
        assert report.recommendations.reasoning == consultation.key_insights[:3]
        assert [a.title for a in report.recommendations.alternatives] == ["Ops Sprint"]

    def test_recommendations_section_lists_alternatives(self, assembler, consultation):
        report = assembler.from_consultation(consultation)
        body = next(s.content for s in report.sections if s.title == "Recommendations")
        assert "Saas Growth" in body
        assert "- Ops Sprint ($15k - $25k)" in body

    def test_analysis_summary_used_when_given(self, assembler, consultation):
        consultation = consultation.model_copy(update={"analysis_summary": "Acme is ready to scale."})
        report = assembler.from_consultation(consultation)
        assert report.sections[0].content == "Acme is ready to scale."

    def test_default_timeline(self, assembler, client):
        consultation = ConsultationInput(
            client=client,
            primary_service=make_package("open-ended", timeline=""),
        )
        report = assembler.from_consultation(consultation)
        assert report.implementation_roadmap.timeline == DEFAULT_TIMELINE

    def test_missing_primary(self, assembler, client):
        with pytest.raises(MissingPrimaryMatchError):
            assembler.from_consultation(ConsultationInput(client=client))

    def test_rejects_wrong_type(self, assembler):
        with pytest.raises(InvalidInputError):
            assembler.from_consultation({"client": {}})


class TestReadTime:
    """Read time at 200 words per minute, rounded up."""

    def test_exact_minutes(self):
        sections = [ReportSection(title="Summary", content=" ".join(["word"] * 399))]
        assert estimate_read_time(sections) == 2

    def test_rounds_up(self):
        sections = [ReportSection(title="Summary", content=" ".join(["word"] * 400))]
        assert estimate_read_time(sections) == 3

    def test_no_sections(self):
        assert estimate_read_time([]) == 0
