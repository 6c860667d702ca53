"""Tests for the Response Analyzer.

Covers the three quality signals (completeness, depth, consistency), the
blended readiness score and the separate qualification score.
"""

import pytest

from consultation_engine.config import EngineConfig
from consultation_engine.response_analyzer import ResponseAnalyzer
from consultation_engine.schema import InvalidInputError, QualityBand, QuestionnaireAnswers


@pytest.fixture
def analyzer():
    return ResponseAnalyzer(EngineConfig())


@pytest.fixture
def strong_answers():
    """A complete, consistent submission from a mid-sized technology company."""
    return {
        "business_type": "technology",
        "company_size": "medium",
        "annual_revenue": "1M-5M",
        "budget_range": "15k-50k",
        "timeline": "1-3 months",
        "primary_goals": ["Increase revenue", "Customer acquisition", "Automation"],
    }


class TestCompleteness:
    """Percentage of keys that carry an answer."""

    def test_all_answered(self, analyzer, strong_answers):
        assert analyzer.calculate_completeness(strong_answers) == 100

    def test_empty_answers(self, analyzer):
        assert analyzer.calculate_completeness({}) == 0

    def test_partial(self, analyzer):
        answers = {"a": "yes", "b": "", "c": None, "d": []}
        assert analyzer.calculate_completeness(answers) == 25

    def test_whitespace_is_unanswered(self, analyzer):
        assert analyzer.calculate_completeness({"a": "   ", "b": "yes"}) == 50

    def test_list_of_blank_items_is_unanswered(self, analyzer):
        answers = {"budget_range": "100k+", "primary_goals": ["", "  "]}
        assert analyzer.calculate_completeness(answers) == 50

    def test_rounding(self, analyzer):
        assert analyzer.calculate_completeness({"a": "x", "b": "y", "c": ""}) == 67


class TestDepth:
    """Richness of answers, up to 10 points per key."""

    @pytest.mark.parametrize("value,points", [
        ("x" * 200, 10),
        ("x" * 100, 8),
        ("x" * 50, 6),
        ("x" * 20, 4),
        ("short", 2),
        (["a", "b", "c"], 10),
        (["a", "b"], 7),
        (["a"], 5),
        (42, 5),
    ])
    def test_points_per_answer(self, analyzer, value, points):
        assert analyzer.calculate_depth({"q": value}) == points * 10

    def test_unanswered_keys_count_towards_possible(self, analyzer):
        answers = {"a": "x" * 200, "b": ["one", "two"], "c": ""}
        # (10 + 7) / 30
        assert analyzer.calculate_depth(answers) == 57

    def test_empty_answers(self, analyzer):
        assert analyzer.calculate_depth({}) == 0

    def test_blank_list_items_ignored(self, analyzer):
        assert analyzer.calculate_depth({"q": ["a", " "]}) == 50
        # Only the short budget string earns points: 2 out of 20
        assert analyzer.calculate_depth({"budget_range": "100k+", "primary_goals": ["", "  "]}) == 10

    def test_short_answers(self, analyzer, strong_answers):
        # Five short strings (2 each) and a three-item list (10) out of 60
        assert analyzer.calculate_depth(strong_answers) == 33


class TestConsistency:
    """Baseline of 80 minus penalties for contradictory answers."""

    def test_baseline_when_empty(self, analyzer):
        assert analyzer.calculate_consistency({}) == 80

    def test_consistent_answers(self, analyzer, strong_answers):
        assert analyzer.calculate_consistency(strong_answers) == 80

    def test_bootstrap_budget_with_large_revenue_and_urgency(self, analyzer):
        answers = {
            "budget_range": "bootstrap",
            "annual_revenue": "10M+",
            "company_size": "enterprise",
            "timeline": "immediate",
        }
        # -20 budget/revenue, -10 urgent with bootstrap budget
        assert analyzer.calculate_consistency(answers) == 50

    def test_high_budget_without_revenue_and_no_urgency(self, analyzer):
        answers = {
            "budget_range": "100k+",
            "annual_revenue": "pre-revenue",
            "company_size": "solo",
            "timeline": "flexible",
        }
        # -20 budget/revenue, -5 relaxed timeline with high budget
        assert analyzer.calculate_consistency(answers) == 55

    def test_near_mismatch_penalties(self, analyzer):
        answers = {
            "budget_range": "5k-15k",
            "annual_revenue": "1M-5M",
            "company_size": "small",
        }
        # -10 budget/revenue at distance 2, -8 size/revenue at distance 2
        assert analyzer.calculate_consistency(answers) == 62

    def test_unrecognized_values_are_skipped(self, analyzer):
        answers = {"budget_range": "lots of money", "annual_revenue": "10M+"}
        assert analyzer.calculate_consistency(answers) == 80

    def test_score_stays_in_range(self, analyzer):
        answers = {
            "budget_range": "bootstrap",
            "annual_revenue": "10m+",
            "company_size": "solo",
            "timeline": "asap",
        }
        assert 0 <= analyzer.calculate_consistency(answers) <= 100


class TestReadiness:
    """Blended readiness score, band and improvement advice."""

    def test_strong_but_terse_answers(self, analyzer, strong_answers):
        readiness = analyzer.assess_readiness(strong_answers)
        # round(100 * .4 + 33 * .4 + 80 * .2)
        assert readiness.score == 69
        assert readiness.quality == QualityBand.FAIR
        assert readiness.completeness == 100
        assert readiness.depth == 33
        assert readiness.consistency == 80
        assert readiness.recommendations == [ResponseAnalyzer.IMPROVEMENT_MESSAGES["depth"]]

    def test_empty_answers(self, analyzer):
        readiness = analyzer.assess_readiness({})
        assert readiness.score == 16
        assert readiness.quality == QualityBand.POOR
        assert readiness.recommendations == [
            ResponseAnalyzer.IMPROVEMENT_MESSAGES["completeness"],
            ResponseAnalyzer.IMPROVEMENT_MESSAGES["depth"],
        ]

    def test_detailed_answers_are_ready(self, analyzer):
        readiness = analyzer.assess_readiness({"a": "x" * 200, "b": "y" * 200})
        assert readiness.score == 96
        assert readiness.quality == QualityBand.EXCELLENT
        assert readiness.recommendations == [ResponseAnalyzer.READY_MESSAGE]

    def test_weakest_component_first(self, analyzer):
        answers = {"a": "x" * 50, "b": "", "c": "y" * 50, "d": "z" * 50}
        readiness = analyzer.assess_readiness(answers)
        # completeness 75, depth 45
        assert readiness.completeness == 75
        assert readiness.depth == 45
        assert readiness.recommendations == [ResponseAnalyzer.IMPROVEMENT_MESSAGES["depth"]]

    @pytest.mark.parametrize("score,band", [
        (85, QualityBand.EXCELLENT),
        (84, QualityBand.GOOD),
        (70, QualityBand.GOOD),
        (69, QualityBand.FAIR),
        (50, QualityBand.FAIR),
        (49, QualityBand.POOR),
        (0, QualityBand.POOR),
    ])
    def test_quality_bands(self, analyzer, score, band):
        assert analyzer._quality_band(score) == band


class TestQualification:
    """Business-value score over answered fields only."""

    def test_strong_answers(self, analyzer, strong_answers):
        # 20 budget + 20 revenue + 15 timeline + 12 size + 6 goals out of 100
        assert analyzer.calculate_qualification_score(strong_answers) == 73

    def test_empty_answers(self, analyzer):
        assert analyzer.calculate_qualification_score({}) == 0

    def test_absent_fields_excluded(self, analyzer):
        assert analyzer.calculate_qualification_score({"budget_range": "100k+"}) == 100

    def test_blank_goal_list_excluded(self, analyzer):
        answers = {"budget_range": "100k+", "primary_goals": ["", "  "]}
        assert analyzer.calculate_qualification_score(answers) == 100

    def test_unrecognized_value_scores_zero_but_counts(self, analyzer):
        answers = {"budget_range": "lots of money", "company_size": "large"}
        # 15 out of 30 + 15
        assert analyzer.calculate_qualification_score(answers) == 33

    def test_low_urgency_timeline(self, analyzer):
        assert analyzer.calculate_qualification_score({"timeline": "exploring"}) == 10

    def test_goal_points_are_capped(self, analyzer):
        goals = [
            "Increase revenue",
            "Scale operations",
            "Digital transformation",
            "Market expansion",
            "Improve efficiency",
            "Customer acquisition",
        ]
        assert analyzer.calculate_qualification_score({"primary_goals": goals}) == 100

    def test_goals_without_business_value(self, analyzer):
        assert analyzer.calculate_qualification_score({"primary_goals": ["Hire staff"]}) == 0

    def test_unknown_keys_ignored(self, analyzer):
        answers = {"favorite_color": "blue", "budget_range": "5k-15k"}
        assert analyzer.calculate_qualification_score(answers) == 40


class TestAnalyze:
    """Full analysis entry point."""

    def test_combines_readiness_and_qualification(self, analyzer, strong_answers):
        analysis = analyzer.analyze(strong_answers)
        assert analysis.readiness.score == 69
        assert analysis.qualification_score == 73

    def test_accepts_questionnaire_model(self, analyzer):
        answers = QuestionnaireAnswers(budget_range="100k+", notes="Expanding to two new regions")
        analysis = analyzer.analyze(answers)
        assert analysis.readiness.completeness == 100
        assert analysis.qualification_score == 100

    @pytest.mark.parametrize("bad", ["budget", ["budget_range"], None, 42])
    def test_rejects_non_mapping(self, analyzer, bad):
        with pytest.raises(InvalidInputError):
            analyzer.analyze(bad)
