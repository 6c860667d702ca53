"""Consultation Engine - per-submission orchestrator.

Runs one questionnaire submission through the pipeline:
  Response Analyzer  ─┐
                      ├─> Routing Decision Engine
  Service Matcher    ─┴─> Report Assembler (when a primary match exists)

The analyzer and matcher read the same answers and run concurrently.
Routing waits on the analyzer; the report waits on the matcher.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Union

from service_catalog.catalog import CatalogService

from .config import EngineConfig, get_config
from .matcher import ServiceMatcher
from .normalizer import answer_list, answer_text
from .report import ReportAssembler
from .response_analyzer import ResponseAnalyzer
from .routing import RoutingDecisionEngine
from .schema import (
    ClientInfo,
    ConsultationOutcome,
    InvalidInputError,
    QuestionnaireAnswers,
    coerce_answers,
)

logger = logging.getLogger(__name__)

Answers = Union[QuestionnaireAnswers, dict[str, Any]]


class ConsultationEngine:
    """Evaluates questionnaire submissions against a service catalog."""

    def __init__(
        self,
        catalog: Optional[CatalogService] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Initialize the engine.

        Args:
            catalog: Catalog service shared across submissions (seeded defaults if omitted)
            config: Engine configuration (process-wide config if omitted)
        """
        self.catalog = catalog if catalog is not None else CatalogService()
        self.config = config if config is not None else get_config()

        self.analyzer = ResponseAnalyzer(self.config)
        self.matcher = ServiceMatcher(self.config)
        self.router = RoutingDecisionEngine(self.config)
        self.assembler = ReportAssembler()

    def evaluate(
        self,
        answers: Answers,
        client_info: Union[ClientInfo, dict[str, Any], None] = None,
        max_results: Optional[int] = None,
    ) -> ConsultationOutcome:
        """Analyze, match, route and (when possible) report on one submission.

        Args:
            answers: Questionnaire answers
            client_info: Optional client details for the report header
            max_results: Budget for primary + alternative matches

        Returns:
            ConsultationOutcome; report is None when no package is a primary match
        """
        data = coerce_answers(answers)
        packages = list(self.catalog.packages())

        with ThreadPoolExecutor(max_workers=2) as executor:
            analysis_future = executor.submit(self.analyzer.analyze, data)
            matching_future = executor.submit(self.matcher.match, data, packages, max_results)
            analysis = analysis_future.result()
            matching = matching_future.result()

        routing = self.router.route(analysis.qualification_score, analysis.readiness.completeness)

        report = None
        if matching.primary_matches:
            client = self._client_from_answers(data, client_info)
            report = self.assembler.from_matching(client, matching)

        logger.debug(
            "Submission routed to %s (qualification=%s, completeness=%s, primary=%s)",
            routing.recommendation.value,
            analysis.qualification_score,
            analysis.readiness.completeness,
            len(matching.primary_matches),
        )

        return ConsultationOutcome(
            analysis=analysis,
            routing=routing,
            matching=matching,
            report=report,
        )

    def evaluate_batch(
        self,
        submissions: list[Answers],
        max_results: Optional[int] = None,
        max_workers: int = 4,
    ) -> list[ConsultationOutcome]:
        """Evaluate independent submissions in parallel, preserving order."""
        if not isinstance(submissions, (list, tuple)):
            raise InvalidInputError(
                f"Submissions must be a list, got {type(submissions).__name__}"
            )
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(
                lambda answers: self.evaluate(answers, max_results=max_results),
                submissions,
            ))

    @staticmethod
    def _client_from_answers(
        data: dict[str, Any],
        client_info: Union[ClientInfo, dict[str, Any], None],
    ) -> ClientInfo:
        """Fill business type and goals from the answers when not given."""
        if isinstance(client_info, ClientInfo):
            base = client_info.model_dump(exclude_unset=True)
        elif isinstance(client_info, dict):
            base = dict(client_info)
        elif client_info is None:
            base = {}
        else:
            raise InvalidInputError(
                f"Client info must be a mapping, got {type(client_info).__name__}"
            )

        if not base.get("business_type"):
            business = answer_text(data.get("business_type")) or answer_text(data.get("industry"))
            if business:
                base["business_type"] = business.strip()
        if not base.get("primary_goals"):
            base["primary_goals"] = answer_list(data.get("primary_goals"))

        return ClientInfo.model_validate(base)
