"""
Eligibility - Project Scorer.

Aggregates criterion results into a 0-100 score per project.
A project that fails to score degrades to 0 with every
criterion unmet; the other projects are unaffected.
"""

from typing import Iterable, List, Optional
import logging

from activity_insights import UserActivity
from core.numbers import round_half_up

from .checker import CriteriaChecker
from .config import EligibilityConfig, get_config
from .models import CriterionResult, EligibilityReport, Project


logger = logging.getLogger(__name__)


def calculate_criteria_percentage(results: Iterable[CriterionResult]) -> float:
    """Unrounded percentage of criteria met; 0 with no criteria."""
    results = list(results)
    if not results:
        return 0.0
    met = sum(1 for result in results if result.met)
    return met / len(results) * 100


class EligibilityScorer:
    """
    Scores projects against a wallet's activity snapshot.

    Usage:
        scorer = EligibilityScorer()
        reports = scorer.score_projects(projects, activity)
    """

    def __init__(
        self,
        checker: Optional[CriteriaChecker] = None,
        config: Optional[EligibilityConfig] = None,
    ):
        self._config = config or get_config()
        self._checker = checker or CriteriaChecker(self._config)

    @property
    def checker(self) -> CriteriaChecker:
        return self._checker

    def score_project(self, project: Project, activity: UserActivity) -> EligibilityReport:
        results = self._checker.check_all(project.criteria, activity)
        score = int(round_half_up(calculate_criteria_percentage(results)))

        if self._config.log_results:
            logger.info(
                f"Eligibility {project.project_id} for {activity.address}: "
                f"{sum(r.met for r in results)}/{len(results)} criteria, score={score}"
            )

        return EligibilityReport(
            project_id=project.project_id,
            name=project.name,
            status=project.status,
            score=score,
            criteria=results,
        )

    def score_projects(
        self,
        projects: Iterable[Project],
        activity: UserActivity,
    ) -> List[EligibilityReport]:
        """One report per project, in input order."""
        reports: List[EligibilityReport] = []
        for project in projects:
            try:
                reports.append(self.score_project(project, activity))
            except Exception as e:
                logger.warning(f"Scoring failed for project {project.project_id}: {e}")
                reports.append(EligibilityReport(
                    project_id=project.project_id,
                    name=project.name,
                    status=project.status,
                    score=0,
                    criteria=[
                        CriterionResult(description=c.description, met=False)
                        for c in project.criteria
                    ],
                ))
        return reports
