"""Validation engine: runs the registered checks and builds the report.

The checks are independent pure functions over a read-only dataset, so
they are fanned out on a thread pool. Results are collected once per
check, then folded into the report sorted by check name so identical input
always yields the same issue order.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Optional, Tuple

from ..models.options import EngineOptions, TraverseOptions
from ..models.point import SurveyData
from ..results.validation_report import Severity, ValidationIssue, ValidationReport
from ..solver.bowditch import MIN_TRAVERSE_POINTS, adjust_traverse_bowditch
from . import checks

logger = logging.getLogger(__name__)

ValidationCheck = Callable[[SurveyData], List[ValidationIssue]]

BOWDITCH_ADJUSTMENT = "bowditch_adjustment"

DEFAULT_CHECKS: Dict[str, ValidationCheck] = {
    checks.INPUT_VALIDATION: checks.validate_input,
    checks.DUPLICATE_DETECTION: checks.detect_duplicates,
    checks.DISTANCE_BEARING_CHECK: checks.check_distance_and_bearing,
    checks.OUTLIER_DETECTION: checks.detect_outliers,
    checks.TRAVERSE_CLOSURE: checks.check_traverse_closure,
}


class _CheckCollector:
    """Fan-in point for check results; each check writes once."""

    def __init__(self):
        self._lock = threading.Lock()
        self._results: Dict[str, List[ValidationIssue]] = {}

    def put(self, name: str, issues: List[ValidationIssue]) -> None:
        with self._lock:
            self._results[name] = issues

    def drain(self) -> List[Tuple[str, List[ValidationIssue]]]:
        with self._lock:
            return sorted(self._results.items(), key=lambda item: item[0])


class ValidationEngine:
    """
    Runs every registered check against a dataset.

    Example:
        >>> engine = ValidationEngine()
        >>> report = engine.validate(data)
        >>> report.status, report.confidence_score
    """

    def __init__(self, options: Optional[EngineOptions] = None):
        self.options = options or EngineOptions.default()
        self._checks: Dict[str, ValidationCheck] = dict(DEFAULT_CHECKS)

    @property
    def check_names(self) -> List[str]:
        return sorted(self._checks)

    def register_check(self, name: str, check: ValidationCheck) -> None:
        """Add a check, or replace the one registered under ``name``."""
        if not name:
            raise ValueError("Check name cannot be empty")
        self._checks[name] = check

    def _run_check(self, name: str, check: ValidationCheck, data: SurveyData,
                   collector: _CheckCollector) -> None:
        try:
            issues = list(check(data))
        except Exception as exc:
            logger.exception("Check %s raised", name)
            issues = [ValidationIssue(
                check_name=name,
                severity=Severity.ERROR,
                description=f"Check {name} failed: {exc}",
            )]
        logger.debug("Check %s produced %d issue(s)", name, len(issues))
        collector.put(name, issues)

    def validate(
        self,
        data: SurveyData,
        traverse_options: Optional[TraverseOptions] = None,
    ) -> ValidationReport:
        """Validate a dataset.

        Blocks until every check has finished. The Bowditch adjustment is
        added when the dataset has at least three traverse points.

        Args:
            data: Dataset to validate (read only)
            traverse_options: Overrides the engine's traverse options

        Returns:
            Complete ValidationReport
        """
        start = time.perf_counter()
        report = ValidationReport(project_id=data.project_id)
        collector = _CheckCollector()

        workers = self.options.max_workers or max(len(self._checks), 1)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="survey-check") as pool:
            futures = [
                pool.submit(self._run_check, name, check, data, collector)
                for name, check in self._checks.items()
            ]
            wait(futures)

        for name, issues in collector.drain():
            report.checks_performed.append(name)
            for issue in issues:
                report.add_issue(issue)

        report.summary = checks.calculate_summary_statistics(data)

        if report.summary.traverse_points >= MIN_TRAVERSE_POINTS:
            report.traverse_result = adjust_traverse_bowditch(
                data, traverse_options or self.options.traverse
            )
            report.checks_performed.append(BOWDITCH_ADJUSTMENT)

        report.calculate_confidence_score()
        report.processing_time_ms = (time.perf_counter() - start) * 1000.0

        logger.info(
            "Validated project %r: %s, confidence %.0f, %d issue(s) in %.1f ms",
            report.project_id, report.status.value, report.confidence_score,
            len(report.issues), report.processing_time_ms,
        )
        return report


def validate(data: SurveyData, traverse_options: Optional[TraverseOptions] = None) -> ValidationReport:
    """Validate with a default engine."""
    return ValidationEngine().validate(data, traverse_options)
