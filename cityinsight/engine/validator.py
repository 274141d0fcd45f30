"""Structural boundary checks on rule engine output."""

from __future__ import annotations

import logging

from cityinsight.config.thresholds import InsightConfig
from cityinsight.models.results import InferenceInsights, ValidationResult

logger = logging.getLogger(__name__)


class OutputValidator:
    """Flags out-of-bounds output. Never raises; the caller decides what to do."""

    def __init__(self, config: InsightConfig) -> None:
        self._bounds = config.output_boundaries

    def validate(self, insights: InferenceInsights) -> ValidationResult:
        b = self._bounds
        errors: list[str] = []

        if len(insights.personality) > b.max_personality_length:
            errors.append(
                "Personality exceeds max length: %d > %d. "
                % (len(insights.personality), b.max_personality_length)
            )

        self._check_count(errors, "strengths", len(insights.strengths), b.min_strengths, b.max_strengths)

        weakness_count = len(insights.weaknesses)
        if not (weakness_count == 0 and b.allow_empty_weaknesses):
            self._check_count(errors, "weaknesses", weakness_count, b.min_weaknesses, b.max_weaknesses)

        self._check_count(
            errors, "audience items", len(insights.best_suited_for), b.min_audience, b.max_audience
        )

        message = "".join(errors).strip()
        if message:
            logger.debug("Output validation failed: %s", message)
            return ValidationResult(valid=False, error=message)
        return ValidationResult(valid=True)

    @staticmethod
    def _check_count(errors: list[str], label: str, count: int, minimum: int, maximum: int) -> None:
        if count < minimum:
            errors.append("Too few %s: %d < %d. " % (label, count, minimum))
        if count > maximum:
            errors.append("Too many %s: %d > %d. " % (label, count, maximum))
