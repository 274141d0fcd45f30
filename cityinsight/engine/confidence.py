"""Deterministic confidence scoring.

overall = data_weight * completeness
        + pattern_weight * pattern reliability
        + inference_weight * inference strength

Each component is on a 0-100 scale. This is a reliability indicator, not a
calibrated probability.
"""

from __future__ import annotations

import logging
import statistics

from cityinsight.config.thresholds import InsightConfig
from cityinsight.models.enums import ConfidenceLevel, Dimension
from cityinsight.models.results import (
    ConfidenceBreakdown,
    ConfidenceResult,
    InferenceInsights,
    QualityResult,
)
from cityinsight.models.score_input import ScoreInput

logger = logging.getLogger(__name__)

_LEVEL_GUIDANCE = {
    ConfidenceLevel.HIGH: "Output is highly reliable.",
    ConfidenceLevel.MEDIUM: "Output is generally reliable with minor data gaps.",
    ConfidenceLevel.LOW: "Output should be used cautiously due to data limitations.",
}


class ConfidenceCalculator:
    def __init__(self, config: InsightConfig) -> None:
        self._settings = config.confidence
        self._bounds = config.output_boundaries

    def calculate(
        self,
        score_input: ScoreInput,
        quality: QualityResult,
        insights: InferenceInsights,
    ) -> ConfidenceResult:
        s = self._settings
        data_score = quality.completeness
        pattern_score = self.pattern_reliability(score_input)
        inference_score = self.inference_strength(insights)

        overall = (
            data_score * s.data_weight
            + pattern_score * s.pattern_weight
            + inference_score * s.inference_weight
        )
        overall = max(0.0, min(overall, 100.0))

        level = self.level_for(overall)
        breakdown = ConfidenceBreakdown(
            data_completeness=data_score,
            pattern_reliability=pattern_score,
            inference_strength=inference_score,
        )
        result = ConfidenceResult(
            overall=overall,
            level=level,
            reasoning=self._reasoning(breakdown, level),
            breakdown=breakdown,
        )
        logger.debug("Confidence for %r: %s", score_input.entity.name, result.summary())
        return result

    def level_for(self, overall: float) -> ConfidenceLevel:
        if overall >= self._settings.high_threshold:
            return ConfidenceLevel.HIGH
        if overall >= self._settings.medium_threshold:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW

    def pattern_reliability(self, score_input: ScoreInput) -> float:
        """Share of present scores inside the reliable band, less a spread penalty."""
        s = self._settings
        present = score_input.present_scores()
        if not present:
            return s.no_scores_reliability

        reliable = sum(1 for score in present.values() if s.reliable_min <= score <= s.reliable_max)
        base = reliable / len(present) * 100.0

        # Missing scores count as the midpoint so absence alone adds no spread.
        all_scores = [present.get(dimension, s.missing_score_default) for dimension in Dimension]
        penalty = min(statistics.pstdev(all_scores) / s.variance_divisor, s.max_variance_penalty)

        return max(0.0, base - penalty)

    def inference_strength(self, insights: InferenceInsights) -> float:
        b = self._bounds
        fits = (
            self._fit_score(len(insights.strengths), b.min_strengths, b.max_strengths),
            self._fit_score(len(insights.weaknesses), b.min_weaknesses, b.max_weaknesses),
            self._fit_score(len(insights.best_suited_for), b.min_audience, b.max_audience),
        )
        return sum(fits) / len(fits)

    def _fit_score(self, actual: int, minimum: int, maximum: int) -> float:
        factor = self._settings.fit_penalty_factor
        if actual < minimum:
            deficit = (minimum - actual) / minimum
            return max(0.0, 100.0 - deficit * factor)
        if actual > maximum:
            excess = (actual - maximum) / maximum
            return max(0.0, 100.0 - excess * factor)
        return 100.0

    def _reasoning(self, breakdown: ConfidenceBreakdown, level: ConfidenceLevel) -> str:
        weak = self._settings.weak_component_threshold
        data = breakdown.data_completeness
        pattern = breakdown.pattern_reliability
        inference = breakdown.inference_strength

        parts = [f"{level.value} confidence: "]
        if data == max(data, pattern, inference):
            parts.append("Data completeness %.0f%%. " % data)
        if pattern < weak:
            parts.append("Score patterns show %.0f%% reliability. " % pattern)
        if inference < weak:
            parts.append("Inference strength %.0f%%. " % inference)
        parts.append(_LEVEL_GUIDANCE[level])
        return "".join(parts)
