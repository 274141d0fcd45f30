"""Pre-inference gate: block on critical issues, recommend on edge cases."""

from __future__ import annotations

import logging
from typing import Optional

from cityinsight.config.thresholds import InsightConfig
from cityinsight.models.enums import Dimension
from cityinsight.models.results import GuardResult
from cityinsight.models.score_input import ScoreInput
from cityinsight.quality.checker import DataQualityChecker

logger = logging.getLogger(__name__)


class QualityGuard:
    def __init__(self, config: InsightConfig, checker: Optional[DataQualityChecker] = None) -> None:
        self._thresholds = config.quality
        self._checker = checker or DataQualityChecker(config)

    def validate_for_inference(self, score_input: ScoreInput) -> GuardResult:
        quality = self._checker.validate(score_input)

        blockers: list[str] = []
        recommendations: list[str] = []

        if not quality.sufficient:
            blockers.append("Insufficient data quality: " + quality.summary())
            blockers.extend(quality.issues)

        self._check_misleading_patterns(score_input, blockers, recommendations)
        self._check_edge_cases(score_input, recommendations)

        proceed = not blockers
        result = GuardResult(
            proceed=proceed,
            completeness=quality.completeness,
            blockers=tuple(blockers),
            recommendations=tuple(recommendations),
            guidance=self._guidance(proceed, blockers, recommendations),
        )
        logger.info("Quality guard for %r: %s", score_input.entity.name, result.summary())
        return result

    def has_identical_scores(self, score_input: ScoreInput) -> bool:
        """All four scores equal; only evaluated when economy is present."""
        economy = score_input.score_for(Dimension.ECONOMY)
        if economy is None:
            return False
        return all(
            score_input.score_for(dimension) == economy
            for dimension in (Dimension.LIVABILITY, Dimension.SUSTAINABILITY, Dimension.GROWTH)
        )

    def extreme_score_count(self, score_input: ScoreInput) -> int:
        extremes = self._thresholds.extreme_values
        return sum(1 for score in score_input.present_scores().values() if score in extremes)

    def _check_misleading_patterns(
        self,
        score_input: ScoreInput,
        blockers: list[str],
        recommendations: list[str],
    ) -> None:
        if self._thresholds.block_identical_scores and self.has_identical_scores(score_input):
            blockers.append("All feature scores are identical - likely placeholder data")

        if self.extreme_score_count(score_input) >= self._thresholds.extreme_score_count:
            recommendations.append("Multiple perfect scores detected - verify data accuracy")

        economy = score_input.economy
        if economy is not None and economy.gdp_per_capita is None and economy.unemployment_rate is None:
            recommendations.append("No economic indicators available - economy score may be unreliable")

        if score_input.entity.population is None:
            recommendations.append("Missing population data - demographic insights may be limited")

    def _check_edge_cases(self, score_input: ScoreInput, recommendations: list[str]) -> None:
        population = score_input.entity.population
        if population is not None and population < self._thresholds.small_population:
            recommendations.append("Very small population (<10K) - results may not generalize")

        gdp = score_input.gdp_per_capita
        if gdp is not None and gdp < self._thresholds.low_gdp_per_capita:
            recommendations.append("Low GDP per capita (<$5K) - economic insights limited")

    @staticmethod
    def _guidance(proceed: bool, blockers: list[str], recommendations: list[str]) -> str:
        if proceed:
            if not recommendations:
                return "Data quality is sufficient. Safe to proceed with inference."
            return f"Inference can proceed with {len(recommendations)} caveats. Review recommendations."
        return (
            f"Inference blocked due to {len(blockers)} critical issues. "
            "Address blockers before proceeding."
        )
