"""Data completeness and structural checks on a score input."""

from __future__ import annotations

import logging
from typing import Optional

from cityinsight.config.thresholds import InsightConfig
from cityinsight.models.enums import Dimension
from cityinsight.models.results import QualityResult
from cityinsight.models.score_input import ScoreInput

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class DataQualityChecker:
    """Computes completeness and separates blocking issues from warnings.

    Stateless: one instance can be shared across concurrent calls.
    """

    def __init__(self, config: InsightConfig) -> None:
        self._thresholds = config.quality

    def validate(self, score_input: ScoreInput) -> QualityResult:
        issues: list[str] = []
        warnings: list[str] = []
        entity = score_input.entity

        if _is_blank(entity.name):
            issues.append("Missing city name")
        if _is_blank(entity.country):
            issues.append("Missing country")

        for dimension in Dimension:
            block = score_input.block_for(dimension)
            if block is None:
                warnings.append(f"Missing {dimension.value} features")
            else:
                self._check_score(block.score, dimension.label, issues, warnings)

        if entity.population is None:
            warnings.append("Missing population data")
        elif entity.population <= 0:
            issues.append(f"Invalid population: {entity.population}")

        economy = score_input.economy
        if economy is not None:
            if economy.gdp_per_capita is None:
                warnings.append("Missing GDP per capita")
            elif economy.gdp_per_capita < 0:
                issues.append(f"Invalid GDP per capita: {economy.gdp_per_capita}")

            rate = economy.unemployment_rate
            if rate is None:
                warnings.append("Missing unemployment rate")
            elif not (
                self._thresholds.min_unemployment_rate <= rate <= self._thresholds.max_unemployment_rate
            ):
                issues.append(f"Invalid unemployment rate: {rate}")

        completeness = self.completeness(score_input)
        sufficient = not issues and completeness >= self._thresholds.weak_data_threshold

        result = QualityResult(
            sufficient=sufficient,
            completeness=completeness,
            issues=tuple(issues),
            warnings=tuple(warnings),
        )
        logger.debug("Quality check for %r: %s", entity.name, result.summary())
        return result

    def completeness(self, score_input: ScoreInput) -> float:
        """Upstream completeness if supplied, otherwise the critical-field count."""
        upstream = score_input.data_quality.completeness_percentage
        if upstream is not None:
            return upstream

        entity = score_input.entity
        economy = score_input.economy
        checks = [
            not _is_blank(entity.name),
            not _is_blank(entity.country),
        ]
        for dimension in Dimension:
            score = score_input.score_for(dimension)
            checks.append(score is not None and score > 0)
        checks.append(economy is not None and economy.gdp_per_capita is not None and economy.gdp_per_capita > 0)
        checks.append(economy is not None and economy.unemployment_rate is not None)
        checks.append(entity.population is not None and entity.population > 0)

        return sum(checks) / len(checks) * 100.0

    def _check_score(
        self,
        score: Optional[float],
        label: str,
        issues: list[str],
        warnings: list[str],
    ) -> None:
        if score is None:
            warnings.append(f"Missing {label} score")
        elif score < self._thresholds.min_valid_score or score > self._thresholds.max_valid_score:
            issues.append(f"{label} score out of range [0-100]: {score}")
        elif score == 0.0:
            warnings.append(f"{label} score is zero (may indicate missing data)")
