"""Input contract for the insight pipeline.

A ``ScoreInput`` is handed over fully populated by the score producer. Scores
are deliberately not range-checked here: an out-of-range value must reach the
quality checker so it can be reported as an issue instead of failing parsing.

Tiers and size category are derived after field validation, so lax values
such as ``"85"`` or ``"961855"`` are categorised from their parsed form. Tier
cutoffs come from the ``score_thresholds`` validation context when one is
given (see ``parse_score_input``), else from the default ``ScoreThresholds``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from cityinsight.config.thresholds import ScoreThresholds
from cityinsight.models.enums import Dimension, ScoreTier, SizeCategory

_DEFAULT_CUTOFFS = ScoreThresholds()

MAJOR_CITY_POPULATION = 1_000_000
MID_SIZED_CITY_POPULATION = 100_000

DEFAULT_OVERALL_WEIGHTS: dict[str, float] = {
    "economy": 0.30,
    "livability": 0.35,
    "sustainability": 0.20,
    "growth": 0.15,
}


def categorize_size(population: Optional[int]) -> Optional[SizeCategory]:
    if population is None:
        return None
    if population >= MAJOR_CITY_POPULATION:
        return SizeCategory.MAJOR
    if population >= MID_SIZED_CITY_POPULATION:
        return SizeCategory.MID_SIZED
    return SizeCategory.SMALL


def _cutoffs(info: ValidationInfo) -> ScoreThresholds:
    context = info.context or {}
    return context.get("score_thresholds") or _DEFAULT_CUTOFFS


class _InputModel(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class EntityIdentity(_InputModel):
    slug: str = ""
    name: str = ""
    state: Optional[str] = None
    country: Optional[str] = None
    population: Optional[int] = None
    size_category: Optional[SizeCategory] = None

    @model_validator(mode="after")
    def derive_size_category(self) -> EntityIdentity:
        if self.size_category is None:
            # frozen model; set once during validation
            object.__setattr__(self, "size_category", categorize_size(self.population))
        return self


class DimensionBlock(_InputModel):
    """Score, tier and explanation for one dimension."""

    score: Optional[float] = None
    tier: Optional[ScoreTier] = None
    explanation: str = ""
    components: tuple[str, ...] = ()

    @model_validator(mode="after")
    def derive_tier(self, info: ValidationInfo) -> DimensionBlock:
        if self.tier is None:
            object.__setattr__(self, "tier", _cutoffs(info).tier_for(self.score))
        return self


class EconomyBlock(DimensionBlock):
    gdp_per_capita: Optional[float] = None
    unemployment_rate: Optional[float] = None
    cost_of_living_index: Optional[int] = None


class LivabilityBlock(DimensionBlock):
    aqi_index: Optional[int] = None
    cost_of_living_index: Optional[int] = None


class SustainabilityBlock(DimensionBlock):
    aqi_index: Optional[int] = None
    aqi_category: Optional[str] = None


class GrowthBlock(DimensionBlock):
    population_growth_rate: Optional[float] = None
    gdp_growth_rate: Optional[float] = None


class OverallAssessment(_InputModel):
    """Weighted overall score; informational only, never recomputed here."""

    overall_score: Optional[float] = None
    overall_tier: Optional[ScoreTier] = None
    weights: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_OVERALL_WEIGHTS))
    explanation: str = ""

    @model_validator(mode="after")
    def derive_overall_tier(self, info: ValidationInfo) -> OverallAssessment:
        if self.overall_tier is None:
            object.__setattr__(self, "overall_tier", _cutoffs(info).tier_for(self.overall_score))
        return self


class DataQualityMetadata(_InputModel):
    completeness_percentage: Optional[float] = None
    missing_fields: tuple[str, ...] = ()
    freshness_category: str = "unknown"
    confidence_score: Optional[float] = Field(default=None, ge=0, le=1)


class ScoreInput(_InputModel):
    """Immutable per-call bundle of scores and entity metadata."""

    entity: EntityIdentity = Field(default_factory=EntityIdentity)
    economy: Optional[EconomyBlock] = None
    livability: Optional[LivabilityBlock] = None
    sustainability: Optional[SustainabilityBlock] = None
    growth: Optional[GrowthBlock] = None
    overall: Optional[OverallAssessment] = None
    data_quality: DataQualityMetadata = Field(default_factory=DataQualityMetadata)

    @classmethod
    def empty(cls) -> ScoreInput:
        """The null-equivalent input: no identity, no scores."""
        return cls()

    def block_for(self, dimension: Dimension) -> Optional[DimensionBlock]:
        return getattr(self, dimension.value)

    def score_for(self, dimension: Dimension) -> Optional[float]:
        block = self.block_for(dimension)
        return block.score if block is not None else None

    def present_scores(self) -> dict[Dimension, float]:
        """Scores that are present, in fixed dimension order."""
        scores: dict[Dimension, float] = {}
        for dimension in Dimension:
            score = self.score_for(dimension)
            if score is not None:
                scores[dimension] = score
        return scores

    @property
    def name(self) -> str:
        return self.entity.name

    @property
    def has_name(self) -> bool:
        return bool(self.entity.name and self.entity.name.strip())

    @property
    def gdp_per_capita(self) -> Optional[float]:
        return self.economy.gdp_per_capita if self.economy is not None else None

    @property
    def unemployment_rate(self) -> Optional[float]:
        return self.economy.unemployment_rate if self.economy is not None else None

    @property
    def cost_of_living_index(self) -> Optional[int]:
        return self.economy.cost_of_living_index if self.economy is not None else None


def parse_score_input(
    data: Mapping[str, Any],
    score_thresholds: Optional[ScoreThresholds] = None,
) -> ScoreInput:
    """Validate a producer mapping, deriving omitted tiers with ``score_thresholds``."""
    context = {"score_thresholds": score_thresholds} if score_thresholds is not None else None
    return ScoreInput.model_validate(dict(data), context=context)


def build_score_input(
    name: str,
    *,
    slug: str = "",
    state: Optional[str] = None,
    country: Optional[str] = None,
    population: Optional[int] = None,
    economy: Optional[float] = None,
    livability: Optional[float] = None,
    sustainability: Optional[float] = None,
    growth: Optional[float] = None,
    gdp_per_capita: Optional[float] = None,
    unemployment_rate: Optional[float] = None,
    cost_of_living_index: Optional[int] = None,
    aqi_index: Optional[int] = None,
    overall_score: Optional[float] = None,
    freshness_category: str = "fresh",
    score_thresholds: Optional[ScoreThresholds] = None,
) -> ScoreInput:
    """Assemble a ``ScoreInput`` from plain values.

    Tiers and size category are derived, and the data-quality block records
    which of the four dimension scores are missing. Completeness here is the
    share of dimension scores present; callers wanting the checker's
    field-level count should build ``ScoreInput`` directly without it.
    """
    scores = {
        Dimension.ECONOMY: economy,
        Dimension.LIVABILITY: livability,
        Dimension.SUSTAINABILITY: sustainability,
        Dimension.GROWTH: growth,
    }
    missing = tuple(d.value for d, score in scores.items() if score is None)
    completeness = (len(scores) - len(missing)) * 100.0 / len(scores)

    has_economy_data = any(
        v is not None for v in (economy, gdp_per_capita, unemployment_rate, cost_of_living_index)
    )

    data: dict[str, Any] = {
        "entity": {
            "slug": slug or name.lower().replace(" ", "-"),
            "name": name,
            "state": state,
            "country": country,
            "population": population,
        },
        "data_quality": {
            "completeness_percentage": completeness,
            "missing_fields": missing,
            "freshness_category": freshness_category,
        },
    }
    if has_economy_data:
        data["economy"] = {
            "score": economy,
            "gdp_per_capita": gdp_per_capita,
            "unemployment_rate": unemployment_rate,
            "cost_of_living_index": cost_of_living_index,
        }
    if livability is not None:
        data["livability"] = {"score": livability, "cost_of_living_index": cost_of_living_index}
    if sustainability is not None:
        data["sustainability"] = {"score": sustainability, "aqi_index": aqi_index}
    if growth is not None:
        data["growth"] = {"score": growth}
    if overall_score is not None:
        data["overall"] = {"overall_score": overall_score}

    return parse_score_input(data, score_thresholds)
