"""Tiered fallback responses.

Every entry point returns a well-formed ``FallbackResponse``; none of them
raises. Tiers are chosen by trigger and never chain into one another:

- Tier 1 (partial data): guard blocked with enough completeness, or low confidence
- Tier 2 (metadata only): guard blocked with only a name, or upstream sources down
- Tier 3 (safe default): nothing usable, or an unexpected error
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from cityinsight.config.thresholds import InsightConfig
from cityinsight.models.enums import Dimension, FallbackReason, FallbackTier, SizeCategory
from cityinsight.models.results import (
    ConfidenceResult,
    FallbackResponse,
    InferenceInsights,
    QualityResult,
)
from cityinsight.models.score_input import EntityIdentity, ScoreInput

logger = logging.getLogger(__name__)

# dimension -> (strength, audience, weakness, caveat)
_PARTIAL_DATA_TEXT: dict[Dimension, tuple[str, str, str, str]] = {
    Dimension.ECONOMY: (
        "Economic indicators show positive trends",
        "Career-focused professionals",
        "Economic data suggests challenges",
        "Economic data not available for analysis",
    ),
    Dimension.LIVABILITY: (
        "Quality of life metrics are favorable",
        "Families and retirees",
        "Some livability concerns noted",
        "Livability data not available for analysis",
    ),
    Dimension.SUSTAINABILITY: (
        "Environmental conditions are positive",
        "Environmentally conscious residents",
        "Environmental metrics could be improved",
        "Environmental data not available for analysis",
    ),
    Dimension.GROWTH: (
        "Growth indicators point to ongoing expansion",
        "Entrepreneurs and new businesses",
        "Growth momentum appears limited",
        "Growth data not available for analysis",
    ),
}

_PRELIMINARY_NOTE = (
    " (Note: This assessment is based on limited data and should be considered preliminary.)"
)

# Upstream sources reported in the availability map even when not named.
KNOWN_SOURCES: tuple[str, ...] = ("weather", "aqi")


def format_population(population: Optional[int]) -> str:
    if population is None:
        return "unknown size"
    if population >= 1_000_000:
        return "%.1f million" % (population / 1_000_000)
    if population >= 1_000:
        return f"{population:,}"
    return str(population)


def _clean_name(name: Optional[str]) -> str:
    return name.strip() if name else ""


def _size_strength(entity: EntityIdentity) -> str:
    if entity.size_category is SizeCategory.MAJOR:
        return "Major metropolitan area with diverse offerings"
    if entity.size_category is SizeCategory.MID_SIZED:
        return "Mid-sized city with local character"
    return "Intimate community atmosphere"


class FallbackService:
    def __init__(self, config: InsightConfig) -> None:
        self._settings = config.fallback
        self._rules = config.rules
        self._confidence = config.confidence

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def handle_incomplete_data(
        self,
        score_input: ScoreInput,
        quality: QualityResult,
        reason: FallbackReason = FallbackReason.INCOMPLETE_DATA,
    ) -> FallbackResponse:
        """Guard-blocked input: pick a tier from completeness and identity."""
        logger.warning(
            "Incomplete data for %r (%.1f%% complete)",
            score_input.entity.name,
            quality.completeness,
        )
        tier = self.determine_fallback_tier(score_input, quality)
        if tier is FallbackTier.PARTIAL_DATA:
            return self._partial_data(score_input, quality, reason)
        if tier is FallbackTier.METADATA_ONLY:
            return self._metadata_only(score_input.entity, reason)
        return self._safe_default(score_input.entity, reason)

    def handle_low_confidence(
        self,
        score_input: ScoreInput,
        insights: InferenceInsights,
        confidence: ConfidenceResult,
    ) -> FallbackResponse:
        """Keep the generated insights but flag them as preliminary."""
        logger.warning(
            "Low confidence for %r (%.1f%% confidence)",
            score_input.entity.name,
            confidence.overall,
        )
        weak = self._confidence.weak_component_threshold
        breakdown = confidence.breakdown

        caveats: list[str] = []
        if breakdown.data_completeness < weak:
            caveats.append("Some data fields are missing or incomplete")
        if breakdown.pattern_reliability < weak:
            caveats.append("Score patterns show unusual variance")
        if breakdown.inference_strength < weak:
            caveats.append("Fewer insights could be generated than typical")
        if not caveats:
            caveats.append("Analysis based on limited information")

        return FallbackResponse(
            tier=FallbackTier.PARTIAL_DATA,
            reason=FallbackReason.LOW_CONFIDENCE,
            personality=insights.personality + _PRELIMINARY_NOTE,
            strengths=insights.strengths,
            weaknesses=insights.weaknesses,
            best_suited_for=insights.best_suited_for,
            confidence=confidence.overall,
            caveats=tuple(caveats),
            data_availability={
                "data_completeness": "good" if breakdown.data_completeness >= weak else "limited",
                "pattern_reliability": "good" if breakdown.pattern_reliability >= weak else "limited",
                "inference_quality": "good" if breakdown.inference_strength >= weak else "limited",
            },
            user_message="Our analysis has lower confidence due to limited data. Results should be verified.",
            entity_slug=score_input.entity.slug,
            entity_name=score_input.entity.name,
        )

    def handle_api_unavailable(
        self,
        entity: EntityIdentity,
        unavailable_sources: Sequence[str],
    ) -> FallbackResponse:
        """Stored-data response when live upstream sources are down."""
        logger.warning("Sources unavailable for %r: %s", entity.name, list(unavailable_sources))

        name = _clean_name(entity.name) or "This city"
        personality = (
            f"{name}, {entity.country or 'located in its region'} is a city with stored historical data. "
            "Real-time information is temporarily unavailable, but we can share what we know."
        )

        availability = {"database": "available"}
        unavailable = set(unavailable_sources)
        for source in dict.fromkeys([*KNOWN_SOURCES, *unavailable_sources]):
            availability[f"{source}_api"] = "unavailable" if source in unavailable else "available"

        return FallbackResponse(
            tier=FallbackTier.METADATA_ONLY,
            reason=FallbackReason.API_UNAVAILABLE,
            personality=personality,
            strengths=(_size_strength(entity), "Check back soon for updated real-time data"),
            weaknesses=(),
            best_suited_for=(
                "General travelers",
                "Those researching relocation options",
                "Curious explorers",
            ),
            confidence=self._settings.api_unavailable_confidence,
            caveats=(
                "Real-time data from external sources is temporarily unavailable",
                "Information shown is based on stored data and may not reflect current conditions",
                "Weather, air quality, and other live metrics are not included",
            ),
            data_availability=availability,
            user_message="Some live data sources are temporarily unavailable. Showing cached information.",
            entity_slug=entity.slug,
            entity_name=entity.name,
        )

    def handle_inference_error(
        self,
        score_input: Optional[ScoreInput],
        error: BaseException,
    ) -> FallbackResponse:
        """Safest response. Error detail goes to the log only."""
        entity = score_input.entity if score_input is not None else EntityIdentity()
        logger.error(
            "Inference error for %r: %s",
            entity.name,
            type(error).__name__,
            exc_info=(type(error), error, error.__traceback__),
        )

        name = _clean_name(entity.name) or "This destination"
        return FallbackResponse(
            tier=FallbackTier.SAFE_DEFAULT,
            reason=FallbackReason.INFERENCE_ERROR,
            personality=f"{name} is waiting to be explored. We're working on gathering more information.",
            strengths=("Explore this city's unique characteristics",),
            weaknesses=(),
            best_suited_for=("Curious travelers", "Urban explorers"),
            confidence=0.0,
            caveats=("Detailed analysis is temporarily unavailable",),
            data_availability={"status": "limited"},
            user_message="We're having trouble analyzing this city right now. Please try again later.",
            entity_slug=entity.slug,
            entity_name=entity.name,
        )

    def determine_fallback_tier(self, score_input: ScoreInput, quality: QualityResult) -> FallbackTier:
        if quality.completeness >= self._settings.partial_data_completeness:
            return FallbackTier.PARTIAL_DATA
        if score_input.has_name:
            return FallbackTier.METADATA_ONLY
        return FallbackTier.SAFE_DEFAULT

    # ------------------------------------------------------------------
    # Tier builders
    # ------------------------------------------------------------------

    def _partial_data(
        self,
        score_input: ScoreInput,
        quality: QualityResult,
        reason: FallbackReason,
    ) -> FallbackResponse:
        strengths: list[str] = []
        weaknesses: list[str] = []
        audiences: list[str] = []
        caveats: list[str] = []
        availability: dict[str, str] = {}

        for dimension in Dimension:
            strength, audience, weakness, caveat = _PARTIAL_DATA_TEXT[dimension]
            score = score_input.score_for(dimension)
            if score is None:
                caveats.append(caveat)
                availability[dimension.value] = "missing"
                continue
            availability[dimension.value] = "available"
            if score >= self._rules.strength:
                strengths.append(strength)
                audiences.append(audience)
            elif score < self._rules.weakness:
                weaknesses.append(weakness)

        name = _clean_name(score_input.entity.name)
        if not strengths:
            subject = f"{name}'s" if name else "this city's"
            strengths.append(f"Explore {subject} unique characteristics")
        if not audiences:
            audiences.extend(("Urban explorers", "Curious travelers"))

        covered = len(Dimension) - len(caveats)
        personality = (
            f"{name or 'This city'} offers a distinctive urban experience. "
            f"Based on available data, we can provide insights into {covered} key areas."
        )

        return FallbackResponse(
            tier=FallbackTier.PARTIAL_DATA,
            reason=reason,
            personality=personality,
            strengths=tuple(strengths),
            weaknesses=tuple(weaknesses),
            best_suited_for=tuple(audiences),
            confidence=max(0.0, min(quality.completeness, 100.0)),
            caveats=tuple(caveats),
            data_availability=availability,
            user_message="Analysis based on partial data. Some insights may be limited.",
            entity_slug=score_input.entity.slug,
            entity_name=score_input.entity.name,
        )

    def _metadata_only(self, entity: EntityIdentity, reason: FallbackReason) -> FallbackResponse:
        name = _clean_name(entity.name)
        personality = (
            f"{name} is a city in {entity.country or 'its region'} with a population of approximately "
            f"{format_population(entity.population)}. Detailed metrics are currently unavailable, "
            "but we encourage you to explore what this city has to offer."
        )
        return FallbackResponse(
            tier=FallbackTier.METADATA_ONLY,
            reason=reason,
            personality=personality,
            strengths=(
                f"Discover {name}'s local culture and attractions",
                "Experience the unique character of this destination",
            ),
            weaknesses=(),
            best_suited_for=("Adventurous travelers", "Those seeking new experiences"),
            confidence=self._settings.metadata_only_confidence,
            caveats=(
                "Detailed city metrics are not currently available",
                "This is a general overview based on basic information",
            ),
            data_availability={
                "name": "available",
                "country": "available" if entity.country else "missing",
                "population": "available" if entity.population is not None else "missing",
                "metrics": "unavailable",
            },
            user_message="Limited information available for this city. Showing general overview.",
            entity_slug=entity.slug,
            entity_name=entity.name,
        )

    def _safe_default(self, entity: EntityIdentity, reason: FallbackReason) -> FallbackResponse:
        name = _clean_name(entity.name) or "This city"
        return FallbackResponse(
            tier=FallbackTier.SAFE_DEFAULT,
            reason=reason,
            personality=f"{name} awaits your discovery. Explore its unique character and hidden gems.",
            strengths=("Every city has its own story to tell",),
            weaknesses=(),
            best_suited_for=("Explorers and adventurers",),
            confidence=0.0,
            caveats=("City information is currently unavailable",),
            data_availability={"status": "unavailable"},
            user_message="We don't have detailed information for this city yet. Check back later!",
            entity_slug=entity.slug,
            entity_name=entity.name,
        )
