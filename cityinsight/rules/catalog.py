"""Strength, weakness and audience rules.

Importing this module registers every rule. Registration order is the
evaluation order, so the order of definitions below is significant.
"""

from __future__ import annotations

from typing import Optional

from cityinsight.config.thresholds import InsightConfig
from cityinsight.models.enums import Dimension, RuleCategory
from cityinsight.models.score_input import ScoreInput
from cityinsight.rules.registry import RuleFiring, register_rule


def _strength(
    rule_id: str,
    score_input: ScoreInput,
    config: InsightConfig,
    dimension: Dimension,
    qualifiers: tuple[str, str],
    template: str,
) -> Optional[RuleFiring]:
    score = score_input.score_for(dimension)
    rules = config.rules
    if score is None or score < rules.strength:
        return None
    qualifier = qualifiers[0] if score >= rules.strong_strength else qualifiers[1]
    return RuleFiring(
        rule_id=rule_id,
        category=RuleCategory.STRENGTH,
        condition=f"{dimension.value} score >= {rules.strength:g}",
        output=template % (qualifier, score),
        inputs_used={f"{dimension.value}_score": score},
    )


def _weakness(
    rule_id: str,
    score_input: ScoreInput,
    config: InsightConfig,
    dimension: Dimension,
    qualifiers: tuple[str, str],
    template: str,
) -> Optional[RuleFiring]:
    score = score_input.score_for(dimension)
    rules = config.rules
    if score is None or score >= rules.weakness:
        return None
    qualifier = qualifiers[0] if score < rules.severe_weakness else qualifiers[1]
    return RuleFiring(
        rule_id=rule_id,
        category=RuleCategory.WEAKNESS,
        condition=f"{dimension.value} score < {rules.weakness:g}",
        output=template % (qualifier, score),
        inputs_used={f"{dimension.value}_score": score},
    )


def _audience(rule_id: str, condition: str, output: str, **inputs_used) -> RuleFiring:
    return RuleFiring(
        rule_id=rule_id,
        category=RuleCategory.AUDIENCE,
        condition=condition,
        output=output,
        inputs_used=inputs_used,
    )


# ---------------------------------------------------------------------------
# Strengths
# ---------------------------------------------------------------------------


@register_rule("strength.economy", RuleCategory.STRENGTH)
def economy_strength(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Economy score at or above the strength threshold."""
    return _strength(
        "strength.economy",
        score_input,
        config,
        Dimension.ECONOMY,
        ("Excellent", "Strong"),
        "%s economy with diverse opportunities (score: %.0f/100)",
    )


@register_rule("strength.livability", RuleCategory.STRENGTH)
def livability_strength(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Livability score at or above the strength threshold."""
    return _strength(
        "strength.livability",
        score_input,
        config,
        Dimension.LIVABILITY,
        ("Exceptional", "Good"),
        "%s quality of life with amenities (score: %.0f/100)",
    )


@register_rule("strength.sustainability", RuleCategory.STRENGTH)
def sustainability_strength(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Sustainability score at or above the strength threshold."""
    return _strength(
        "strength.sustainability",
        score_input,
        config,
        Dimension.SUSTAINABILITY,
        ("Excellent", "Good"),
        "%s environmental quality (score: %.0f/100)",
    )


@register_rule("strength.growth", RuleCategory.STRENGTH)
def growth_strength(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Growth score at or above the strength threshold."""
    return _strength(
        "strength.growth",
        score_input,
        config,
        Dimension.GROWTH,
        ("Exceptional", "Strong"),
        "%s growth trajectory (score: %.0f/100)",
    )


# ---------------------------------------------------------------------------
# Weaknesses
# ---------------------------------------------------------------------------


@register_rule("weakness.economy", RuleCategory.WEAKNESS)
def economy_weakness(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Economy score below the weakness threshold."""
    return _weakness(
        "weakness.economy",
        score_input,
        config,
        Dimension.ECONOMY,
        ("Significant economic challenges", "Economic considerations"),
        "%s with limited opportunities (score: %.0f/100)",
    )


@register_rule("weakness.livability", RuleCategory.WEAKNESS)
def livability_weakness(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Livability score below the weakness threshold."""
    return _weakness(
        "weakness.livability",
        score_input,
        config,
        Dimension.LIVABILITY,
        ("Quality of life concerns", "Livability considerations"),
        "%s requiring attention (score: %.0f/100)",
    )


@register_rule("weakness.sustainability", RuleCategory.WEAKNESS)
def sustainability_weakness(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Sustainability score below the weakness threshold."""
    return _weakness(
        "weakness.sustainability",
        score_input,
        config,
        Dimension.SUSTAINABILITY,
        ("Significant environmental concerns", "Environmental quality considerations"),
        "%s (score: %.0f/100)",
    )


@register_rule("weakness.growth", RuleCategory.WEAKNESS)
def growth_weakness(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Growth score below the weakness threshold."""
    return _weakness(
        "weakness.growth",
        score_input,
        config,
        Dimension.GROWTH,
        ("Limited growth prospects", "Moderate growth trajectory"),
        "%s (score: %.0f/100)",
    )


# ---------------------------------------------------------------------------
# Audience segments
# ---------------------------------------------------------------------------


@register_rule("audience.career", RuleCategory.AUDIENCE)
def career_audience(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Strong economy attracts career-focused professionals."""
    economy = score_input.score_for(Dimension.ECONOMY)
    threshold = config.rules.strength
    if economy is None or economy < threshold:
        return None
    return _audience(
        "audience.career",
        f"economy score >= {threshold:g}",
        "Career-focused professionals seeking strong job markets",
        economy_score=economy,
    )


@register_rule("audience.families", RuleCategory.AUDIENCE)
def families_audience(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    livability = score_input.score_for(Dimension.LIVABILITY)
    threshold = config.rules.strength
    if livability is None or livability < threshold:
        return None
    return _audience(
        "audience.families",
        f"livability score >= {threshold:g}",
        "Families looking for quality of life and amenities",
        livability_score=livability,
    )


@register_rule("audience.remote_workers", RuleCategory.AUDIENCE)
def remote_workers_audience(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Economy and livability both strong."""
    economy = score_input.score_for(Dimension.ECONOMY)
    livability = score_input.score_for(Dimension.LIVABILITY)
    threshold = config.rules.strength
    if economy is None or livability is None or economy < threshold or livability < threshold:
        return None
    return _audience(
        "audience.remote_workers",
        f"economy score >= {threshold:g} and livability score >= {threshold:g}",
        "Remote workers seeking work-life balance",
        economy_score=economy,
        livability_score=livability,
    )


@register_rule("audience.environmental", RuleCategory.AUDIENCE)
def environmental_audience(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    sustainability = score_input.score_for(Dimension.SUSTAINABILITY)
    threshold = config.rules.environmental_audience
    if sustainability is None or sustainability < threshold:
        return None
    return _audience(
        "audience.environmental",
        f"sustainability score >= {threshold:g}",
        "Environmentally conscious individuals valuing clean air",
        sustainability_score=sustainability,
    )


@register_rule("audience.entrepreneurs", RuleCategory.AUDIENCE)
def entrepreneurs_audience(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    growth = score_input.score_for(Dimension.GROWTH)
    threshold = config.rules.strength
    if growth is None or growth < threshold:
        return None
    return _audience(
        "audience.entrepreneurs",
        f"growth score >= {threshold:g}",
        "Entrepreneurs and startup founders",
        growth_score=growth,
    )


@register_rule("audience.budget", RuleCategory.AUDIENCE)
def budget_audience(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Cost of living below the moderate threshold."""
    cost_of_living = score_input.cost_of_living_index
    threshold = config.economy.moderate_cost_of_living
    if cost_of_living is None or cost_of_living >= threshold:
        return None
    return _audience(
        "audience.budget",
        f"cost of living index < {threshold}",
        "Budget-conscious individuals seeking affordability",
        cost_of_living_index=cost_of_living,
    )
