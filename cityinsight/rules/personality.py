"""Composes the personality description.

Up to three sentences: the primary trait, the supporting clauses (at most
``max_supporting_traits``, comma-joined) and an optional trade-off.
"""

from __future__ import annotations

from typing import Optional

from cityinsight.config.thresholds import InsightConfig
from cityinsight.models.enums import Dimension, RuleCategory
from cityinsight.models.score_input import ScoreInput
from cityinsight.rules.registry import RuleFiring

# Candidates for the primary trait; order breaks ties.
_PRIMARY_TRAITS: tuple[tuple[Dimension, str], ...] = (
    (Dimension.ECONOMY, "{name} is a thriving economic hub with strong job opportunities"),
    (Dimension.LIVABILITY, "{name} offers excellent quality of life with diverse amenities"),
    (Dimension.SUSTAINABILITY, "{name} maintains good environmental standards"),
)


def _firing(rule_id: str, condition: str, output: str, **inputs_used) -> RuleFiring:
    return RuleFiring(
        rule_id=rule_id,
        category=RuleCategory.PERSONALITY,
        condition=condition,
        output=output,
        inputs_used=inputs_used,
    )


def primary_trait(score_input: ScoreInput, config: InsightConfig) -> RuleFiring:
    name = score_input.entity.name
    scores = {
        dimension: score_input.score_for(dimension)
        for dimension, _ in _PRIMARY_TRAITS
        if score_input.score_for(dimension) is not None
    }
    if not scores:
        return _firing(
            "personality.primary.emerging",
            "no economy, livability or sustainability score",
            f"{name} is a city with emerging data",
        )

    threshold = config.rules.primary_trait
    best = max(scores.values())
    for dimension, template in _PRIMARY_TRAITS:
        score = scores.get(dimension)
        if score is not None and score == best and score >= threshold:
            return _firing(
                f"personality.primary.{dimension.value}",
                f"{dimension.value} score is highest and >= {threshold:g}",
                template.format(name=name),
                **{f"{dimension.value}_score": score},
            )

    return _firing(
        "personality.primary.balanced",
        f"highest score < {threshold:g}",
        f"{name} is a balanced city with moderate characteristics",
        highest_score=best,
    )


def supporting_traits(score_input: ScoreInput, config: InsightConfig) -> list[RuleFiring]:
    rules = config.rules
    traits: list[RuleFiring] = []

    economy = score_input.score_for(Dimension.ECONOMY)
    gdp = score_input.gdp_per_capita
    high_gdp = config.economy.high_gdp_per_capita
    if (
        economy is not None
        and rules.supporting_trait <= economy < rules.supporting_economy_ceiling
        and gdp is not None
        and gdp >= high_gdp
    ):
        traits.append(
            _firing(
                "personality.supporting.economy",
                f"{rules.supporting_trait:g} <= economy score < {rules.supporting_economy_ceiling:g} "
                f"and GDP per capita >= {high_gdp:g}",
                "with a strong economic base",
                economy_score=economy,
                gdp_per_capita=gdp,
            )
        )

    livability = score_input.score_for(Dimension.LIVABILITY)
    if livability is not None and livability >= rules.supporting_trait:
        traits.append(
            _firing(
                "personality.supporting.livability",
                f"livability score >= {rules.supporting_trait:g}",
                "providing good livability for residents",
                livability_score=livability,
            )
        )

    sustainability = score_input.score_for(Dimension.SUSTAINABILITY)
    if sustainability is not None and sustainability >= rules.supporting_trait:
        traits.append(
            _firing(
                "personality.supporting.sustainability",
                f"sustainability score >= {rules.supporting_trait:g}",
                "featuring decent environmental conditions",
                sustainability_score=sustainability,
            )
        )

    return traits[: rules.max_supporting_traits]


def tradeoff(score_input: ScoreInput, config: InsightConfig) -> Optional[RuleFiring]:
    """Cost of living takes precedence over environmental concerns."""
    cost_of_living = score_input.cost_of_living_index
    high_cost = config.economy.high_cost_of_living
    if cost_of_living is not None and cost_of_living >= high_cost:
        return _firing(
            "personality.tradeoff.cost_of_living",
            f"cost of living index >= {high_cost}",
            "though the high cost of living presents challenges for newcomers",
            cost_of_living_index=cost_of_living,
        )

    sustainability = score_input.score_for(Dimension.SUSTAINABILITY)
    threshold = config.rules.environmental_tradeoff
    if sustainability is not None and sustainability < threshold:
        return _firing(
            "personality.tradeoff.environment",
            f"sustainability score < {threshold:g}",
            "with environmental quality concerns requiring attention",
            sustainability_score=sustainability,
        )
    return None


def _clause_sentence(text: str) -> str:
    return text[:1].upper() + text[1:] + "."


def compose_personality(score_input: ScoreInput, config: InsightConfig) -> tuple[str, list[RuleFiring]]:
    primary = primary_trait(score_input, config)
    supporting = supporting_traits(score_input, config)
    closing = tradeoff(score_input, config)

    # the primary trait opens with the entity name, which is kept as given
    sentences = [primary.output + "."]
    if supporting:
        sentences.append(_clause_sentence(", ".join(firing.output for firing in supporting)))
    if closing is not None:
        sentences.append(_clause_sentence(closing.output))

    firings = [primary, *supporting] + ([closing] if closing is not None else [])
    return " ".join(sentences), firings
