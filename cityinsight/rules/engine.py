"""Rule engine.

Maps a guard-approved ScoreInput to InferenceInsights plus a trace of every
rule that fired. Pure and deterministic: no I/O, no clock, no randomness.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

# Ensure all rules are registered on import
import cityinsight.rules.catalog  # noqa: F401
from cityinsight.config.thresholds import InsightConfig
from cityinsight.exceptions import InferenceError
from cityinsight.models.enums import RuleCategory
from cityinsight.models.results import InferenceInsights
from cityinsight.models.score_input import ScoreInput
from cityinsight.rules.personality import compose_personality
from cityinsight.rules.registry import RuleFiring, get_rules

logger = logging.getLogger(__name__)

_STRENGTH_FILLERS_NONE = ("Emerging city with development potential", "Diverse community characteristics")
_STRENGTH_FILLER_ONE = "Balanced urban characteristics"
_AUDIENCE_FILLERS_NONE = ("Individuals seeking diverse urban experiences", "Open-minded explorers")
_AUDIENCE_FILLER_ONE = "Urban lifestyle enthusiasts"


@dataclass(frozen=True)
class RuleEngineOutput:
    insights: InferenceInsights
    fired_rules: tuple[RuleFiring, ...]


def _filler(rule_id: str, category: RuleCategory, condition: str, output: str) -> RuleFiring:
    return RuleFiring(rule_id=rule_id, category=category, condition=condition, output=output)


class RuleEngine:
    """Stateless engine that applies the registered threshold rules."""

    def __init__(self, config: InsightConfig) -> None:
        self._config = config

    def generate(self, score_input: ScoreInput) -> RuleEngineOutput:
        if not score_input.has_name:
            raise InferenceError("Rule engine requires an entity name")

        personality, personality_rules = compose_personality(score_input, self._config)
        strengths = self._strengths(score_input)
        weaknesses = self._evaluate(RuleCategory.WEAKNESS, score_input)
        audience = self._audience(score_input)

        insights = InferenceInsights(
            personality=personality,
            strengths=tuple(f.output for f in strengths),
            weaknesses=tuple(f.output for f in weaknesses),
            best_suited_for=tuple(f.output for f in audience),
        )
        fired = tuple(personality_rules + strengths + weaknesses + audience)
        logger.debug(
            "Rule engine for %r: %s, %d rules fired",
            score_input.entity.name,
            insights.summary(),
            len(fired),
        )
        return RuleEngineOutput(insights=insights, fired_rules=fired)

    def _evaluate(self, category: RuleCategory, score_input: ScoreInput) -> list[RuleFiring]:
        firings: list[RuleFiring] = []
        for rule in get_rules(category):
            firing = rule.rule_fn(score_input, self._config)
            if firing is not None:
                firings.append(firing)
        return firings

    def _strengths(self, score_input: ScoreInput) -> list[RuleFiring]:
        strengths = self._evaluate(RuleCategory.STRENGTH, score_input)
        if not strengths:
            strengths = [
                _filler("strength.filler", RuleCategory.STRENGTH, "no dimension qualified as a strength", text)
                for text in _STRENGTH_FILLERS_NONE
            ]
        elif len(strengths) == 1:
            strengths.append(
                _filler(
                    "strength.filler",
                    RuleCategory.STRENGTH,
                    "only one dimension qualified as a strength",
                    _STRENGTH_FILLER_ONE,
                )
            )
        return strengths

    def _audience(self, score_input: ScoreInput) -> list[RuleFiring]:
        segments = self._evaluate(RuleCategory.AUDIENCE, score_input)
        if not segments:
            segments = [
                _filler("audience.filler", RuleCategory.AUDIENCE, "no audience rule matched", text)
                for text in _AUDIENCE_FILLERS_NONE
            ]
        elif len(segments) == 1:
            segments.append(
                _filler(
                    "audience.filler",
                    RuleCategory.AUDIENCE,
                    "only one audience rule matched",
                    _AUDIENCE_FILLER_ONE,
                )
            )
        return segments[: self._config.rules.max_audience_segments]
