"""Tests for the rule registry, personality composition and the rule engine."""

import pytest

from cityinsight.config.thresholds import InsightConfig, RuleThresholds
from cityinsight.exceptions import InferenceError
from cityinsight.models.enums import RuleCategory
from cityinsight.models.score_input import EntityIdentity, ScoreInput
from cityinsight.rules import registry
from cityinsight.rules.engine import RuleEngine
from cityinsight.rules.personality import compose_personality, primary_trait, supporting_traits, tradeoff


@pytest.fixture
def engine(config):
    return RuleEngine(config)


class TestRegistry:
    def test_catalog_registered(self, engine):
        rule_ids = set(registry.get_all_rules())
        assert {
            "strength.economy",
            "strength.growth",
            "weakness.sustainability",
            "audience.career",
            "audience.budget",
        } <= rule_ids

    def test_category_order_is_registration_order(self, engine):
        ids = [rule.id for rule in registry.get_rules(RuleCategory.STRENGTH)]
        assert ids == [
            "strength.economy",
            "strength.livability",
            "strength.sustainability",
            "strength.growth",
        ]

    def test_duplicate_registration_rejected(self, engine):
        with pytest.raises(ValueError, match="already registered"):

            @registry.register_rule("strength.economy", RuleCategory.STRENGTH)
            def duplicate(score_input, config):
                return None

    def test_description_falls_back_to_docstring(self, engine):
        rule = registry.get_rule("strength.economy")
        assert rule.description == "Economy score at or above the strength threshold."
        assert registry.get_rule("no.such.rule") is None


class TestPersonality:
    def test_austin_sentence(self, config, austin_input):
        text, firings = compose_personality(austin_input, config)
        assert text == (
            "Austin is a thriving economic hub with strong job opportunities. "
            "Providing good livability for residents. "
            "Though the high cost of living presents challenges for newcomers."
        )
        assert [f.rule_id for f in firings] == [
            "personality.primary.economy",
            "personality.supporting.livability",
            "personality.tradeoff.cost_of_living",
        ]

    def test_supporting_clauses_share_one_sentence(self, config, input_factory):
        text, firings = compose_personality(
            input_factory(economy=72.0, livability=35.0, sustainability=75.0, growth=15.0, cost_of_living_index=95),
            config,
        )
        assert text == (
            "Austin maintains good environmental standards. "
            "With a strong economic base, featuring decent environmental conditions."
        )
        assert len(firings) == 3

    def test_tie_prefers_economy(self, config, input_factory):
        firing = primary_trait(input_factory(economy=75.0, livability=75.0), config)
        assert firing.rule_id == "personality.primary.economy"

    def test_livability_primary(self, config, input_factory):
        firing = primary_trait(input_factory(economy=50.0, livability=75.0), config)
        assert firing.output == "Austin offers excellent quality of life with diverse amenities"

    def test_balanced_when_all_below_threshold(self, config, input_factory):
        firing = primary_trait(input_factory(economy=50.0, livability=45.0, sustainability=55.0), config)
        assert firing.rule_id == "personality.primary.balanced"
        assert firing.output == "Austin is a balanced city with moderate characteristics"

    def test_emerging_without_scores(self, config):
        score_input = ScoreInput(entity=EntityIdentity(name="Newtown", country="X"))
        assert primary_trait(score_input, config).output == "Newtown is a city with emerging data"

    def test_supporting_economy_requires_band_and_gdp(self, config, input_factory):
        ids = [
            f.rule_id
            for f in supporting_traits(
                input_factory(economy=70.0, livability=50.0, gdp_per_capita=65_000.0), config
            )
        ]
        assert ids == ["personality.supporting.economy"]

        low_gdp = input_factory(economy=70.0, livability=50.0, gdp_per_capita=40_000.0)
        assert supporting_traits(low_gdp, config) == []

    def test_supporting_traits_truncated(self, config, input_factory):
        traits = supporting_traits(
            input_factory(economy=70.0, livability=70.0, sustainability=70.0, gdp_per_capita=65_000.0),
            config,
        )
        assert len(traits) == config.rules.max_supporting_traits
        assert traits[-1].rule_id == "personality.supporting.livability"

    def test_cost_of_living_tradeoff_wins(self, config, input_factory):
        closing = tradeoff(input_factory(sustainability=30.0, cost_of_living_index=125), config)
        assert closing.rule_id == "personality.tradeoff.cost_of_living"

    def test_environment_tradeoff(self, config, input_factory):
        closing = tradeoff(input_factory(sustainability=30.0, cost_of_living_index=90), config)
        assert closing.output == "with environmental quality concerns requiring attention"

    def test_no_tradeoff(self, config, input_factory):
        assert tradeoff(input_factory(cost_of_living_index=90), config) is None


class TestRuleEngine:
    def test_austin_insights(self, engine, austin_input):
        output = engine.generate(austin_input)
        insights = output.insights
        assert insights.strengths == (
            "Excellent economy with diverse opportunities (score: 85/100)",
            "Good quality of life with amenities (score: 70/100)",
        )
        assert insights.weaknesses == ()
        assert insights.best_suited_for == (
            "Career-focused professionals seeking strong job markets",
            "Families looking for quality of life and amenities",
            "Remote workers seeking work-life balance",
        )

    def test_trace_covers_every_output(self, engine, austin_input):
        output = engine.generate(austin_input)
        traced = {f.output for f in output.fired_rules}
        insights = output.insights
        for item in insights.strengths + insights.weaknesses + insights.best_suited_for:
            assert item in traced
        career = next(f for f in output.fired_rules if f.rule_id == "audience.career")
        assert career.condition == "economy score >= 60"
        assert career.inputs_used == {"economy_score": 85.0}

    def test_weakness_wording(self, engine, input_factory):
        output = engine.generate(input_factory(economy=15.0, growth=30.0))
        assert output.insights.weaknesses == (
            "Significant economic challenges with limited opportunities (score: 15/100)",
            "Moderate growth trajectory (score: 30/100)",
        )

    def test_no_strengths_gets_two_fillers(self, engine, input_factory):
        output = engine.generate(input_factory(economy=50.0, livability=50.0, sustainability=50.0, growth=40.0))
        assert output.insights.strengths == (
            "Emerging city with development potential",
            "Diverse community characteristics",
        )
        assert {f.rule_id for f in output.fired_rules if f.category is RuleCategory.STRENGTH} == {
            "strength.filler"
        }

    def test_single_strength_gets_one_filler(self, engine, input_factory):
        output = engine.generate(input_factory(livability=50.0))
        assert output.insights.strengths[-1] == "Balanced urban characteristics"
        assert len(output.insights.strengths) == 2

    def test_audience_fillers(self, engine, input_factory):
        none = engine.generate(input_factory(economy=50.0, livability=50.0, cost_of_living_index=130))
        assert none.insights.best_suited_for == (
            "Individuals seeking diverse urban experiences",
            "Open-minded explorers",
        )
        one = engine.generate(input_factory(economy=50.0, livability=50.0, cost_of_living_index=90))
        assert one.insights.best_suited_for == (
            "Budget-conscious individuals seeking affordability",
            "Urban lifestyle enthusiasts",
        )

    def test_audience_capped(self, input_factory):
        config = InsightConfig(rules=RuleThresholds(max_audience_segments=3))
        output = RuleEngine(config).generate(
            input_factory(
                economy=90.0,
                livability=90.0,
                sustainability=90.0,
                growth=90.0,
                cost_of_living_index=80,
            )
        )
        assert len(output.insights.best_suited_for) == 3

    def test_all_six_audience_segments(self, engine, input_factory):
        output = engine.generate(
            input_factory(
                economy=90.0,
                livability=90.0,
                sustainability=90.0,
                growth=90.0,
                cost_of_living_index=80,
            )
        )
        assert len(output.insights.best_suited_for) == 6

    def test_threshold_raise_never_removes_strength(self, engine, input_factory):
        below = engine.generate(input_factory(economy=59.0, livability=70.0, growth=65.0))
        above = engine.generate(input_factory(economy=61.0, livability=70.0, growth=65.0))

        def derived(output):
            return [f.output for f in output.fired_rules if f.rule_id.startswith("strength.") and f.rule_id != "strength.filler"]

        assert len(derived(above)) == len(derived(below)) + 1
        assert len(above.insights.strengths) >= len(below.insights.strengths)

    def test_requires_name(self, engine):
        with pytest.raises(InferenceError):
            engine.generate(ScoreInput(entity=EntityIdentity(name="  ", country="X")))

    def test_deterministic(self, engine, austin_input):
        assert engine.generate(austin_input) == engine.generate(austin_input)
