"""Shared test fixtures for the cityinsight test suite."""

import pytest

from cityinsight.audit.sinks import InMemoryAuditSink
from cityinsight.config.loader import get_default_config
from cityinsight.config.settings import Settings
from cityinsight.models.score_input import (
    DataQualityMetadata,
    EconomyBlock,
    EntityIdentity,
    GrowthBlock,
    LivabilityBlock,
    ScoreInput,
    SustainabilityBlock,
    build_score_input,
)
from cityinsight.orchestrator.pipeline import InferenceOrchestrator


def make_input(**overrides) -> ScoreInput:
    """Fully populated input with Austin-like metadata; override any keyword."""
    values = dict(
        name="Austin",
        country="USA",
        state="TX",
        population=961_855,
        economy=85.0,
        livability=70.0,
        sustainability=55.0,
        growth=45.0,
        gdp_per_capita=75_000.0,
        unemployment_rate=3.5,
        cost_of_living_index=130,
    )
    values.update(overrides)
    return build_score_input(**values)


def make_raw_input(
    name="Testville",
    country="USA",
    population=250_000,
    economy=None,
    livability=None,
    sustainability=None,
    growth=None,
    gdp_per_capita=50_000.0,
    unemployment_rate=4.0,
    cost_of_living_index=None,
    completeness=None,
) -> ScoreInput:
    """Input without upstream completeness, so the checker counts fields itself."""
    return ScoreInput(
        entity=EntityIdentity(slug=(name or "").lower(), name=name, country=country, population=population),
        economy=EconomyBlock(
            score=economy,
            gdp_per_capita=gdp_per_capita,
            unemployment_rate=unemployment_rate,
            cost_of_living_index=cost_of_living_index,
        ),
        livability=LivabilityBlock(score=livability) if livability is not None else None,
        sustainability=SustainabilityBlock(score=sustainability) if sustainability is not None else None,
        growth=GrowthBlock(score=growth) if growth is not None else None,
        data_quality=DataQualityMetadata(completeness_percentage=completeness),
    )


@pytest.fixture
def config():
    return get_default_config()


@pytest.fixture
def settings():
    return Settings(thresholds_path="", audit_log_path="", pipeline_version="1.0.0")


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def orchestrator(config, settings, audit_sink):
    return InferenceOrchestrator(config=config, settings=settings, audit_sink=audit_sink)


@pytest.fixture
def austin_input() -> ScoreInput:
    """Scores economy 85, livability 70, sustainability 55, growth 45; cost of living 130."""
    return make_input()


@pytest.fixture
def name_only_input() -> ScoreInput:
    return ScoreInput(entity=EntityIdentity(slug="smallville", name="Smallville"))


@pytest.fixture
def input_factory():
    """Factory fixture: ``input_factory(economy=59.0, ...)`` -> ScoreInput."""
    return make_input


@pytest.fixture
def raw_input_factory():
    return make_raw_input
