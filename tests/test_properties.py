"""Property-based checks over arbitrary score bundles."""

from hypothesis import given, settings, strategies as st

from cityinsight.audit.sinks import InMemoryAuditSink
from cityinsight.config.loader import get_default_config
from cityinsight.config.settings import Settings
from cityinsight.models.enums import FallbackTier
from cityinsight.models.inference_result import InferenceResult
from cityinsight.models.score_input import build_score_input
from cityinsight.orchestrator.pipeline import InferenceOrchestrator
from cityinsight.quality.guard import QualityGuard

ORCHESTRATOR = InferenceOrchestrator(
    config=get_default_config(),
    settings=Settings(thresholds_path="", audit_log_path=""),
    audit_sink=InMemoryAuditSink(),
)
GUARD = QualityGuard(get_default_config())

scores = st.one_of(st.none(), st.floats(min_value=-20, max_value=120, allow_nan=False))


@st.composite
def score_inputs(draw):
    return build_score_input(
        draw(st.sampled_from(["", "   ", "Austin", "Zürich", "San Antonio"])),
        country=draw(st.sampled_from([None, "USA", "Switzerland"])),
        population=draw(st.one_of(st.none(), st.integers(min_value=-10, max_value=5_000_000))),
        economy=draw(scores),
        livability=draw(scores),
        sustainability=draw(scores),
        growth=draw(scores),
        gdp_per_capita=draw(st.one_of(st.none(), st.floats(min_value=-1_000, max_value=200_000, allow_nan=False))),
        unemployment_rate=draw(st.one_of(st.none(), st.floats(min_value=-5, max_value=105, allow_nan=False))),
        cost_of_living_index=draw(st.one_of(st.none(), st.integers(min_value=30, max_value=200))),
    )


@settings(max_examples=200, deadline=None)
@given(score_inputs())
def test_always_returns_bounded_result(score_input):
    result = ORCHESTRATOR.run_inference(score_input)
    assert isinstance(result, InferenceResult)
    assert 0.0 <= result.confidence <= 1.0
    assert result.personality
    assert result.fallback_tier in (None, *FallbackTier)


@settings(max_examples=100, deadline=None)
@given(score_inputs())
def test_same_input_same_result(score_input):
    first = ORCHESTRATOR.run_inference(score_input)
    second = ORCHESTRATOR.run_inference(score_input)
    assert first.model_dump(exclude={"inference_time_ms"}) == second.model_dump(exclude={"inference_time_ms"})


@settings(max_examples=200, deadline=None)
@given(score_inputs())
def test_blocked_input_never_reaches_rules(score_input):
    result = ORCHESTRATOR.run_inference(score_input)
    if not GUARD.validate_for_inference(score_input).proceed:
        assert result.is_fallback


@settings(max_examples=200, deadline=None)
@given(score_inputs())
def test_completed_results_within_list_bounds(score_input):
    result = ORCHESTRATOR.run_inference(score_input)
    if result.is_fallback:
        return
    assert 2 <= len(result.strengths) <= 4
    assert 2 <= len(result.best_suited_for) <= 6
    assert len(result.weaknesses) <= 4
    assert result.confidence >= 0.40
