"""End-to-end tests for the engine facade and module-level functions."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

import codeinsight
from codeinsight import EngineConfig, InsightEngine
from codeinsight.config import LearningConfig, SynthesisConfig
from codeinsight.models import ArchetypeTemplate
from tests._fixtures.snippets import (
    API_CLIENT,
    BUILDER,
    FACTORY,
    GOALS,
    OBSERVER,
    PASSWORD_CHECK,
    REPOSITORY,
    VALIDATION,
    VALIDATION_WITH_NETWORK,
)

MALFORMED = "}}} {{ (( /* never closed\n' unterminated"
MAGIC_TIMEOUT = "function wait(ms) {\n  return setTimeout(done, ms * 1000);\n}\n"
SNIPPETS = [FACTORY, BUILDER, VALIDATION, VALIDATION_WITH_NETWORK, OBSERVER, REPOSITORY, API_CLIENT, GOALS, MALFORMED]


def test_empty_input_produces_neutral_report(engine: InsightEngine) -> None:
    report = engine.understand("")

    assert report.overall_score == 0.0
    assert report.missing_layers == ()
    assert report.analysis.prediction.prediction == "unknown"
    assert report.analysis.anomalies == ()
    assert [item.category for item in report.recommendations] == ["purpose", "overall"]


def test_non_string_input_is_treated_as_empty(engine: InsightEngine) -> None:
    assert engine.understand(None).to_dict() == engine.understand("").to_dict()


def test_understand_is_deterministic(engine: InsightEngine) -> None:
    first = engine.understand(VALIDATION_WITH_NETWORK).to_dict()
    second = engine.understand(VALIDATION_WITH_NETWORK).to_dict()

    assert first == second


@pytest.mark.parametrize("code", SNIPPETS)
def test_scores_stay_in_unit_interval(engine: InsightEngine, code: str) -> None:
    report = engine.understand(code)

    assert 0.0 <= report.overall_score <= 1.0
    assert all(0.0 <= value <= 1.0 for value in report.layer_confidences.values())
    assert all(0.0 <= item.confidence <= 1.0 for item in report.recommendations)
    for score in report.analysis.purposes.purposes:
        assert 0.0 <= score.confidence <= 1.0
    for match in report.analysis.archetype_matches:
        assert 0.0 <= match.confidence <= 1.0
    assert 0.0 <= report.quality.clarity <= 1.0
    assert 0.0 <= report.quality.maintainability <= 1.0
    assert all(0.0 <= smell.confidence <= 1.0 for smell in report.analysis.smells.smells)


def test_trained_prototypes_join_the_overall_score(engine: InsightEngine) -> None:
    assert "prediction" not in engine.understand(PASSWORD_CHECK).layer_confidences

    engine.learn_patterns([VALIDATION], ["validation"])
    report = engine.understand(PASSWORD_CHECK)

    assert report.analysis.prediction.prediction == "validation"
    assert report.layer_confidences["prediction"] == report.analysis.prediction.confidence


def test_analyze_deep_adds_relationships(engine: InsightEngine) -> None:
    deep = engine.analyze_deep(FACTORY)

    targets = {(item.kind, item.target) for item in deep.relationships}
    assert ("purpose-archetype", "FactoryPattern") in targets
    assert deep.balance.pattern_recognition == pytest.approx(0.8)
    assert "deep_analysis" in deep.to_dict()


def test_discovery_tracks_common_ground_across_samples(engine: InsightEngine) -> None:
    first = engine.comprehensive_analysis_with_discovery(FACTORY)
    assert first.common_ground == ("ClassConstructor", "FactoryPattern")

    second = engine.comprehensive_analysis_with_discovery(BUILDER)
    assert second.common_ground == ("ClassConstructor",)
    assert sorted(engine.census.samples()) == ["sample-1", "sample-2"]

    messages = [item.message for item in first.recommendations]
    assert "Optimize implementation of FactoryPattern" in messages
    assert first.to_dict()["common_ground"] == ["ClassConstructor", "FactoryPattern"]


def test_discovery_with_named_samples_replaces_entries(engine: InsightEngine) -> None:
    engine.comprehensive_analysis_with_discovery(FACTORY, name="shapes")
    report = engine.comprehensive_analysis_with_discovery(OBSERVER, name="shapes")

    assert len(engine.census) == 1
    assert report.common_ground == ("ClassConstructor", "ObserverPattern")


def test_concurrent_analyses_are_all_counted(engine: InsightEngine) -> None:
    with ThreadPoolExecutor(max_workers=8) as pool:
        reports = list(pool.map(engine.understand, SNIPPETS * 3))

    metrics = engine.get_suite_metrics()
    assert metrics.total_analyses == len(reports)
    expected = sum(report.overall_score for report in reports) / len(reports)
    assert metrics.average_confidence == pytest.approx(expected, abs=1e-4)


def test_config_selects_layers_and_weights(tmp_path: Path) -> None:
    config = EngineConfig(
        root=tmp_path,
        synthesis=SynthesisConfig(layers=["purpose", "anomalies"], weights={"purpose": 1.0, "anomalies": 0.0}),
    )
    report = InsightEngine(config).understand(VALIDATION)

    assert report.analysis.archetype_matches is None
    assert report.analysis.goals is None
    assert report.overall_score == pytest.approx(report.layer_confidences["purpose"])
    assert report.weights == {"purpose": 1.0}


def test_unknown_configured_layer_is_rejected(tmp_path: Path) -> None:
    config = EngineConfig(root=tmp_path, synthesis=SynthesisConfig(layers=["purpose", "telepathy"]))

    with pytest.raises(ValueError, match="telepathy"):
        InsightEngine(config)


def test_custom_archetypes_extend_the_library(tmp_path: Path) -> None:
    template = ArchetypeTemplate(
        name="LoggingWrapper",
        description="Wraps calls with logging",
        required=("logging_call",),
        optional=("try_catch",),
        base_confidence=0.5,
    )
    engine = InsightEngine(EngineConfig(root=tmp_path, archetypes=[template]))

    matches = engine.match_archetypes(API_CLIENT)

    assert "LoggingWrapper" in [match.pattern for match in matches]
    assert engine.matcher.library.version.endswith("+custom")


def test_configured_store_persists_between_engines(tmp_path: Path) -> None:
    config = EngineConfig(root=tmp_path, learning=LearningConfig(prototypes_path=tmp_path / "prototypes.json"))
    engine = InsightEngine(config)
    engine.learn_patterns([VALIDATION], ["validation"])
    engine.store.save()

    restored = InsightEngine(config)

    assert restored.predict(PASSWORD_CHECK).prediction == "validation"


def test_module_level_functions_share_the_default_engine() -> None:
    codeinsight.learn_patterns([VALIDATION], ["validation"])

    assert codeinsight.predict(PASSWORD_CHECK).prediction == "validation"
    codeinsight.understand(VALIDATION)
    assert codeinsight.get_suite_metrics().total_analyses == 1


def test_reset_default_engine_installs_replacement(engine: InsightEngine) -> None:
    codeinsight.reset_default_engine(engine)

    assert codeinsight.default_engine() is engine
    assert codeinsight.similarity(VALIDATION, VALIDATION).score == 1.0


def test_smells_feed_the_report_but_not_the_score(engine: InsightEngine) -> None:
    assert [smell.kind for smell in engine.detect_smells(MAGIC_TIMEOUT).smells] == ["magic-numbers"]

    report = engine.understand(MAGIC_TIMEOUT)

    assert report.analysis.smells.smells[0].line == 2
    assert "smells" not in report.layer_confidences
    assert report.quality is not None
    assert report.to_dict()["quality"] == report.quality.to_dict()
    assert ("low", "smell", "Magic numbers without explanation (line 2)") in [
        (item.priority, item.category, item.message) for item in report.recommendations
    ]


def test_module_level_detect_smells_filters_kinds() -> None:
    report = codeinsight.detect_smells(MAGIC_TIMEOUT, ["duplicate-code"])

    assert report.smells == ()
    assert report.complexity.max_nesting == 1
