"""Tests for layer fan-out and score fusion."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Tuple

import pytest

from codeinsight.features import extract_features
from codeinsight.layers import Layer, LayerContext, discover_layers
from codeinsight.synthesis import SuiteMetrics, Synthesizer
from tests._fixtures.snippets import VALIDATION_WITH_NETWORK


class StaticLayer(Layer):
    def __init__(self, name: str, value: Any, confidence: Optional[float] = None, requires: Tuple[str, ...] = ()):
        self.name = name
        self.value = value
        self._confidence = confidence
        self.requires = requires

    def run(self, context: LayerContext) -> Any:
        return self.value

    def confidence(self, result: Any, context: LayerContext) -> Optional[float]:
        return self._confidence


class FailingLayer(Layer):
    name = "flaky"

    def run(self, context: LayerContext) -> Any:
        raise RuntimeError("boom")


class DoublingLayer(Layer):
    name = "double"
    requires = ("alpha",)

    def run(self, context: LayerContext) -> Any:
        return context.results["alpha"] * 2


EMPTY = extract_features("")


def test_overall_score_is_weighted_mean_of_confidences() -> None:
    synthesizer = Synthesizer(
        [StaticLayer("alpha", 1, 0.8), StaticLayer("beta", 2, 0.4)],
        weights={"alpha": 3.0, "beta": 1.0},
    )
    report = synthesizer.synthesize("", EMPTY)

    assert report.overall_score == pytest.approx(0.7)
    assert report.layer_confidences == {"alpha": 0.8, "beta": 0.4}
    assert report.weights == {"alpha": 3.0, "beta": 1.0}


def test_zero_weight_layers_are_left_out() -> None:
    synthesizer = Synthesizer(
        [StaticLayer("alpha", 1, 0.8), StaticLayer("beta", 2, 0.4)],
        weights={"alpha": 0.0},
    )
    report = synthesizer.synthesize("", EMPTY)

    assert report.overall_score == pytest.approx(0.4)
    assert report.weights == {"beta": 1.0}


def test_layers_without_confidence_do_not_dilute_the_score() -> None:
    report = Synthesizer([StaticLayer("alpha", 1, 0.9), StaticLayer("notes", "x")]).synthesize("", EMPTY)

    assert report.overall_score == pytest.approx(0.9)
    assert "notes" not in report.layer_confidences


def test_no_contributing_layers_scores_zero() -> None:
    assert Synthesizer([StaticLayer("notes", "x")]).synthesize("", EMPTY).overall_score == 0.0


def test_confidences_are_clamped_to_unit_interval() -> None:
    report = Synthesizer([StaticLayer("alpha", 1, 1.5), StaticLayer("beta", 1, -0.2)]).synthesize("", EMPTY)

    assert report.layer_confidences == {"alpha": 1.0, "beta": 0.0}
    assert report.overall_score == pytest.approx(0.5)


def test_unknown_layer_results_land_in_extras() -> None:
    report = Synthesizer([StaticLayer("alpha", {"k": 1})]).synthesize("", EMPTY)

    assert report.analysis.extras == {"alpha": {"k": 1}}
    assert report.analysis.purposes is None
    assert report.to_dict()["analysis"]["extras"] == {"alpha": {"k": 1}}


def test_dependent_layer_receives_requirement_result() -> None:
    report = Synthesizer([StaticLayer("alpha", 21), DoublingLayer()]).synthesize("", EMPTY)

    assert report.analysis.extras["double"] == 42
    assert report.missing_layers == ()


def test_failing_layer_is_reported_missing(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="codeinsight")
    synthesizer = Synthesizer([FailingLayer(), StaticLayer("alpha", 1, 0.6)])

    report = synthesizer.synthesize("", EMPTY)

    assert report.missing_layers == ("flaky",)
    assert report.overall_score == pytest.approx(0.6)
    assert report.recommendations[0].category == "reliability"
    assert "flaky" in report.recommendations[0].message
    assert any("Layer flaky failed" in record.getMessage() for record in caplog.records)


def test_layers_requiring_a_failed_layer_are_missing_too() -> None:
    class NeedsFlaky(Layer):
        name = "needs-flaky"
        requires = ("flaky",)

        def run(self, context: LayerContext) -> Any:  # pragma: no cover - never reached
            return context.results["flaky"]

    report = Synthesizer([FailingLayer(), NeedsFlaky(), StaticLayer("alpha", 1, 0.6)]).synthesize("", EMPTY)

    assert report.missing_layers == ("flaky", "needs-flaky")
    assert report.analysis.extras == {"alpha": 1}


def test_layers_run_concurrently() -> None:
    barrier = threading.Barrier(3, timeout=5)

    class BarrierLayer(Layer):
        def __init__(self, name: str) -> None:
            self.name = name

        def run(self, context: LayerContext) -> Any:
            barrier.wait()
            return self.name

    layers = [BarrierLayer(name) for name in ("one", "two", "three")]
    report = Synthesizer(layers).synthesize("", EMPTY)

    assert report.missing_layers == ()
    assert sorted(report.analysis.extras) == ["one", "three", "two"]


def test_metrics_record_every_completed_synthesis() -> None:
    metrics = SuiteMetrics()
    synthesizer = Synthesizer([StaticLayer("alpha", 1, 0.5)], metrics=metrics)

    synthesizer.synthesize("", EMPTY)
    synthesizer.synthesize("", EMPTY)

    snapshot = metrics.snapshot()
    assert snapshot.total_analyses == 2
    assert snapshot.average_confidence == pytest.approx(0.5)


def test_metrics_reset() -> None:
    metrics = SuiteMetrics()
    assert metrics.record(1.0).total_analyses == 1
    metrics.reset()

    assert metrics.snapshot().total_analyses == 0
    assert metrics.snapshot().average_confidence == 0.0


def test_builtin_layers_produce_complete_analysis() -> None:
    features = extract_features(VALIDATION_WITH_NETWORK)
    report = Synthesizer(discover_layers()).synthesize(VALIDATION_WITH_NETWORK, features)

    analysis = report.analysis
    assert analysis.purposes is not None
    assert analysis.purposes.primary_purpose == "validation"
    assert analysis.anomalies and analysis.anomalies[0].marker == "network_call"
    assert analysis.goals == ()
    assert analysis.prediction is not None and analysis.prediction.prediction == "unknown"
    assert "prediction" not in report.layer_confidences
    assert set(report.layer_confidences) <= {"purpose", "anomalies", "archetypes"}
    assert 0.0 <= report.overall_score <= 1.0
    assert report.recommendations[0].priority == "high"
