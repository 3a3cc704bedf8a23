"""Tests for analysis layer discovery."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from codeinsight.layers import BUILTIN_LAYERS, Layer, LayerContext, discover_layers
from codeinsight.layers.builtin import AnomalyLayer, PurposeLayer


class LineCountLayer(Layer):
    """Test layer used for plugin discovery validation."""

    def run(self, context: LayerContext) -> int:
        return context.features.line_count


def _patch_entry_points(monkeypatch, *entries) -> None:
    class DummyEntryPoints(list):
        def select(self, **kwargs):
            if kwargs.get("group") == "codeinsight.layers":
                return self
            return []

    monkeypatch.setattr(
        "codeinsight.layers.metadata.entry_points",
        lambda: DummyEntryPoints(entries),
        raising=False,
    )


def test_discover_layers_returns_builtins_in_dependency_order() -> None:
    layers = discover_layers()

    assert [layer.name for layer in layers] == list(BUILTIN_LAYERS)
    assert BUILTIN_LAYERS.index("purpose") < BUILTIN_LAYERS.index("anomalies")


def test_discover_layers_respects_enabled_filter() -> None:
    layers = discover_layers(["Purpose", "archetypes"])

    assert [layer.name for layer in layers] == ["purpose", "archetypes"]


def test_discover_layers_uses_supplied_instances() -> None:
    purpose = PurposeLayer()
    layers = discover_layers(["purpose"], instances={"purpose": purpose})

    assert layers == [purpose]


def test_discover_layers_loads_entry_points(monkeypatch) -> None:
    _patch_entry_points(monkeypatch, SimpleNamespace(name="lines", load=lambda: LineCountLayer))

    layers = discover_layers(["lines"])

    assert len(layers) == 1
    assert isinstance(layers[0], LineCountLayer)
    assert layers[0].name == "lines"


def test_entry_point_must_produce_a_layer(monkeypatch) -> None:
    _patch_entry_points(monkeypatch, SimpleNamespace(name="broken", load=lambda: 42))

    with pytest.raises(TypeError):
        discover_layers(["broken"])


def test_discover_layers_raises_for_unknown_name() -> None:
    with pytest.raises(ValueError, match="Unknown layers requested: does-not-exist"):
        discover_layers(["does-not-exist"])


def test_dependent_layer_without_its_requirement_is_rejected() -> None:
    with pytest.raises(ValueError, match="requires"):
        discover_layers(["anomalies"])


def test_anomaly_layer_declares_purpose_requirement() -> None:
    assert AnomalyLayer.requires == ("purpose",)
