"""Analysis layer implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Mapping, Sequence, Set

from .base import Layer, LayerContext
from .builtin import AnomalyLayer, ArchetypeLayer, GoalLayer, PredictionLayer, PurposeLayer, SmellLayer

_ENTRY_POINT_GROUP = "codeinsight.layers"

_BUILTIN_FACTORIES: dict[str, Callable[[], Layer]] = {
    "purpose": PurposeLayer,
    "goals": GoalLayer,
    "anomalies": AnomalyLayer,
    "smells": SmellLayer,
    "archetypes": ArchetypeLayer,
    "prediction": PredictionLayer,
}

BUILTIN_LAYERS = tuple(_BUILTIN_FACTORIES)


def discover_layers(
    enabled: Sequence[str] | None = None,
    *,
    instances: Mapping[str, Layer] | None = None,
) -> List[Layer]:
    """Return instantiated layers in dependency order, honoring optional enabled names.

    ``instances`` supplies pre-built layers (sharing the caller's components)
    in place of the default factories.
    """

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}
    provided = {name.lower(): layer for name, layer in (instances or {}).items()}

    layers: List[Layer] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Layer]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = provided.get(key) or factory()
        if not isinstance(instance, Layer):
            raise TypeError(f"Layer factory for '{name}' did not return a Layer instance")
        if not instance.name:
            instance.name = key
        layers.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - broken plugin
            raise RuntimeError(f"Failed to load layer entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> Layer:
            return _coerce_layer(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown layers requested: {missing}")

    _check_requirements(layers)
    return layers


def _check_requirements(layers: Sequence[Layer]) -> None:
    available: Set[str] = set()
    for layer in layers:
        absent = [name for name in layer.requires if name not in available]
        if absent:
            raise ValueError(f"Layer '{layer.name}' requires disabled or later layers: {', '.join(absent)}")
        available.add(layer.name)


def _coerce_layer(obj: object) -> Layer:
    if isinstance(obj, Layer):
        return obj
    if isinstance(obj, type) and issubclass(obj, Layer):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Layer):
            return instance
    raise TypeError("Layer entry point must be a Layer subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BUILTIN_LAYERS",
    "discover_layers",
    "Layer",
    "LayerContext",
]
