"""Versioned catalogue of structural archetype templates."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Sequence, Tuple

from ..errors import ConfigError
from ..features.markers import MARKERS_BY_NAME
from ..models import ArchetypeTemplate

LIBRARY_VERSION = "1"

ARCHETYPE_TEMPLATES: Tuple[ArchetypeTemplate, ...] = (
    ArchetypeTemplate(
        name="ClassConstructor",
        description="Class holding state initialised by a constructor",
        required=("class_declaration",),
        optional=("constructor", "instance_state", "method_definition"),
        base_confidence=0.9,
    ),
    ArchetypeTemplate(
        name="FactoryPattern",
        description="Centralized object creation dispatched by type",
        required=("static_method", "creation_call"),
        optional=("type_dispatch", "create_method"),
        base_confidence=0.8,
    ),
    ArchetypeTemplate(
        name="BuilderPattern",
        description="Fluent interface assembling an object before build()",
        required=("return_self", "build_method"),
        optional=("with_method", "method_chaining", "creation_call"),
        base_confidence=0.85,
    ),
    ArchetypeTemplate(
        name="RepositoryPattern",
        description="Data access abstraction delegating to a store",
        required=("data_access",),
        optional=("delegation", "storage_access", "class_declaration", "async"),
        base_confidence=0.8,
    ),
    ArchetypeTemplate(
        name="ObserverPattern",
        description="Subscribers registered and notified of events",
        required=("subscribe",),
        optional=("emit", "listener_collection", "loop"),
        base_confidence=0.75,
    ),
    ArchetypeTemplate(
        name="SingletonPattern",
        description="Single shared instance exposed through a static accessor",
        required=("static_instance",),
        optional=("static_method", "conditional", "creation_call"),
        base_confidence=0.7,
    ),
    ArchetypeTemplate(
        name="AsyncHandler",
        description="Asynchronous operation with guarded failure handling",
        required=("async",),
        optional=("try_catch", "network_call", "throw"),
        base_confidence=0.6,
    ),
    ArchetypeTemplate(
        name="FunctionalPipeline",
        description="Data flowing through chained collection transforms",
        required=("collection_transform",),
        optional=("method_chaining", "function_definition"),
        base_confidence=0.6,
    ),
)


class ArchetypeLibrary:
    """Ordered, read-only collection of templates; order is the ranking tie-break."""

    def __init__(
        self,
        templates: Sequence[ArchetypeTemplate] = ARCHETYPE_TEMPLATES,
        *,
        version: str = LIBRARY_VERSION,
    ) -> None:
        names = [template.name for template in templates]
        if len(set(names)) != len(names):
            raise ValueError("Archetype template names must be unique")
        self._templates = tuple(templates)
        self.version = version

    @property
    def templates(self) -> Tuple[ArchetypeTemplate, ...]:
        return self._templates

    def names(self) -> Tuple[str, ...]:
        return tuple(template.name for template in self._templates)

    def get(self, name: str) -> ArchetypeTemplate | None:
        for template in self._templates:
            if template.name == name:
                return template
        return None

    def index_of(self, name: str) -> int:
        for index, template in enumerate(self._templates):
            if template.name == name:
                return index
        return len(self._templates)

    def extended(self, extra: Iterable[ArchetypeTemplate]) -> "ArchetypeLibrary":
        """Return a new library with ``extra`` templates appended (or replacing same-named ones)."""
        merged: Dict[str, ArchetypeTemplate] = {template.name: template for template in self._templates}
        for template in extra:
            merged[template.name] = template
        return ArchetypeLibrary(tuple(merged.values()), version=f"{self.version}+custom")

    def __iter__(self):
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)


def template_from_mapping(data: Mapping[str, object]) -> ArchetypeTemplate:
    """Build a template from configuration data, validating marker names."""
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError("archetype templates need a non-empty 'name'")
    required = _marker_list(data.get("required"), name, "required")
    if not required:
        raise ConfigError(f"archetype '{name}' must declare at least one required marker")
    optional = _marker_list(data.get("optional"), name, "optional")
    base = data.get("base_confidence", 0.5)
    if isinstance(base, bool) or not isinstance(base, (int, float)) or not 0 <= float(base) <= 1:
        raise ConfigError(f"archetype '{name}' base_confidence must be a number in [0, 1]")
    description = data.get("description")
    return ArchetypeTemplate(
        name=name.strip(),
        description=description if isinstance(description, str) else "",
        required=required,
        optional=optional,
        base_confidence=float(base),
    )


def _marker_list(value: object, name: str, field_name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"archetype '{name}' {field_name} must be a list of marker names")
    markers = tuple(str(item) for item in value)
    unknown = [marker for marker in markers if marker not in MARKERS_BY_NAME]
    if unknown:
        raise ConfigError(f"archetype '{name}' references unknown markers: {', '.join(unknown)}")
    return markers


__all__ = ["ARCHETYPE_TEMPLATES", "ArchetypeLibrary", "LIBRARY_VERSION", "template_from_mapping"]
