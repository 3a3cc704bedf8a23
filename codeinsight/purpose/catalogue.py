"""Static catalogue of purpose categories."""

from __future__ import annotations

from typing import Dict, Mapping, Tuple

from ..features.text import stem
from ..models import PurposeCategory


def _signature(keywords: Mapping[str, float]) -> Dict[str, float]:
    # Keys are stored stemmed so they compare against FeatureSet.keyword_counts.
    stemmed: Dict[str, float] = {}
    for keyword, weight in keywords.items():
        key = stem(keyword)
        stemmed[key] = max(weight, stemmed.get(key, 0.0))
    return stemmed


def _category(
    name: str,
    description: str,
    keywords: Mapping[str, float],
    marker_weights: Mapping[str, float],
    expected_markers: Mapping[str, float],
) -> PurposeCategory:
    return PurposeCategory(
        name=name,
        description=description,
        keywords=_signature(keywords),
        marker_weights=dict(marker_weights),
        expected_markers=dict(expected_markers),
    )


PURPOSE_CATEGORIES: Tuple[PurposeCategory, ...] = (
    _category(
        "validation",
        "Validates data format or constraints",
        {
            "validate": 1.0, "check": 0.8, "verify": 0.8, "invalid": 0.6, "assert": 0.6,
            "regex": 0.6, "ensure": 0.5, "sanitize": 0.5, "test": 0.4, "require": 0.4,
        },
        {"regex": 0.8, "conditional": 0.6, "comparison": 0.5, "throw": 0.4},
        {"conditional": 0.7, "comparison": 0.3, "regex": 0.2, "throw": 0.2, "function_definition": 0.1},
    ),
    _category(
        "data-transformation",
        "Transforms data between formats",
        {
            "transform": 1.0, "convert": 0.8, "map": 0.8, "filter": 0.6, "reduce": 0.6,
            "parse": 0.6, "format": 0.5, "serialize": 0.5, "normalize": 0.5, "sort": 0.4,
        },
        {"collection_transform": 1.0, "loop": 0.4, "arithmetic": 0.3},
        {"collection_transform": 0.4, "loop": 0.2, "arithmetic": 0.1, "function_definition": 0.1},
    ),
    _category(
        "api-communication",
        "Handles API communication",
        {
            "fetch": 1.0, "api": 0.9, "request": 0.8, "http": 0.8, "response": 0.7,
            "endpoint": 0.6, "url": 0.5, "axios": 0.5, "client": 0.5, "post": 0.4, "get": 0.2,
        },
        {"network_call": 1.0, "async": 0.6, "try_catch": 0.3},
        {"network_call": 0.8, "async": 0.3, "try_catch": 0.2, "conditional": 0.1},
    ),
    _category(
        "error-handling",
        "Handles errors and exceptions",
        {
            "error": 1.0, "catch": 0.8, "exception": 0.8, "try": 0.6, "throw": 0.6,
            "raise": 0.6, "fail": 0.5, "retry": 0.5, "fallback": 0.5,
        },
        {"try_catch": 1.0, "throw": 0.7, "logging_call": 0.3},
        {"try_catch": 0.8, "throw": 0.3, "logging_call": 0.2, "conditional": 0.1},
    ),
    _category(
        "persistence",
        "Stores and retrieves records from a backing store",
        {
            "repository": 1.0, "database": 0.9, "save": 0.8, "store": 0.8, "query": 0.7,
            "find": 0.6, "delete": 0.6, "insert": 0.6, "load": 0.5, "cache": 0.5, "record": 0.4,
        },
        {"data_access": 1.0, "storage_access": 0.8, "delegation": 0.4, "async": 0.2},
        {
            "data_access": 0.7, "storage_access": 0.3, "delegation": 0.3, "async": 0.2,
            "class_declaration": 0.1, "constructor": 0.1, "instance_state": 0.1, "try_catch": 0.1,
        },
    ),
    _category(
        "event-handling",
        "Publishes, subscribes to or reacts to events",
        {
            "event": 1.0, "subscribe": 0.9, "emit": 0.9, "listen": 0.8, "notify": 0.8,
            "observer": 0.8, "handler": 0.6, "callback": 0.6, "dispatch": 0.5, "trigger": 0.5,
        },
        {"subscribe": 1.0, "emit": 0.8, "listener_collection": 0.6},
        {"subscribe": 0.6, "emit": 0.4, "listener_collection": 0.3, "loop": 0.1, "collection_transform": 0.1},
    ),
    _category(
        "ui-rendering",
        "Renders views or manipulates the DOM",
        {
            "render": 1.0, "component": 0.8, "view": 0.6, "display": 0.6, "element": 0.6,
            "html": 0.6, "template": 0.5, "style": 0.4, "click": 0.4, "state": 0.3,
        },
        {"dom_access": 1.0, "subscribe": 0.2},
        {"dom_access": 0.7, "subscribe": 0.3, "emit": 0.1, "instance_state": 0.1},
    ),
    _category(
        "object-construction",
        "Creates and assembles objects",
        {
            "build": 1.0, "factory": 1.0, "create": 0.8, "construct": 0.7, "instance": 0.6,
            "new": 0.4, "make": 0.4,
        },
        {
            "creation_call": 1.0, "return_self": 0.7, "build_method": 0.6, "static_method": 0.5,
            "with_method": 0.5, "type_dispatch": 0.4, "static_instance": 0.4, "create_method": 0.4,
        },
        {
            "creation_call": 0.6, "static_method": 0.3, "return_self": 0.3, "build_method": 0.3,
            "with_method": 0.3, "type_dispatch": 0.3, "static_instance": 0.3, "create_method": 0.3,
            "method_chaining": 0.2, "instance_state": 0.2, "constructor": 0.2, "class_declaration": 0.2,
        },
    ),
    _category(
        "state-management",
        "Holds and updates object state",
        {
            "state": 1.0, "update": 0.6, "reset": 0.5, "model": 0.5, "value": 0.3,
            "config": 0.4, "count": 0.3, "set": 0.3,
        },
        {"instance_state": 1.0, "constructor": 0.6, "class_declaration": 0.5},
        {"instance_state": 0.6, "constructor": 0.3, "class_declaration": 0.3, "method_definition": 0.1},
    ),
)

CATEGORY_INDEX: Dict[str, int] = {category.name: index for index, category in enumerate(PURPOSE_CATEGORIES)}


def get_category(name: str) -> PurposeCategory | None:
    index = CATEGORY_INDEX.get(name)
    return PURPOSE_CATEGORIES[index] if index is not None else None


__all__ = ["CATEGORY_INDEX", "PURPOSE_CATEGORIES", "get_category"]
