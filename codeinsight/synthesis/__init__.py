"""Holistic synthesis of layer results."""

from .metrics import SuiteMetrics
from .recommendations import archetype_recommendations, build_recommendations
from .relationships import cognitive_balance, correlate, find_relationships
from .synthesizer import DEFAULT_WEIGHTS, Synthesizer

__all__ = [
    "DEFAULT_WEIGHTS",
    "SuiteMetrics",
    "Synthesizer",
    "archetype_recommendations",
    "build_recommendations",
    "cognitive_balance",
    "correlate",
    "find_relationships",
]
