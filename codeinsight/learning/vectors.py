"""Bag-of-terms vectors built from feature sets."""

from __future__ import annotations

import math
from typing import Dict, Mapping

from ..models import FeatureSet

_MARKER_PREFIX = "marker:"


class TermVectorizer:
    """Builds L2-normalized term vectors from stems and structural markers."""

    def __init__(self, *, marker_weight: float = 1.0) -> None:
        self.marker_weight = marker_weight

    def vectorize(self, features: FeatureSet) -> Dict[str, float]:
        counts: Dict[str, float] = {stem: float(count) for stem, count in features.keyword_counts.items()}
        if self.marker_weight > 0:
            for marker, count in features.marker_counts.items():
                counts[f"{_MARKER_PREFIX}{marker}"] = count * self.marker_weight
        if not counts:
            return {}
        norm = math.sqrt(sum(value * value for value in counts.values())) or 1.0
        return {term: value / norm for term, value in sorted(counts.items())}


def cosine(left: Mapping[str, float], right: Mapping[str, float]) -> float:
    """Cosine similarity in [0, 1]; symmetric and exactly 1.0 for equal non-empty vectors."""
    if not left or not right:
        return 0.0
    if dict(left) == dict(right):
        return 1.0
    shared = sorted(set(left) & set(right))
    dot = sum(left[term] * right[term] for term in shared)
    left_norm = math.sqrt(sum(value * value for _, value in sorted(left.items())))
    right_norm = math.sqrt(sum(value * value for _, value in sorted(right.items())))
    if dot <= 0 or left_norm == 0 or right_norm == 0:
        return 0.0
    # Norms are multiplied in sorted key order so swapping arguments is exact.
    first, second = sorted((left_norm, right_norm))
    return round(min(dot / (first * second), 1.0), 6)


def running_mean(
    centroid: Mapping[str, float], vector: Mapping[str, float], count: int
) -> Dict[str, float]:
    """Fold ``vector`` into a centroid that already averages ``count`` samples."""
    total = count + 1
    terms = set(centroid) | set(vector)
    updated: Dict[str, float] = {}
    for term in sorted(terms):
        current = centroid.get(term, 0.0)
        value = current + (vector.get(term, 0.0) - current) / total
        if value != 0.0:
            updated[term] = value
    return updated


__all__ = ["TermVectorizer", "cosine", "running_mean"]
