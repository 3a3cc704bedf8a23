"""Scores feature sets against the purpose catalogue."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..logging import get_logger
from ..models import FeatureSet, PurposeCategory, PurposeResult, PurposeScore
from .catalogue import PURPOSE_CATEGORIES

_HINT_BOOST = 1.3


class PurposeClassifier:
    """Ranks purpose categories by weighted keyword and marker overlap.

    Confidence for a category is the weight of its matched signature divided
    by the weight of its whole signature, so every category is normalized by
    its own maximum attainable score. Categories below ``threshold`` are kept
    but ranked after the rest; callers decide whether to drop them.
    """

    def __init__(
        self,
        categories: Sequence[PurposeCategory] = PURPOSE_CATEGORIES,
        *,
        threshold: float = 0.0,
    ) -> None:
        if not categories:
            raise ValueError("PurposeClassifier requires at least one category")
        self.categories = tuple(categories)
        self.threshold = threshold
        self.logger = get_logger("purpose")

    def classify(self, features: FeatureSet, *, threshold: float | None = None) -> PurposeResult:
        scores = [(category, self.score(category, features)) for category in self.categories]
        return self._rank(scores, self.threshold if threshold is None else threshold)

    def suggest(
        self,
        features: FeatureSet,
        hints: Sequence[str],
        *,
        threshold: float | None = None,
    ) -> PurposeResult:
        """Classify, boosting categories named by any of the caller's hints."""
        lowered = [hint.lower() for hint in hints if isinstance(hint, str)]
        scores: List[Tuple[PurposeCategory, float]] = []
        for category in self.categories:
            confidence = self.score(category, features)
            if any(category.name in hint for hint in lowered):
                confidence = round(min(confidence * _HINT_BOOST, 1.0), 4)
            scores.append((category, confidence))
        return self._rank(scores, self.threshold if threshold is None else threshold)

    @staticmethod
    def score(category: PurposeCategory, features: FeatureSet) -> float:
        maximum = category.max_score
        if maximum <= 0:
            return 0.0
        matched = sum(
            weight for keyword, weight in category.keywords.items() if features.has_stem(keyword)
        )
        matched += sum(
            weight for marker, weight in category.marker_weights.items() if features.has_marker(marker)
        )
        return round(min(matched / maximum, 1.0), 4)

    def _rank(self, scores: List[Tuple[PurposeCategory, float]], threshold: float) -> PurposeResult:
        indexed = list(enumerate(scores))
        indexed.sort(key=lambda item: (item[1][1] < threshold, -item[1][1], item[0]))
        ranked = tuple(PurposeScore(category=category, confidence=confidence) for _, (category, confidence) in indexed)

        # All-zero input still names the first declared category as nominal primary.
        primary = ranked[0]
        self.logger.debug("Primary purpose %s (%.2f)", primary.name, primary.confidence)
        return PurposeResult(purposes=ranked, primary=primary, confidence=primary.confidence)


__all__ = ["PurposeClassifier"]
