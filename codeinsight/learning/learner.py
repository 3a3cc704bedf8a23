"""Prototype learning, nearest-prototype prediction and pairwise similarity."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..errors import InputError
from ..features.extractor import FeatureExtractor
from ..logging import get_logger
from ..models import FeatureSet, LearningResult, Prediction, SimilarityResult
from .store import PrototypeStore
from .vectors import TermVectorizer, cosine

UNKNOWN_LABEL = "unknown"

_INTERPRETATIONS: Tuple[Tuple[float, str], ...] = (
    (0.9, "Very similar - likely same purpose"),
    (0.7, "Similar - related functionality"),
    (0.5, "Moderately similar - some common patterns"),
    (0.3, "Slightly similar - few common elements"),
)


def interpret_similarity(score: float) -> str:
    for floor, label in _INTERPRETATIONS:
        if score >= floor:
            return label
    return "Very different - unrelated code"


class PatternLearner:
    """Learns one centroid per label and predicts labels for new code."""

    def __init__(
        self,
        extractor: FeatureExtractor | None = None,
        store: PrototypeStore | None = None,
        vectorizer: TermVectorizer | None = None,
    ) -> None:
        self.extractor = extractor or FeatureExtractor()
        self.store = store if store is not None else PrototypeStore()
        self.vectorizer = vectorizer or TermVectorizer()
        self.logger = get_logger("learning")

    def learn(self, samples: Sequence[str], labels: Sequence[str]) -> LearningResult:
        _validate_training_input(samples, labels)
        pairs = [
            (label, self.vectorizer.vectorize(self.extractor.extract(sample)))
            for sample, label in zip(samples, labels)
        ]
        updated = self.store.update(pairs)
        self.logger.debug("Learned %d samples across %d labels", len(pairs), len(updated))
        return LearningResult(success=True, updated_prototypes=updated)

    def predict(self, code: object) -> Prediction:
        return self.predict_features(self.extractor.extract(code))

    def predict_features(self, features: FeatureSet) -> Prediction:
        prototypes = self.store.snapshot()
        if not prototypes:
            return Prediction(prediction=UNKNOWN_LABEL, confidence=0.0)

        vector = self.vectorizer.vectorize(features)
        scored: List[Tuple[int, str, float]] = [
            (index, label, cosine(vector, prototype.centroid))
            for index, (label, prototype) in enumerate(prototypes.items())
        ]
        scored.sort(key=lambda item: (-item[2], item[0]))
        _, best_label, best = scored[0]
        if best <= 0:
            return Prediction(prediction=UNKNOWN_LABEL, confidence=0.0)

        second = scored[1][2] if len(scored) > 1 else 0.0
        margin = (best - second) / best
        confidence = round(min(best * (0.5 + 0.5 * margin), 1.0), 4)
        alternatives = tuple((label, round(score, 4)) for _, label, score in scored[1:] if score > 0)
        return Prediction(prediction=best_label, confidence=confidence, alternatives=alternatives)

    def similarity(self, code_a: object, code_b: object) -> SimilarityResult:
        return self.similarity_features(self.extractor.extract(code_a), self.extractor.extract(code_b))

    def similarity_features(self, left: FeatureSet, right: FeatureSet) -> SimilarityResult:
        left_vector = self.vectorizer.vectorize(left)
        right_vector = self.vectorizer.vectorize(right)
        # Blank input has no lines; non-blank input with no terms still equals itself.
        if left.line_count and right.line_count and left_vector == right_vector:
            score = 1.0
        else:
            score = cosine(left_vector, right_vector)
        return SimilarityResult(score=score, interpretation=interpret_similarity(score))

    def prototype_summary(self) -> Dict[str, int]:
        return {label: prototype.sample_count for label, prototype in self.store.snapshot().items()}


def _validate_training_input(samples: object, labels: object) -> None:
    for name, value in (("samples", samples), ("labels", labels)):
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise InputError(f"{name} must be a sequence of strings")
    if len(samples) != len(labels):  # type: ignore[arg-type]
        raise InputError(
            f"samples and labels must have the same length ({len(samples)} != {len(labels)})"  # type: ignore[arg-type]
        )
    for sample in samples:  # type: ignore[union-attr]
        if not isinstance(sample, str):
            raise InputError("every sample must be a string")
    for label in labels:  # type: ignore[union-attr]
        if not isinstance(label, str) or not label.strip():
            raise InputError("every label must be a non-empty string")


__all__ = ["PatternLearner", "UNKNOWN_LABEL", "interpret_similarity"]
