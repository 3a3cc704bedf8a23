"""Layers wrapping the analysis components fanned out by the synthesizer."""

from __future__ import annotations

from typing import Optional, Tuple

from ..anomalies.detector import AnomalyDetector, anomaly_severity
from ..anomalies.smells import SmellDetector
from ..archetypes.matcher import ArchetypeMatcher
from ..goals.extractor import GoalExtractor
from ..learning.learner import PatternLearner
from ..models import Anomaly, ArchetypeMatch, Goal, Prediction, PurposeResult, SmellReport
from ..purpose.classifier import PurposeClassifier
from .base import Layer, LayerContext


class PurposeLayer(Layer):
    name = "purpose"

    def __init__(self, classifier: PurposeClassifier | None = None) -> None:
        self.classifier = classifier or PurposeClassifier()

    def run(self, context: LayerContext) -> PurposeResult:
        return self.classifier.classify(context.features)

    def confidence(self, result: PurposeResult, context: LayerContext) -> Optional[float]:
        return result.confidence


class GoalLayer(Layer):
    name = "goals"

    def __init__(self, extractor: GoalExtractor | None = None) -> None:
        self.extractor = extractor or GoalExtractor()

    def run(self, context: LayerContext) -> Tuple[Goal, ...]:
        return tuple(self.extractor.from_features(context.features))


class AnomalyLayer(Layer):
    name = "anomalies"
    requires = ("purpose",)

    def __init__(self, detector: AnomalyDetector | None = None) -> None:
        self.detector = detector or AnomalyDetector()

    def run(self, context: LayerContext) -> Tuple[Anomaly, ...]:
        purpose: PurposeResult = context.results["purpose"]
        return tuple(self.detector.detect(context.features, purpose.primary))

    def confidence(self, result: Tuple[Anomaly, ...], context: LayerContext) -> Optional[float]:
        purpose: PurposeResult = context.results["purpose"]
        # Without a purpose baseline the detector had nothing to compare against.
        if purpose.primary is None or purpose.primary.confidence <= 0:
            return None
        return round(1.0 - anomaly_severity(result), 4)


class SmellLayer(Layer):
    name = "smells"

    def __init__(self, detector: SmellDetector | None = None) -> None:
        self.detector = detector or SmellDetector()

    def run(self, context: LayerContext) -> SmellReport:
        return self.detector.detect(context.code, context.features)


class ArchetypeLayer(Layer):
    name = "archetypes"

    def __init__(self, matcher: ArchetypeMatcher | None = None) -> None:
        self.matcher = matcher or ArchetypeMatcher()

    def run(self, context: LayerContext) -> Tuple[ArchetypeMatch, ...]:
        return tuple(self.matcher.match(context.features))

    def confidence(self, result: Tuple[ArchetypeMatch, ...], context: LayerContext) -> Optional[float]:
        return result[0].confidence if result else 0.0


class PredictionLayer(Layer):
    name = "prediction"

    def __init__(self, learner: PatternLearner | None = None) -> None:
        self.learner = learner or PatternLearner()

    def run(self, context: LayerContext) -> Prediction:
        return self.learner.predict_features(context.features)

    def confidence(self, result: Prediction, context: LayerContext) -> Optional[float]:
        if not len(self.learner.store):
            return None
        return result.confidence


__all__ = ["AnomalyLayer", "ArchetypeLayer", "GoalLayer", "PredictionLayer", "PurposeLayer", "SmellLayer"]
