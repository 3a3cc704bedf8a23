"""Public facade wiring every component behind one engine instance."""

from __future__ import annotations

from typing import List, Sequence

from .anomalies.detector import AnomalyDetector
from .anomalies.smells import SmellDetector, SmellThresholds
from .archetypes.census import ArchetypeCensus
from .archetypes.library import ArchetypeLibrary
from .archetypes.matcher import ArchetypeMatcher
from .config import EngineConfig
from .features.extractor import FeatureExtractor
from .goals.aligner import GoalAligner
from .goals.extractor import GoalExtractor
from .layers import discover_layers
from .layers.builtin import AnomalyLayer, ArchetypeLayer, GoalLayer, PredictionLayer, PurposeLayer, SmellLayer
from .learning.learner import PatternLearner
from .learning.store import PrototypeStore
from .logging import get_logger
from .models import (
    AlignmentResult,
    Anomaly,
    ArchetypeMatch,
    DeepReport,
    DiscoveryReport,
    DriftReport,
    FeatureSet,
    Goal,
    LearningResult,
    Prediction,
    PurposeResult,
    SimilarityResult,
    SmellReport,
    SuiteMetricsSnapshot,
    SynthesizedReport,
)
from .purpose.classifier import PurposeClassifier
from .synthesis.metrics import SuiteMetrics
from .synthesis.recommendations import archetype_recommendations
from .synthesis.relationships import cognitive_balance, correlate, find_relationships
from .synthesis.synthesizer import Synthesizer


class InsightEngine:
    """Owns the components, prototype store, census and suite metrics for one process scope."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        store: PrototypeStore | None = None,
        metrics: SuiteMetrics | None = None,
    ) -> None:
        self.config = config
        self.logger = get_logger("engine")

        purpose_threshold = config.purpose.confidence_threshold if config else 0.0
        alignment_threshold = config.alignment.threshold if config else 0.5
        anomaly_threshold = config.anomalies.threshold if config else 0.5

        library = ArchetypeLibrary()
        if config and config.archetypes:
            library = library.extended(config.archetypes)

        if store is None:
            store = PrototypeStore(config.learning.prototypes_path if config else None)

        self.extractor = FeatureExtractor()
        self.classifier = PurposeClassifier(threshold=purpose_threshold)
        self.goal_extractor = GoalExtractor(self.extractor)
        self.aligner = GoalAligner(self.extractor, threshold=alignment_threshold)
        self.detector = AnomalyDetector(threshold=anomaly_threshold)
        self.smell_detector = SmellDetector(
            config.smells.thresholds() if config else SmellThresholds(), self.extractor
        )
        self.learner = PatternLearner(self.extractor, store)
        self.matcher = ArchetypeMatcher(library)
        self.census = ArchetypeCensus(library)
        self.metrics = metrics if metrics is not None else SuiteMetrics()

        layers = discover_layers(
            config.synthesis.layers if config else None,
            instances={
                "purpose": PurposeLayer(self.classifier),
                "goals": GoalLayer(self.goal_extractor),
                "anomalies": AnomalyLayer(self.detector),
                "smells": SmellLayer(self.smell_detector),
                "archetypes": ArchetypeLayer(self.matcher),
                "prediction": PredictionLayer(self.learner),
            },
        )
        self.synthesizer = Synthesizer(
            layers,
            metrics=self.metrics,
            weights=config.synthesis.weights if config else None,
            max_workers=config.synthesis.max_workers if config else None,
            low_confidence=config.synthesis.low_confidence if config else 0.5,
        )

    @property
    def store(self) -> PrototypeStore:
        return self.learner.store

    # ------------------------------------------------------------------
    # Single-layer entry points

    def extract_features(self, code: object) -> FeatureSet:
        return self.extractor.extract(code)

    def classify_purpose(self, code: object, confidence_threshold: float | None = None) -> PurposeResult:
        return self.classifier.classify(self.extractor.extract(code), threshold=confidence_threshold)

    def extract_goals(self, code: object) -> List[Goal]:
        return self.goal_extractor.extract(code)

    def score_alignment(self, goal: object, code: object) -> AlignmentResult:
        return self.aligner.score(goal, code)

    def measure_drift(self, requirements: Sequence[object], code: object) -> DriftReport:
        return self.aligner.measure_drift(requirements, code)

    def detect_anomalies(self, code: object) -> List[Anomaly]:
        features = self.extractor.extract(code)
        purpose = self.classifier.classify(features)
        return self.detector.detect(features, purpose.primary)

    def detect_smells(self, code: object, kinds: Sequence[str] | None = None) -> SmellReport:
        return self.smell_detector.detect(code, self.extractor.extract(code), kinds)

    def learn_patterns(self, samples: Sequence[str], labels: Sequence[str]) -> LearningResult:
        return self.learner.learn(samples, labels)

    def predict(self, code: object) -> Prediction:
        return self.learner.predict(code)

    def similarity(self, code_a: object, code_b: object) -> SimilarityResult:
        return self.learner.similarity(code_a, code_b)

    def match_archetypes(self, code: object) -> List[ArchetypeMatch]:
        return self.matcher.match(self.extractor.extract(code))

    # ------------------------------------------------------------------
    # Holistic entry points

    def understand(self, code: object) -> SynthesizedReport:
        text = code if isinstance(code, str) else ""
        return self.synthesizer.synthesize(text, self.extractor.extract(text))

    def analyze_deep(self, code: object) -> DeepReport:
        report = self.understand(code)
        return DeepReport(
            report=report,
            relationships=find_relationships(report.analysis),
            balance=cognitive_balance(report.analysis, report.layer_confidences),
        )

    def comprehensive_analysis_with_discovery(
        self, code: object, name: str | None = None
    ) -> DiscoveryReport:
        deep = self.analyze_deep(code)
        analysis = deep.report.analysis
        sample_name = name or f"sample-{len(self.census) + 1}"
        self.census.record(sample_name, analysis.archetype_matches or ())
        self.logger.debug("Recorded %s in archetype census (%d samples)", sample_name, len(self.census))
        return DiscoveryReport(
            deep=deep,
            correlations=correlate(analysis),
            recommendations=deep.report.recommendations + archetype_recommendations(analysis),
            common_ground=self.census.common_ground(),
        )

    def get_suite_metrics(self) -> SuiteMetricsSnapshot:
        return self.metrics.snapshot()


__all__ = ["InsightEngine"]
