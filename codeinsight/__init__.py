"""Infer purpose, intent, anomalies and design archetypes from raw source code."""

from __future__ import annotations

import threading
from typing import List, Sequence

from .config import EngineConfig, load_config
from .engine import InsightEngine
from .errors import ConfigError, InputError, InsightError
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

__version__ = "0.1.0"

_default_engine: InsightEngine | None = None
_default_lock = threading.Lock()


def default_engine() -> InsightEngine:
    """Return the process-wide engine behind the module-level functions."""
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            _default_engine = InsightEngine()
        return _default_engine


def reset_default_engine(engine: InsightEngine | None = None) -> None:
    """Replace (or drop) the process-wide engine, e.g. between test cases."""
    global _default_engine
    with _default_lock:
        _default_engine = engine


def extract_features(code: object) -> FeatureSet:
    return default_engine().extract_features(code)


def classify_purpose(code: object, confidence_threshold: float | None = None) -> PurposeResult:
    return default_engine().classify_purpose(code, confidence_threshold)


def extract_goals(code: object) -> List[Goal]:
    return default_engine().extract_goals(code)


def score_alignment(goal: object, code: object) -> AlignmentResult:
    return default_engine().score_alignment(goal, code)


def measure_drift(requirements: Sequence[object], code: object) -> DriftReport:
    return default_engine().measure_drift(requirements, code)


def detect_anomalies(code: object) -> List[Anomaly]:
    return default_engine().detect_anomalies(code)


def detect_smells(code: object, kinds: Sequence[str] | None = None) -> SmellReport:
    return default_engine().detect_smells(code, kinds)


def learn_patterns(samples: Sequence[str], labels: Sequence[str]) -> LearningResult:
    return default_engine().learn_patterns(samples, labels)


def predict(code: object) -> Prediction:
    return default_engine().predict(code)


def similarity(code_a: object, code_b: object) -> SimilarityResult:
    return default_engine().similarity(code_a, code_b)


def match_archetypes(code: object) -> List[ArchetypeMatch]:
    return default_engine().match_archetypes(code)


def understand(code: object) -> SynthesizedReport:
    return default_engine().understand(code)


def analyze_deep(code: object) -> DeepReport:
    return default_engine().analyze_deep(code)


def comprehensive_analysis_with_discovery(code: object, name: str | None = None) -> DiscoveryReport:
    return default_engine().comprehensive_analysis_with_discovery(code, name)


def get_suite_metrics() -> SuiteMetricsSnapshot:
    return default_engine().get_suite_metrics()


__all__ = [
    "ConfigError",
    "EngineConfig",
    "InputError",
    "InsightEngine",
    "InsightError",
    "analyze_deep",
    "classify_purpose",
    "comprehensive_analysis_with_discovery",
    "default_engine",
    "detect_anomalies",
    "detect_smells",
    "extract_features",
    "extract_goals",
    "get_suite_metrics",
    "learn_patterns",
    "load_config",
    "match_archetypes",
    "measure_drift",
    "predict",
    "reset_default_engine",
    "score_alignment",
    "similarity",
    "understand",
]
