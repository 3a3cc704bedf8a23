"""Core data models shared across codeinsight components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, Dict, Mapping, Optional, Tuple


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _plain(asdict(value))
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class _Serialisable:
    """Adds a ``to_dict`` producing JSON-ready data."""

    def to_dict(self) -> Dict[str, Any]:
        return _plain(self)


# ----------------------------------------------------------------------
# Feature extraction


@dataclass(frozen=True)
class CommentToken(_Serialisable):
    """A single comment line and the source line it came from."""

    line: int
    text: str


@dataclass(frozen=True)
class FeatureSet(_Serialisable):
    """Normalized signal profile extracted from one code unit."""

    identifiers: Tuple[str, ...] = ()
    words: Tuple[str, ...] = ()
    keyword_counts: Mapping[str, int] = field(default_factory=dict)
    markers: Tuple[str, ...] = ()
    marker_counts: Mapping[str, int] = field(default_factory=dict)
    marker_lines: Mapping[str, int] = field(default_factory=dict)
    comments: Tuple[CommentToken, ...] = ()
    comment_tags: Tuple[Tuple[str, int], ...] = ()
    line_count: int = 0
    decision_points: int = 0
    max_nesting: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.identifiers or self.markers or self.comments)

    def has_marker(self, name: str) -> bool:
        return name in self.marker_counts

    def has_stem(self, stem: str) -> bool:
        return stem in self.keyword_counts


@dataclass(frozen=True)
class CodeUnit(_Serialisable):
    """Raw code text paired with its extracted features."""

    text: str
    features: FeatureSet


# ----------------------------------------------------------------------
# Static catalogues


@dataclass(frozen=True)
class PurposeCategory:
    """Purpose category with its keyword signature and marker weight table."""

    name: str
    description: str
    keywords: Mapping[str, float]
    marker_weights: Mapping[str, float] = field(default_factory=dict)
    expected_markers: Mapping[str, float] = field(default_factory=dict)

    @property
    def max_score(self) -> float:
        return sum(self.keywords.values()) + sum(self.marker_weights.values())


@dataclass(frozen=True)
class ArchetypeTemplate:
    """Named structural template evaluated against a feature set."""

    name: str
    description: str
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()
    base_confidence: float = 0.5


# ----------------------------------------------------------------------
# Layer results


@dataclass(frozen=True)
class PurposeScore:
    category: PurposeCategory
    confidence: float

    @property
    def name(self) -> str:
        return self.category.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "purpose": self.category.name,
            "confidence": self.confidence,
            "description": self.category.description,
        }


@dataclass(frozen=True)
class PurposeResult:
    """Ranked purpose categories for one code unit."""

    purposes: Tuple[PurposeScore, ...]
    primary: Optional[PurposeScore]
    confidence: float

    @property
    def primary_purpose(self) -> Optional[str]:
        return self.primary.name if self.primary else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "purposes": [score.to_dict() for score in self.purposes],
            "primary_purpose": self.primary_purpose,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class Goal(_Serialisable):
    """Developer intent mined from a marked comment."""

    type: str
    priority: str
    text: str
    line: int


@dataclass(frozen=True)
class AlignmentResult(_Serialisable):
    """How well a natural-language goal is reflected in code terms."""

    aligned: bool
    score: float
    matches: Tuple[Tuple[str, str], ...] = ()
    missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DriftReport(_Serialisable):
    """Requirements that no longer align with the code."""

    total_requirements: int
    misaligned: int
    drift_score: float
    details: Tuple[Tuple[str, float], ...] = ()


@dataclass(frozen=True)
class Anomaly(_Serialisable):
    """Structural marker that deviates from the classified purpose profile."""

    marker: str
    kind: str
    deviation: float
    severity: str
    reason: str
    line: Optional[int] = None


@dataclass(frozen=True)
class CodeSmell(_Serialisable):
    """A smell pattern or complexity issue found in a code unit."""

    kind: str
    severity: str
    message: str
    confidence: float
    occurrences: int = 1
    line: Optional[int] = None


@dataclass(frozen=True)
class ComplexityProfile(_Serialisable):
    cyclomatic: int
    cognitive: int
    line_count: int
    max_nesting: int


@dataclass(frozen=True)
class SmellReport:
    """Smells found in one code unit plus the complexity figures behind them."""

    smells: Tuple[CodeSmell, ...]
    complexity: ComplexityProfile
    confidence: float

    def summary(self) -> Dict[str, Any]:
        by_severity = {"high": 0, "medium": 0, "low": 0}
        by_kind: Dict[str, int] = {}
        for smell in self.smells:
            by_severity[smell.severity] = by_severity.get(smell.severity, 0) + 1
            by_kind[smell.kind] = by_kind.get(smell.kind, 0) + 1
        return {"total": len(self.smells), "by_severity": by_severity, "by_kind": by_kind}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "smells": _plain(self.smells),
            "complexity": self.complexity.to_dict(),
            "confidence": self.confidence,
            "summary": self.summary(),
        }


@dataclass(frozen=True)
class ArchetypeMatch(_Serialisable):
    pattern: str
    confidence: float
    description: str = ""
    matched_optional: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PatternPrototype(_Serialisable):
    """Learned centroid representing a label's typical feature profile."""

    label: str
    centroid: Mapping[str, float]
    sample_count: int


@dataclass(frozen=True)
class LearningResult(_Serialisable):
    success: bool
    updated_prototypes: Tuple[PatternPrototype, ...] = ()


@dataclass(frozen=True)
class Prediction(_Serialisable):
    prediction: str
    confidence: float
    alternatives: Tuple[Tuple[str, float], ...] = ()


@dataclass(frozen=True)
class SimilarityResult(_Serialisable):
    score: float
    interpretation: str


@dataclass(frozen=True)
class AnalysisResult:
    """Per-layer outputs for one code unit. ``None`` marks a layer that did not run."""

    purposes: Optional[PurposeResult]
    goals: Optional[Tuple[Goal, ...]]
    archetype_matches: Optional[Tuple[ArchetypeMatch, ...]]
    anomalies: Optional[Tuple[Anomaly, ...]]
    prediction: Optional[Prediction] = None
    alignment: Optional[AlignmentResult] = None
    similarity: Optional[SimilarityResult] = None
    smells: Optional[SmellReport] = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "purposes": self.purposes.to_dict() if self.purposes else None,
            "goals": _plain(self.goals) if self.goals is not None else None,
            "archetype_matches": (
                _plain(self.archetype_matches) if self.archetype_matches is not None else None
            ),
            "anomalies": _plain(self.anomalies) if self.anomalies is not None else None,
            "prediction": self.prediction.to_dict() if self.prediction else None,
            "alignment": self.alignment.to_dict() if self.alignment else None,
            "similarity": self.similarity.to_dict() if self.similarity else None,
            "smells": self.smells.to_dict() if self.smells else None,
            **({"extras": _plain(self.extras)} if self.extras else {}),
        }


# ----------------------------------------------------------------------
# Synthesis


@dataclass(frozen=True)
class Recommendation(_Serialisable):
    priority: str
    category: str
    message: str
    confidence: float


@dataclass(frozen=True)
class QualityEstimate(_Serialisable):
    """Clarity and maintainability on [0, 1], derived from purpose, anomalies and smells."""

    clarity: float
    maintainability: float


@dataclass(frozen=True)
class SynthesizedReport:
    """Fused view of every analysis layer for one code unit."""

    analysis: AnalysisResult
    overall_score: float
    recommendations: Tuple[Recommendation, ...]
    layer_confidences: Mapping[str, float]
    missing_layers: Tuple[str, ...] = ()
    weights: Mapping[str, float] = field(default_factory=dict)
    quality: Optional[QualityEstimate] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "overall_score": self.overall_score,
            "recommendations": _plain(self.recommendations),
            "layer_confidences": dict(self.layer_confidences),
            "missing_layers": list(self.missing_layers),
            "weights": dict(self.weights),
            "quality": self.quality.to_dict() if self.quality else None,
        }


@dataclass(frozen=True)
class Relationship(_Serialisable):
    """Pairwise relationship between detected purposes or archetypes."""

    kind: str
    source: str
    target: str
    confidence: float


@dataclass(frozen=True)
class CognitiveBalance(_Serialisable):
    purpose_strength: float
    anomaly_awareness: float
    pattern_recognition: float
    balanced: bool


@dataclass(frozen=True)
class DeepReport:
    report: SynthesizedReport
    relationships: Tuple[Relationship, ...]
    balance: CognitiveBalance

    def to_dict(self) -> Dict[str, Any]:
        data = self.report.to_dict()
        data["deep_analysis"] = {
            "relationships": _plain(self.relationships),
            "balance": self.balance.to_dict(),
        }
        return data


@dataclass(frozen=True)
class Correlation(_Serialisable):
    kind: str
    message: str
    confidence: float


@dataclass(frozen=True)
class DiscoveryReport:
    """Deep analysis enriched with cross-layer correlations and census state."""

    deep: DeepReport
    correlations: Tuple[Correlation, ...]
    recommendations: Tuple[Recommendation, ...]
    common_ground: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = self.deep.to_dict()
        data["correlations"] = _plain(self.correlations)
        data["enhanced_recommendations"] = _plain(self.recommendations)
        data["common_ground"] = list(self.common_ground)
        return data


@dataclass(frozen=True)
class SuiteMetricsSnapshot(_Serialisable):
    total_analyses: int
    average_confidence: float
