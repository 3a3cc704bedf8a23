"""Cross-references purposes and archetypes detected in one code unit."""

from __future__ import annotations

from itertools import combinations
from typing import List, Mapping, Tuple

from ..models import AnalysisResult, CognitiveBalance, Correlation, Relationship

# Archetypes that commonly implement each purpose category.
PURPOSE_AFFINITIES: Mapping[str, Tuple[str, ...]] = {
    "object-construction": ("FactoryPattern", "BuilderPattern", "SingletonPattern", "ClassConstructor"),
    "persistence": ("RepositoryPattern",),
    "event-handling": ("ObserverPattern",),
    "api-communication": ("AsyncHandler", "RepositoryPattern"),
    "data-transformation": ("FunctionalPipeline",),
    "state-management": ("ClassConstructor", "SingletonPattern", "ObserverPattern"),
    "error-handling": ("AsyncHandler",),
}

BALANCE_FLOOR = 0.5


def _mean(left: float, right: float) -> float:
    return round((left + right) / 2, 4)


def find_relationships(analysis: AnalysisResult) -> Tuple[Relationship, ...]:
    """Archetype co-occurrences followed by purpose/archetype affinities, strongest first."""
    matches = analysis.archetype_matches or ()
    found: List[Relationship] = [
        Relationship(
            kind="archetype-co-occurrence",
            source=left.pattern,
            target=right.pattern,
            confidence=_mean(left.confidence, right.confidence),
        )
        for left, right in combinations(matches, 2)
    ]

    purposes = analysis.purposes.purposes if analysis.purposes else ()
    by_pattern = {match.pattern: match for match in matches}
    for score in purposes:
        if score.confidence <= 0:
            continue
        for pattern in PURPOSE_AFFINITIES.get(score.name, ()):
            match = by_pattern.get(pattern)
            if match is None:
                continue
            found.append(
                Relationship(
                    kind="purpose-archetype",
                    source=score.name,
                    target=pattern,
                    confidence=_mean(score.confidence, match.confidence),
                )
            )

    # Stable sort keeps generation order for equal confidences.
    found.sort(key=lambda relationship: -relationship.confidence)
    return tuple(found)


def cognitive_balance(
    analysis: AnalysisResult, layer_confidences: Mapping[str, float]
) -> CognitiveBalance:
    purpose_strength = analysis.purposes.confidence if analysis.purposes else 0.0
    anomaly_awareness = layer_confidences.get("anomalies", 0.0)
    matches = analysis.archetype_matches or ()
    pattern_recognition = matches[0].confidence if matches else 0.0
    return CognitiveBalance(
        purpose_strength=purpose_strength,
        anomaly_awareness=anomaly_awareness,
        pattern_recognition=pattern_recognition,
        balanced=all(
            value > BALANCE_FLOOR for value in (purpose_strength, anomaly_awareness, pattern_recognition)
        ),
    )


def correlate(analysis: AnalysisResult) -> Tuple[Correlation, ...]:
    """Cross-layer observations linking the primary purpose, archetypes and anomalies."""
    correlations: List[Correlation] = []
    matches = analysis.archetype_matches or ()
    primary = analysis.purposes.primary if analysis.purposes else None

    if primary is not None and primary.confidence > 0:
        affine = PURPOSE_AFFINITIES.get(primary.name, ())
        for match in matches:
            if match.pattern in affine:
                correlations.append(
                    Correlation(
                        kind="purpose-pattern-alignment",
                        message=f'Purpose "{primary.name}" aligns with {match.pattern}',
                        confidence=_mean(primary.confidence, match.confidence),
                    )
                )

    if analysis.anomalies and not matches:
        correlations.append(
            Correlation(
                kind="pattern-mismatch-anomalies",
                message="Code anomalies may indicate architectural pattern violations",
                confidence=0.7,
            )
        )

    goals = analysis.goals or ()
    if matches and any(goal.priority == "high" for goal in goals):
        correlations.append(
            Correlation(
                kind="pattern-open-defects",
                message=f"{matches[0].pattern} carries open high-priority goals",
                confidence=matches[0].confidence,
            )
        )
    return tuple(correlations)


__all__ = ["PURPOSE_AFFINITIES", "cognitive_balance", "correlate", "find_relationships"]
