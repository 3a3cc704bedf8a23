"""Deterministic rules turning layer results into suggestions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..goals.extractor import PRIORITY_ORDER
from ..models import AnalysisResult, FeatureSet, QualityEstimate, Recommendation

COMPLEXITY_DECISION_LIMIT = 10
COMPLEXITY_NESTING_LIMIT = 4
PATTERN_RECOMMENDATION_FLOOR = 0.6
MAINTAINABILITY_FLOOR = 0.5


@dataclass(frozen=True)
class RuleInput:
    analysis: AnalysisResult
    features: FeatureSet
    overall_score: float
    missing_layers: Tuple[str, ...]
    low_confidence: float
    quality: Optional[QualityEstimate] = None


Rule = Callable[[RuleInput], Iterable[Recommendation]]


def _missing_layers(data: RuleInput) -> Iterable[Recommendation]:
    for name in data.missing_layers:
        yield Recommendation(
            priority="high",
            category="reliability",
            message=f"The {name} layer failed; this report is partial",
            confidence=1.0,
        )


def _purpose(data: RuleInput) -> Iterable[Recommendation]:
    purposes = data.analysis.purposes
    if purposes is None or purposes.confidence >= data.low_confidence:
        return
    yield Recommendation(
        priority="high",
        category="purpose",
        message="Purpose confidence is low: consider clarifying function and variable naming",
        confidence=round(1.0 - purposes.confidence, 4),
    )


def _anomalies(data: RuleInput) -> Iterable[Recommendation]:
    for anomaly in data.analysis.anomalies or ():
        yield Recommendation(
            priority="high" if anomaly.severity == "high" else "medium",
            category="anomaly",
            message=f"Review {anomaly.marker}: {anomaly.reason}",
            confidence=anomaly.deviation,
        )


def _smells(data: RuleInput) -> Iterable[Recommendation]:
    report = data.analysis.smells
    if report is None:
        return
    critical = [smell for smell in report.smells if smell.severity == "high"]
    if critical:
        kinds = ", ".join(dict.fromkeys(smell.kind for smell in critical))
        noun = "smell" if len(critical) == 1 else "smells"
        yield Recommendation(
            priority="high",
            category="quality",
            message=f"Found {len(critical)} critical code {noun} needing immediate attention: {kinds}",
            confidence=max(smell.confidence for smell in critical),
        )
    for smell in report.smells:
        if smell.severity == "high":
            continue
        where = f" (line {smell.line})" if smell.line else ""
        yield Recommendation(
            priority=smell.severity,
            category="smell",
            message=f"{smell.message}{where}",
            confidence=smell.confidence,
        )


def _goals(data: RuleInput) -> Iterable[Recommendation]:
    for goal in data.analysis.goals or ():
        if goal.priority != "high":
            continue
        text = goal.text or "(no description)"
        yield Recommendation(
            priority="high",
            category="goal",
            message=f"Resolve {goal.type} on line {goal.line}: {text}",
            confidence=1.0,
        )


def _complexity(data: RuleInput) -> Iterable[Recommendation]:
    # A smell report already carries the complexity issues.
    if data.analysis.smells is not None:
        return
    features = data.features
    if (
        features.decision_points <= COMPLEXITY_DECISION_LIMIT
        and features.max_nesting <= COMPLEXITY_NESTING_LIMIT
    ):
        return
    yield Recommendation(
        priority="medium",
        category="complexity",
        message=(
            f"Code is complex ({features.decision_points} decision points, nesting depth "
            f"{features.max_nesting}): consider breaking it into smaller functions"
        ),
        confidence=0.7,
    )


def _maintainability(data: RuleInput) -> Iterable[Recommendation]:
    quality = data.quality
    if quality is None or quality.maintainability >= MAINTAINABILITY_FLOOR:
        return
    yield Recommendation(
        priority="medium",
        category="maintainability",
        message=(
            f"Maintainability is low ({quality.maintainability:.0%}): "
            "address high and medium severity findings first"
        ),
        confidence=round(1.0 - quality.maintainability, 4),
    )


def _archetypes(data: RuleInput) -> Iterable[Recommendation]:
    matches = data.analysis.archetype_matches
    if matches is None or matches or data.features.is_empty:
        return
    yield Recommendation(
        priority="low",
        category="structure",
        message="No recognizable structural archetype: consider applying an established pattern",
        confidence=0.6,
    )


def _overall(data: RuleInput) -> Iterable[Recommendation]:
    if data.overall_score < 0.6:
        yield Recommendation(
            priority="medium",
            category="overall",
            message="Overall insight is weak: address the recommendations above",
            confidence=round(1.0 - data.overall_score, 4),
        )
    elif data.overall_score > 0.8:
        yield Recommendation(
            priority="low",
            category="positive",
            message="Intent is clear and structure is consistent",
            confidence=data.overall_score,
        )


RULES: Tuple[Rule, ...] = (
    _missing_layers,
    _purpose,
    _anomalies,
    _smells,
    _goals,
    _complexity,
    _maintainability,
    _archetypes,
    _overall,
)


def build_recommendations(
    analysis: AnalysisResult,
    features: FeatureSet,
    *,
    overall_score: float,
    quality: QualityEstimate | None = None,
    missing_layers: Sequence[str] = (),
    low_confidence: float = 0.5,
    rules: Sequence[Rule] = RULES,
) -> Tuple[Recommendation, ...]:
    """Apply ``rules`` in order and sort the output by priority (stable)."""
    data = RuleInput(
        analysis=analysis,
        features=features,
        overall_score=overall_score,
        missing_layers=tuple(missing_layers),
        low_confidence=low_confidence,
        quality=quality,
    )
    collected: List[Recommendation] = []
    for rule in rules:
        collected.extend(rule(data))
    collected.sort(key=lambda item: PRIORITY_ORDER.get(item.priority, len(PRIORITY_ORDER)))
    return tuple(collected)


def archetype_recommendations(analysis: AnalysisResult) -> Tuple[Recommendation, ...]:
    """Pattern-specific suggestions layered on top of the base recommendations."""
    matches = analysis.archetype_matches or ()
    suggestions = [
        Recommendation(
            priority="medium",
            category="pattern",
            message=f"Optimize implementation of {match.pattern}",
            confidence=match.confidence,
        )
        for match in matches
        if match.confidence > PATTERN_RECOMMENDATION_FLOOR
    ]
    if not matches:
        suggestions.append(
            Recommendation(
                priority="low",
                category="pattern",
                message="No clear patterns detected: consider applying established architectural patterns",
                confidence=0.6,
            )
        )
    return tuple(suggestions)


__all__ = ["RULES", "archetype_recommendations", "build_recommendations"]
