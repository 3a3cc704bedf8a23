"""Clarity and maintainability estimates for a synthesized analysis."""

from __future__ import annotations

from typing import List

from ..models import AnalysisResult, QualityEstimate

NEUTRAL_PURPOSE_CONFIDENCE = 0.5


def estimate_quality(analysis: AnalysisResult) -> QualityEstimate:
    """Score clarity and maintainability on [0, 1].

    Clarity starts from the purpose confidence (0.5 when there is none) and
    loses 0.1 per anomaly or smell. Maintainability starts at 1.0, loses 0.2
    per high and 0.1 per medium finding, and gains a tenth of the purpose
    confidence.
    """
    purpose = analysis.purposes.confidence if analysis.purposes else 0.0
    severities: List[str] = [anomaly.severity for anomaly in analysis.anomalies or ()]
    if analysis.smells is not None:
        severities.extend(smell.severity for smell in analysis.smells.smells)

    clarity = (purpose or NEUTRAL_PURPOSE_CONFIDENCE) - 0.1 * len(severities)
    maintainability = 1.0 - 0.2 * severities.count("high") - 0.1 * severities.count("medium") + 0.1 * purpose
    return QualityEstimate(clarity=_unit(clarity), maintainability=_unit(maintainability))


def _unit(value: float) -> float:
    return round(min(max(value, 0.0), 1.0), 4)


__all__ = ["estimate_quality"]
