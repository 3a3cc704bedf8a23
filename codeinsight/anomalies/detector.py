"""Flags structural markers that deviate from the classified purpose profile."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..features.markers import MARKERS, Marker
from ..logging import get_logger
from ..models import Anomaly, FeatureSet, PurposeScore

DEFAULT_DEVIATION_THRESHOLD = 0.5


def severity_for(deviation: float) -> str:
    if deviation >= 0.75:
        return "high"
    if deviation >= 0.6:
        return "medium"
    return "low"


class AnomalyDetector:
    """Compares present markers with the markers a purpose expects.

    Each marker deviates when its presence disagrees with the purpose profile:
    a present but unexpected marker deviates by its rarity, an expected but
    absent marker by the importance the category gives it. Markers at or
    above ``threshold`` are reported.
    """

    def __init__(
        self,
        markers: Sequence[Marker] = MARKERS,
        *,
        threshold: float = DEFAULT_DEVIATION_THRESHOLD,
    ) -> None:
        self.markers = tuple(markers)
        self.threshold = threshold
        self.logger = get_logger("anomalies")

    def detect(self, features: FeatureSet, primary: Optional[PurposeScore]) -> List[Anomaly]:
        if primary is None or primary.confidence <= 0:
            self.logger.debug("No purpose baseline; skipping anomaly detection")
            return []

        category = primary.category
        expected = category.expected_markers
        found: List[tuple[int, Anomaly]] = []
        for index, marker in enumerate(self.markers):
            present = features.has_marker(marker.name)
            is_expected = marker.name in expected
            if present == is_expected:
                continue
            if present:
                deviation = marker.rarity
                kind = "unexpected"
                reason = f"{marker.description} is unusual for {category.name} code"
                line = features.marker_lines.get(marker.name)
            else:
                deviation = expected[marker.name]
                kind = "missing"
                reason = f"expected {marker.description} is absent from {category.name} code"
                line = None
            if deviation < self.threshold:
                continue
            found.append(
                (
                    index,
                    Anomaly(
                        marker=marker.name,
                        kind=kind,
                        deviation=round(deviation, 4),
                        severity=severity_for(deviation),
                        reason=reason,
                        line=line,
                    ),
                )
            )

        found.sort(key=lambda item: (-item[1].deviation, item[0]))
        return [anomaly for _, anomaly in found]


def anomaly_severity(anomalies: Sequence[Anomaly]) -> float:
    """Largest deviation among ``anomalies`` (0 when there are none)."""
    return max((anomaly.deviation for anomaly in anomalies), default=0.0)


__all__ = ["AnomalyDetector", "DEFAULT_DEVIATION_THRESHOLD", "anomaly_severity", "severity_for"]
