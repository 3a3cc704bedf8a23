"""Structural anomaly and code smell detection."""

from .detector import AnomalyDetector, anomaly_severity
from .smells import SmellDetector, SmellThresholds

__all__ = ["AnomalyDetector", "SmellDetector", "SmellThresholds", "anomaly_severity"]
