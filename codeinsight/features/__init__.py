"""Lexical feature extraction."""

from .extractor import FeatureExtractor, extract_features
from .markers import MARKERS, Marker

__all__ = ["FeatureExtractor", "MARKERS", "Marker", "extract_features"]
