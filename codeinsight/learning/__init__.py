"""Prototype learning and similarity."""

from .learner import UNKNOWN_LABEL, PatternLearner
from .store import PrototypeStore
from .vectors import TermVectorizer, cosine

__all__ = ["PatternLearner", "PrototypeStore", "TermVectorizer", "UNKNOWN_LABEL", "cosine"]
