"""Archetype catalogue, matching and cross-sample census."""

from .census import ArchetypeCensus, common_ground
from .library import ARCHETYPE_TEMPLATES, LIBRARY_VERSION, ArchetypeLibrary
from .matcher import ArchetypeMatcher

__all__ = [
    "ARCHETYPE_TEMPLATES",
    "ArchetypeCensus",
    "ArchetypeLibrary",
    "ArchetypeMatcher",
    "LIBRARY_VERSION",
    "common_ground",
]
