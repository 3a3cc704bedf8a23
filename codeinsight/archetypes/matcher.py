"""Ranks a feature set against the archetype library."""

from __future__ import annotations

from typing import List, Tuple

from ..logging import get_logger
from ..models import ArchetypeMatch, ArchetypeTemplate, FeatureSet
from .library import ArchetypeLibrary


class ArchetypeMatcher:
    """Evaluates every template independently; several may match one snippet."""

    def __init__(self, library: ArchetypeLibrary | None = None) -> None:
        self.library = library or ArchetypeLibrary()
        self.logger = get_logger("archetypes")

    def match(self, features: FeatureSet) -> List[ArchetypeMatch]:
        found: List[Tuple[int, ArchetypeMatch]] = []
        for index, template in enumerate(self.library):
            match = self.evaluate(template, features)
            if match is not None:
                found.append((index, match))
        found.sort(key=lambda item: (-item[1].confidence, item[0]))
        if found:
            self.logger.debug("Matched archetypes: %s", ", ".join(match.pattern for _, match in found))
        return [match for _, match in found]

    @staticmethod
    def evaluate(template: ArchetypeTemplate, features: FeatureSet) -> ArchetypeMatch | None:
        if not all(features.has_marker(marker) for marker in template.required):
            return None
        present = tuple(marker for marker in template.optional if features.has_marker(marker))
        fraction = len(present) / len(template.optional) if template.optional else 1.0
        return ArchetypeMatch(
            pattern=template.name,
            confidence=round(template.base_confidence * fraction, 4),
            description=template.description,
            matched_optional=present,
        )


__all__ = ["ArchetypeMatcher"]
