"""Aggregate archetype matches across many named samples."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Sequence, Tuple

from ..models import ArchetypeMatch
from .library import ArchetypeLibrary


class ArchetypeCensus:
    """Counts which archetypes appear in which samples.

    Recording a name twice replaces its earlier entry.
    """

    def __init__(self, library: ArchetypeLibrary | None = None) -> None:
        self.library = library or ArchetypeLibrary()
        self._samples: Dict[str, Tuple[str, ...]] = {}
        self._lock = threading.Lock()

    def record(self, name: str, matches: Iterable[ArchetypeMatch]) -> Tuple[str, ...]:
        patterns = self._ordered({match.pattern for match in matches})
        with self._lock:
            self._samples[name] = patterns
        return patterns

    def samples(self) -> Dict[str, Tuple[str, ...]]:
        with self._lock:
            return dict(self._samples)

    def frequency(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for patterns in self.samples().values():
            for pattern in patterns:
                counts[pattern] = counts.get(pattern, 0) + 1
        return {pattern: counts[pattern] for pattern in self._ordered(counts)}

    def common_ground(self) -> Tuple[str, ...]:
        """Patterns present in every recorded sample, in catalogue order."""
        recorded = list(self.samples().values())
        if not recorded:
            return ()
        shared = set(recorded[0])
        for patterns in recorded[1:]:
            shared &= set(patterns)
        return self._ordered(shared)

    universal = common_ground

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def _ordered(self, patterns: Iterable[str]) -> Tuple[str, ...]:
        return tuple(sorted(patterns, key=lambda name: (self.library.index_of(name), name)))


def common_ground(
    *match_lists: Sequence[ArchetypeMatch], library: ArchetypeLibrary | None = None
) -> List[str]:
    """Intersect pattern names across match lists."""
    census = ArchetypeCensus(library)
    for index, matches in enumerate(match_lists):
        census.record(str(index), matches)
    return list(census.common_ground())


__all__ = ["ArchetypeCensus", "common_ground"]
