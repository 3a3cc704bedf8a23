"""Thread-safe, persistable store of learned pattern prototypes."""

from __future__ import annotations

import json
import threading
from datetime import UTC, datetime
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import PatternPrototype
from .vectors import running_mean

_STORE_VERSION = 1


class PrototypeStore:
    """Holds one centroid per label.

    Writers are serialized by a lock and publish a fresh immutable snapshot
    when they finish, so readers never block and never see a centroid that
    is only partially updated.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._snapshot: Mapping[str, PatternPrototype] = MappingProxyType({})
        self._dirty = False
        self.logger = get_logger("learning.store")
        if self._path is not None:
            self._load(self._path)

    def snapshot(self) -> Mapping[str, PatternPrototype]:
        return self._snapshot

    def get(self, label: str) -> Optional[PatternPrototype]:
        return self._snapshot.get(label)

    def labels(self) -> List[str]:
        return list(self._snapshot)

    def __len__(self) -> int:
        return len(self._snapshot)

    def update(self, samples: Sequence[Tuple[str, Mapping[str, float]]]) -> Tuple[PatternPrototype, ...]:
        """Fold ``(label, vector)`` samples into their centroids as one atomic change."""
        with self._lock:
            working: Dict[str, PatternPrototype] = dict(self._snapshot)
            touched: List[str] = []
            for label, vector in samples:
                current = working.get(label)
                if current is None:
                    working[label] = PatternPrototype(label=label, centroid=dict(vector), sample_count=1)
                else:
                    working[label] = PatternPrototype(
                        label=label,
                        centroid=running_mean(current.centroid, vector, current.sample_count),
                        sample_count=current.sample_count + 1,
                    )
                if label not in touched:
                    touched.append(label)
            self._snapshot = MappingProxyType(working)
            self._dirty = True
        return tuple(working[label] for label in touched)

    def clear(self) -> None:
        with self._lock:
            self._snapshot = MappingProxyType({})
            self._dirty = True

    def save(self, path: Path | None = None) -> None:
        target = path or self._path
        if target is None:
            return
        if not self._dirty and path is None:
            return
        snapshot = self._snapshot
        payload = {
            "version": _STORE_VERSION,
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "prototypes": [
                {
                    "label": prototype.label,
                    "sample_count": prototype.sample_count,
                    "centroid": dict(prototype.centroid),
                }
                for prototype in snapshot.values()
            ],
        }
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        self._dirty = False
        self.logger.debug("Persisted %d prototypes to %s", len(snapshot), target)

    def load(self, path: Path) -> None:
        """Replace the current prototypes with those stored at ``path``."""
        self._load(path)

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("Ignoring unreadable prototype store %s: %s", path, exc)
            return
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            return
        entries = data.get("prototypes")
        if not isinstance(entries, list):
            return
        loaded: Dict[str, PatternPrototype] = {}
        for prototype in _valid_prototypes(entries):
            loaded[prototype.label] = prototype
        with self._lock:
            self._snapshot = MappingProxyType(loaded)
            self._dirty = False


def _valid_prototypes(entries: Iterable[object]) -> Iterable[PatternPrototype]:
    for raw in entries:
        if not isinstance(raw, dict):
            continue
        label = raw.get("label")
        count = raw.get("sample_count")
        centroid = raw.get("centroid")
        if not isinstance(label, str) or not isinstance(count, int) or count < 1:
            continue
        if not isinstance(centroid, dict):
            continue
        cleaned = {
            str(term): float(value)
            for term, value in sorted(centroid.items())
            if isinstance(value, (int, float)) and not isinstance(value, bool)
        }
        yield PatternPrototype(label=label, centroid=cleaned, sample_count=count)


__all__ = ["PrototypeStore"]
