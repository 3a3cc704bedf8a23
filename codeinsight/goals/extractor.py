"""Mines developer intent from marked comments."""

from __future__ import annotations

import re
from typing import Dict, List

from ..features.extractor import FeatureExtractor
from ..models import FeatureSet, Goal

GOAL_PRIORITIES: Dict[str, str] = {
    "TODO": "medium",
    "FIXME": "high",
    "NOTE": "low",
    "OPTIMIZE": "medium",
    "BUG": "high",
    "HACK": "low",
}

PRIORITY_ORDER: Dict[str, int] = {"high": 0, "medium": 1, "low": 2}

_MARKER = re.compile(
    r"^(?P<tag>" + "|".join(GOAL_PRIORITIES) + r")\b\s*(?P<colon>[:\-])?\s*(?P<text>.*)$",
    re.IGNORECASE,
)


class GoalExtractor:
    """Extracts goals from comment lines in source order."""

    def __init__(self, extractor: FeatureExtractor | None = None) -> None:
        self.extractor = extractor or FeatureExtractor()

    def extract(self, code: object) -> List[Goal]:
        return self.from_features(self.extractor.extract(code))

    @staticmethod
    def from_features(features: FeatureSet) -> List[Goal]:
        goals: List[Goal] = []
        for comment in features.comments:
            match = _MARKER.match(comment.text)
            if not match:
                continue
            raw_tag = match.group("tag")
            # Lower-case markers only count with a colon ("note: ..."), so prose
            # comments that happen to start with "note" are ignored.
            if not raw_tag.isupper() and not match.group("colon"):
                continue
            tag = raw_tag.upper()
            goals.append(
                Goal(
                    type=tag,
                    priority=GOAL_PRIORITIES[tag],
                    text=match.group("text").strip(),
                    line=comment.line,
                )
            )
        goals.sort(key=lambda goal: goal.line)
        return goals


def goal_priority(tag: str) -> str:
    return GOAL_PRIORITIES.get(tag.upper(), "medium")


__all__ = ["GOAL_PRIORITIES", "GoalExtractor", "PRIORITY_ORDER", "goal_priority"]
