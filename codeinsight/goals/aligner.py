"""Scores how well a natural-language goal is reflected in code terms."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Set, Tuple

from ..errors import InputError
from ..features.extractor import FeatureExtractor
from ..features.text import keywords_of, split_identifier, stem
from ..models import AlignmentResult, DriftReport, FeatureSet

DEFAULT_ALIGNMENT_THRESHOLD = 0.5


class GoalAligner:
    """Matches goal keywords against code identifiers and comment words."""

    def __init__(
        self,
        extractor: FeatureExtractor | None = None,
        *,
        threshold: float = DEFAULT_ALIGNMENT_THRESHOLD,
    ) -> None:
        self.extractor = extractor or FeatureExtractor()
        self.threshold = threshold

    def score(self, goal_text: object, code: object) -> AlignmentResult:
        features = self.extractor.extract(code)
        return self.score_features(goal_text, features)

    def score_features(self, goal_text: object, features: FeatureSet) -> AlignmentResult:
        if not isinstance(goal_text, str):
            return AlignmentResult(aligned=False, score=0.0)
        keywords = keywords_of(goal_text)
        if not keywords:
            return AlignmentResult(aligned=False, score=0.0)

        terms = _code_terms(features)
        matches: List[Tuple[str, str]] = []
        missing: List[str] = []
        for keyword in keywords:
            found = [term for term, forms in terms if _matches(keyword, forms)]
            if found:
                matches.extend((keyword, term) for term in found)
            else:
                missing.append(keyword)

        score = round((len(keywords) - len(missing)) / len(keywords), 4)
        return AlignmentResult(
            aligned=score >= self.threshold,
            score=score,
            matches=tuple(matches),
            missing=tuple(missing),
        )

    def measure_drift(self, requirements: Sequence[object], code: object) -> DriftReport:
        """Report which requirements are no longer reflected in ``code``."""
        if isinstance(requirements, (str, bytes)) or not isinstance(requirements, Sequence):
            raise InputError("requirements must be a sequence of strings or mappings")
        features = self.extractor.extract(code)
        details: List[Tuple[str, float]] = []
        for requirement in requirements:
            description = _requirement_text(requirement)
            alignment = self.score_features(description, features)
            if not alignment.aligned:
                details.append((description, alignment.score))
        total = len(requirements)
        drift_score = round(1 - len(details) / total, 4) if total else 1.0
        return DriftReport(
            total_requirements=total,
            misaligned=len(details),
            drift_score=drift_score,
            details=tuple(details),
        )


def _code_terms(features: FeatureSet) -> List[Tuple[str, Set[str]]]:
    """Return ``(term, comparable forms)`` for identifiers then comment words."""
    terms: Dict[str, Set[str]] = {}
    seen_lower: Set[str] = set()
    for identifier in features.identifiers:
        lowered = identifier.lower()
        forms = {lowered, stem(lowered)}
        forms.update(stem(word) for word in split_identifier(identifier))
        terms[identifier] = forms
        seen_lower.add(lowered)
    for comment in features.comments:
        for word in keywords_of(comment.text):
            if word in seen_lower:
                continue
            seen_lower.add(word)
            terms[word] = {word, stem(word)}
    return list(terms.items())


def _matches(keyword: str, forms: Set[str]) -> bool:
    return keyword in forms or stem(keyword) in forms


def _requirement_text(requirement: object) -> str:
    if isinstance(requirement, str):
        return requirement
    if isinstance(requirement, Mapping):
        description = requirement.get("description")
        if isinstance(description, str):
            return description
    raise InputError("each requirement must be a string or a mapping with a 'description'")


__all__ = ["DEFAULT_ALIGNMENT_THRESHOLD", "GoalAligner"]
