"""Code smell and complexity checks over the text of a code unit."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..features.extractor import FeatureExtractor, mask_source
from ..logging import get_logger
from ..models import CodeSmell, ComplexityProfile, FeatureSet, SmellReport

_JS_FUNCTION = re.compile(r"\bfunction\b[ \t]*\*?[ \t]*[\w$]*[ \t]*\(")
_JS_METHOD = re.compile(
    r"^[ \t]*(?:(?:static|async|get|set)[ \t]+)*\*?[ \t]*#?([A-Za-z_$][\w$]*)[ \t]*\(", re.MULTILINE
)
_PY_FUNCTION = re.compile(r"^([ \t]*)(?:async[ \t]+)?def[ \t]+\w+[ \t]*\(", re.MULTILINE)
_CONTROL_WORDS = frozenset({"if", "elif", "for", "while", "switch", "catch", "return", "function", "with"})
_NUMBER = re.compile(r"\b(?:0[xX][0-9a-fA-F]{3,}|\d{3,})\b")
_CONSTANT_LINE = re.compile(
    r"^\s*(?:export\s+)?(?:(?:const|final|static|let|var)\s+)*[A-Z][A-Z0-9_]*\s*(?::[^=\n]+)?=(?!=)"
)
_CONDITION = re.compile(r"\b(?:if|elif|while)\b[ \t]*")
_RECEIVERS = frozenset({"self", "cls", "*", "/"})


@dataclass(frozen=True)
class SmellThresholds:
    """Limits above which a measurement is reported as a smell."""

    cyclomatic: int = 10
    cognitive: int = 15
    nesting: int = 4
    parameters: int = 4
    method_length: int = 300
    condition_length: int = 100
    duplicate_length: int = 30


@dataclass(frozen=True)
class SmellRule:
    kind: str
    description: str
    severity: str
    weight: float
    # Complexity issues carry a fixed confidence; text smells scale with density.
    confidence: Optional[float] = None


SMELL_RULES: Tuple[SmellRule, ...] = (
    SmellRule("long-method", "Function is too long and complex", "medium", 0.8),
    SmellRule("magic-numbers", "Magic numbers without explanation", "low", 0.5),
    SmellRule("duplicate-code", "Potential code duplication", "medium", 0.7),
    SmellRule("complex-condition", "Overly complex conditional logic", "medium", 0.6),
    SmellRule("too-many-params", "Function has too many parameters", "low", 0.4),
    SmellRule("high-complexity", "Cyclomatic complexity too high", "high", 0.9, confidence=0.8),
    SmellRule("high-cognitive", "Cognitive complexity too high", "medium", 0.7, confidence=0.7),
    SmellRule("deep-nesting", "Nesting depth too deep", "medium", 0.6, confidence=0.6),
)

RULES_BY_KIND: Dict[str, SmellRule] = {rule.kind: rule for rule in SMELL_RULES}
SMELL_KINDS = tuple(RULES_BY_KIND)


@dataclass(frozen=True)
class _Function:
    line: int
    params: Tuple[str, ...]
    body_length: int


@dataclass(frozen=True)
class _Source:
    code_only: str
    bare: str
    functions: Tuple[_Function, ...]


Check = Callable[[_Source, SmellThresholds], List[int]]


class SmellDetector:
    """Finds smell patterns in code text and complexity figures above their limits.

    Text smells report every line they occur on; the first one becomes the
    smell's ``line``. Complexity issues come from the feature set and carry
    no line.
    """

    def __init__(
        self,
        thresholds: SmellThresholds | None = None,
        extractor: FeatureExtractor | None = None,
    ) -> None:
        self.thresholds = thresholds or SmellThresholds()
        self.extractor = extractor or FeatureExtractor()
        self.logger = get_logger("smells")

    def detect(
        self,
        code: object,
        features: FeatureSet | None = None,
        kinds: Sequence[str] | None = None,
    ) -> SmellReport:
        selected = _select(kinds)
        text = code if isinstance(code, str) else ""
        if features is None:
            features = self.extractor.extract(text)
        profile = complexity_profile(features)
        if not text.strip():
            return SmellReport(smells=(), complexity=profile, confidence=_report_confidence(()))

        code_only, bare = mask_source(text)
        source = _Source(code_only=code_only, bare=bare, functions=tuple(_functions(bare)))
        smells: List[CodeSmell] = []
        for kind, check in _TEXT_CHECKS:
            if kind not in selected:
                continue
            lines = check(source, self.thresholds)
            if lines:
                smells.append(_text_smell(RULES_BY_KIND[kind], lines, len(text)))
        smells.extend(
            smell for smell in self.complexity_issues(profile) if smell.kind in selected
        )
        self.logger.debug("Found %d smells across %d lines", len(smells), features.line_count)
        return SmellReport(smells=tuple(smells), complexity=profile, confidence=_report_confidence(smells))

    def complexity_issues(self, profile: ComplexityProfile) -> List[CodeSmell]:
        limits = self.thresholds
        issues: List[CodeSmell] = []
        for kind, value, limit in (
            ("high-complexity", profile.cyclomatic, limits.cyclomatic),
            ("high-cognitive", profile.cognitive, limits.cognitive),
            ("deep-nesting", profile.max_nesting, limits.nesting),
        ):
            if value <= limit:
                continue
            rule = RULES_BY_KIND[kind]
            issues.append(
                CodeSmell(
                    kind=kind,
                    severity=rule.severity,
                    message=f"{rule.description}: {value}",
                    confidence=rule.confidence or 0.0,
                )
            )
        return issues


def complexity_profile(features: FeatureSet) -> ComplexityProfile:
    return ComplexityProfile(
        cyclomatic=features.decision_points + 1,
        cognitive=features.max_nesting * 2 + features.decision_points,
        line_count=features.line_count,
        max_nesting=features.max_nesting,
    )


def _select(kinds: Sequence[str] | None) -> frozenset[str]:
    if kinds is None or not len(kinds):
        return frozenset(SMELL_KINDS)
    requested = {kind.lower() for kind in kinds}
    unknown = requested - set(SMELL_KINDS)
    if unknown:
        raise ValueError(f"Unknown smell kinds requested: {', '.join(sorted(unknown))}")
    return frozenset(requested)


def _text_smell(rule: SmellRule, lines: Sequence[int], length: int) -> CodeSmell:
    occurrences = len(lines)
    # Density per thousand characters, scaled down and capped.
    confidence = min(occurrences / (length / 1000) * 0.1, 0.95)
    message = rule.description if occurrences == 1 else f"{rule.description} ({occurrences} occurrences)"
    return CodeSmell(
        kind=rule.kind,
        severity=rule.severity,
        message=message,
        confidence=round(confidence, 4),
        occurrences=occurrences,
        line=min(lines),
    )


def _report_confidence(smells: Iterable[CodeSmell]) -> float:
    weighted = [smell.confidence * RULES_BY_KIND[smell.kind].weight for smell in smells]
    if not weighted:
        return 0.9
    return round(min(sum(weighted) / len(weighted), 0.95), 4)


# ----------------------------------------------------------------------
# Text checks


def _long_methods(source: _Source, limits: SmellThresholds) -> List[int]:
    return [function.line for function in source.functions if function.body_length >= limits.method_length]


def _too_many_params(source: _Source, limits: SmellThresholds) -> List[int]:
    return [function.line for function in source.functions if len(function.params) > limits.parameters]


def _magic_numbers(source: _Source, limits: SmellThresholds) -> List[int]:
    lines: List[int] = []
    for number, text in enumerate(source.bare.split("\n"), start=1):
        if _CONSTANT_LINE.match(text):
            continue
        lines.extend(number for _ in _NUMBER.finditer(text))
    return lines


def _duplicate_lines(source: _Source, limits: SmellThresholds) -> List[int]:
    seen: Counter[str] = Counter()
    lines: List[int] = []
    for number, text in enumerate(source.code_only.split("\n"), start=1):
        normalized = " ".join(text.split())
        if len(normalized) < limits.duplicate_length:
            continue
        if seen[normalized]:
            lines.append(number)
        seen[normalized] += 1
    return lines


def _complex_conditions(source: _Source, limits: SmellThresholds) -> List[int]:
    bare = source.bare
    lines: List[int] = []
    for match in _CONDITION.finditer(bare):
        start = match.end()
        if bare[start : start + 1] == "(":
            end = _matching(bare, start, "(", ")")
            condition = bare[start + 1 : end] if end is not None else ""
        else:
            line_end = bare.find("\n", start)
            condition = bare[start : line_end if line_end != -1 else len(bare)].rstrip().rstrip(":")
        if len(" ".join(condition.split())) >= limits.condition_length:
            lines.append(_line_at(bare, match.start()))
    return lines


_TEXT_CHECKS: Tuple[Tuple[str, Check], ...] = (
    ("long-method", _long_methods),
    ("magic-numbers", _magic_numbers),
    ("duplicate-code", _duplicate_lines),
    ("complex-condition", _complex_conditions),
    ("too-many-params", _too_many_params),
)


# ----------------------------------------------------------------------
# Function discovery


def _functions(bare: str) -> List[_Function]:
    found: Dict[int, _Function] = {}
    for pattern in (_JS_FUNCTION, _JS_METHOD):
        for match in pattern.finditer(bare):
            if match.lastindex and match.group(1) in _CONTROL_WORDS:
                continue
            open_paren = match.end() - 1
            close_paren = _matching(bare, open_paren, "(", ")")
            if close_paren is None:
                continue
            brace = close_paren + 1
            while brace < len(bare) and bare[brace] in " \t\r\n":
                brace += 1
            if bare[brace : brace + 1] != "{":
                continue
            end = _matching(bare, brace, "{", "}")
            body = bare[brace + 1 : end if end is not None else len(bare)]
            found.setdefault(
                open_paren,
                _Function(
                    line=_line_at(bare, open_paren),
                    params=_params(bare[open_paren + 1 : close_paren]),
                    body_length=len(body.strip()),
                ),
            )

    for match in _PY_FUNCTION.finditer(bare):
        indent = len(match.group(1).expandtabs(4))
        open_paren = match.end() - 1
        close_paren = _matching(bare, open_paren, "(", ")")
        if close_paren is None:
            continue
        header_end = bare.find("\n", close_paren)
        body: List[str] = []
        if header_end != -1:
            for raw in bare[header_end + 1 :].split("\n"):
                expanded = raw.expandtabs(4)
                if expanded.strip() and len(expanded) - len(expanded.lstrip()) <= indent:
                    break
                body.append(raw)
        found.setdefault(
            open_paren,
            _Function(
                line=_line_at(bare, open_paren),
                params=_params(bare[open_paren + 1 : close_paren]),
                body_length=len("\n".join(body).strip()),
            ),
        )
    return [found[offset] for offset in sorted(found)]


def _params(text: str) -> Tuple[str, ...]:
    params: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        elif char == "," and depth == 0:
            params.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    params.append("".join(current).strip())
    return tuple(param for param in params if param and param not in _RECEIVERS)


def _matching(text: str, start: int, opening: str, closing: str) -> Optional[int]:
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == opening:
            depth += 1
        elif char == closing:
            depth -= 1
            if depth == 0:
                return index
    return None


def _line_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


__all__ = [
    "SMELL_KINDS",
    "SMELL_RULES",
    "SmellDetector",
    "SmellRule",
    "SmellThresholds",
    "complexity_profile",
]
