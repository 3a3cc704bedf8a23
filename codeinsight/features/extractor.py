"""Turns raw code text into a normalized FeatureSet."""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, List, Tuple

from ..models import CodeUnit, CommentToken, FeatureSet
from .markers import MARKERS
from .text import split_identifier, stem, words_of

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_DECISION = re.compile(
    r"\bif\b|\belif\b|\bcase\b|\bwhile\b|\bfor\b|\bcatch\b|\bexcept\b|\band\b|\bor\b|&&|\|\||\?(?![.?])"
)
_TAG = re.compile(r"^(TODO|FIXME|NOTE|OPTIMIZE|HACK|BUG)\b", re.IGNORECASE)
_MEMBER_PREFIX = re.compile(r"\s*(?:(?:static|async|get|set|readonly)\s+)*\*?\s*\Z")
_PRIVATE_MEMBER = re.compile(r"#[A-Za-z_$][\w$]*[ \t]*[=;(]")

RESERVED_WORDS = frozenset(
    {
        "abstract", "and", "as", "async", "await", "break", "case", "catch", "class", "const",
        "continue", "def", "default", "del", "do", "elif", "else", "except", "export", "extends",
        "false", "finally", "for", "from", "function", "get", "global", "if", "import", "in",
        "instanceof", "is", "lambda", "let", "new", "none", "nonlocal", "not", "null", "or",
        "pass", "private", "protected", "public", "raise", "return", "self", "set", "static",
        "super", "switch", "this", "throw", "true", "try", "typeof", "undefined", "var", "void",
        "while", "with", "yield", "None", "True", "False",
    }
)


class FeatureExtractor:
    """Extracts identifiers, comments and structural markers from code text."""

    def extract(self, code: object) -> FeatureSet:
        if not isinstance(code, str) or not code.strip():
            return FeatureSet()

        code_only, bare, comments = _scan(code)

        tokens = _IDENTIFIER.findall(bare)
        identifiers = _ordered_unique(
            token for token in tokens if token not in RESERVED_WORDS and len(token) > 1
        )
        words: List[str] = []
        for token in tokens:
            words.extend(word for word in split_identifier(token.replace("$", "")) if len(word) > 1)
        comment_words = [
            word for comment in comments for word in words_of(comment.text) if len(word) > 2
        ]
        keyword_counts = Counter(stem(word) for word in words)
        keyword_counts.update(stem(word) for word in comment_words)

        marker_counts: Dict[str, int] = {}
        marker_lines: Dict[str, int] = {}
        for marker in MARKERS:
            matches = list(marker.pattern.finditer(code_only))
            if not matches:
                continue
            marker_counts[marker.name] = len(matches)
            marker_lines[marker.name] = code_only.count("\n", 0, matches[0].start()) + 1

        comment_tags: List[Tuple[str, int]] = []
        for comment in comments:
            tag = _TAG.match(comment.text)
            if tag:
                comment_tags.append((tag.group(1).upper(), comment.line))

        return FeatureSet(
            identifiers=tuple(identifiers),
            words=tuple(_ordered_unique(words)),
            keyword_counts=dict(sorted(keyword_counts.items())),
            markers=tuple(marker_counts),
            marker_counts=marker_counts,
            marker_lines=marker_lines,
            comments=tuple(comments),
            comment_tags=tuple(comment_tags),
            line_count=code.count("\n") + 1,
            decision_points=len(_DECISION.findall(bare)),
            max_nesting=_nesting_depth(bare),
        )

    def code_unit(self, code: object) -> CodeUnit:
        text = code if isinstance(code, str) else ""
        return CodeUnit(text=text, features=self.extract(text))


def extract_features(code: object) -> FeatureSet:
    """Module-level shortcut for ``FeatureExtractor().extract``."""
    return FeatureExtractor().extract(code)


def mask_source(code: str) -> Tuple[str, str]:
    """Return ``code`` with comments blanked, and with comments and string bodies blanked.

    Both renditions keep every offset and line break of the original.
    """
    code_only, bare, _ = _scan(code)
    return code_only, bare


# ----------------------------------------------------------------------
# Lexical scanning


def _scan(code: str) -> Tuple[str, str, List[CommentToken]]:
    """Split ``code`` into comment-free code, string-free code and comments.

    Both returned code strings keep the original length and line breaks so
    offsets map back to source lines.
    """
    code_only: List[str] = []
    bare: List[str] = []
    comments: List[CommentToken] = []

    length = len(code)
    index = 0
    line = 1
    quote: str | None = None
    block_comment = False
    comment_chars: List[str] = []
    comment_line = 1

    def _flush_comment() -> None:
        text = "".join(comment_chars).strip().lstrip("*").strip()
        if text:
            comments.append(CommentToken(line=comment_line, text=text))
        comment_chars.clear()

    while index < length:
        char = code[index]
        pair = code[index : index + 2]

        if block_comment:
            if pair == "*/":
                _flush_comment()
                block_comment = False
                code_only.append("  ")
                bare.append("  ")
                index += 2
                continue
            if char == "\n":
                _flush_comment()
                line += 1
                comment_line = line
                code_only.append("\n")
                bare.append("\n")
            else:
                comment_chars.append(char)
                code_only.append(" ")
                bare.append(" ")
            index += 1
            continue

        if quote is not None:
            closing = code.startswith(quote, index)
            if char == "\\" and index + 1 < length and code[index + 1] != "\n":
                code_only.append(code[index : index + 2])
                bare.append("  ")
                index += 2
                continue
            if closing:
                code_only.append(quote)
                bare.append(quote)
                index += len(quote)
                quote = None
                continue
            if char == "\n":
                line += 1
                code_only.append("\n")
                bare.append("\n")
                if quote in {"'", '"'}:
                    # unterminated single-line string; recover at end of line
                    quote = None
                index += 1
                continue
            code_only.append(char)
            bare.append(" ")
            index += 1
            continue

        if pair == "//" or (char == "#" and _is_hash_comment(code, index)):
            end = code.find("\n", index)
            if end == -1:
                end = length
            skip = 2 if pair == "//" else 1
            text = code[index + skip : end].strip().lstrip("/#").strip()
            if text:
                comments.append(CommentToken(line=line, text=text))
            blank = " " * (end - index)
            code_only.append(blank)
            bare.append(blank)
            index = end
            continue

        if pair == "/*":
            block_comment = True
            comment_line = line
            code_only.append("  ")
            bare.append("  ")
            index += 2
            continue

        if char in {"'", '"', "`"}:
            triple = code[index : index + 3]
            quote = triple if triple in {'"""', "'''"} else char
            code_only.append(quote)
            bare.append(quote)
            index += len(quote)
            continue

        if char == "\n":
            line += 1
        code_only.append(char)
        bare.append(char)
        index += 1

    if block_comment:
        _flush_comment()

    return "".join(code_only), "".join(bare), comments


def _is_hash_comment(code: str, index: int) -> bool:
    # ``this.#field`` and class-body ``#field = 1;`` are JS private members.
    if index and code[index - 1] == ".":
        return False
    line_start = code.rfind("\n", 0, index) + 1
    if not _MEMBER_PREFIX.match(code, line_start, index):
        return True
    return not _PRIVATE_MEMBER.match(code, index)


def _nesting_depth(bare: str) -> int:
    depth = 0
    deepest = 0
    saw_brace = False
    for char in bare:
        if char == "{":
            saw_brace = True
            depth += 1
            deepest = max(deepest, depth)
        elif char == "}":
            depth = max(0, depth - 1)
    if saw_brace:
        return deepest

    # Indentation-based languages: count four-space (or tab) levels.
    levels = 0
    for raw in bare.splitlines():
        if not raw.strip():
            continue
        expanded = raw.expandtabs(4)
        indent = len(expanded) - len(expanded.lstrip(" "))
        levels = max(levels, indent // 4)
    return levels


def _ordered_unique(items) -> List[str]:
    seen: Dict[str, None] = {}
    for item in items:
        if item not in seen:
            seen[item] = None
    return list(seen)


__all__ = ["FeatureExtractor", "RESERVED_WORDS", "extract_features", "mask_source"]
