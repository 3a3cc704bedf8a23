"""Text normalisation helpers: identifier splitting, stop words and stemming."""

from __future__ import annotations

import re
from typing import Iterable, List

_WORD_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_CAMEL_BOUNDARY = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
        "with", "by", "from", "into", "that", "this", "these", "those", "is", "are",
        "was", "were", "be", "been", "it", "its", "as", "if", "then", "than", "so",
        "should", "must", "can", "will", "all", "any", "each", "when", "make", "sure",
    }
)

# Longest suffixes first; a suffix is stripped only when at least three
# characters of stem remain.
_SUFFIXES = (
    "izations", "ization", "ations", "ation", "ating", "ators", "ments",
    "ated", "ates", "ator", "ment", "ness", "ings", "ate", "ing", "ies",
    "ied", "ers", "age", "er", "ed", "es", "ly", "s", "e",
)
_MIN_STEM = 3


def split_identifier(identifier: str) -> List[str]:
    """Split camelCase, PascalCase and snake_case identifiers into lower-case words."""
    words: List[str] = []
    for chunk in identifier.split("_"):
        if not chunk:
            continue
        for part in _CAMEL_BOUNDARY.findall(chunk):
            if part.isdigit():
                continue
            words.append(part.lower())
    return words


def stem(word: str) -> str:
    """Strip common English suffixes until the word stops changing.

    This is a light suffix stripper, not a linguistic stemmer: it only has to
    map related forms (``validate``, ``validation``, ``validator``) onto the
    same key, and it is applied identically to goal text and code terms.
    """
    current = word.lower()
    while True:
        for suffix in _SUFFIXES:
            if current.endswith(suffix) and len(current) - len(suffix) >= _MIN_STEM:
                current = current[: -len(suffix)]
                break
        else:
            return current


def words_of(text: str) -> List[str]:
    """Return lower-case sub-words for every identifier-like token in ``text``."""
    words: List[str] = []
    for token in _WORD_PATTERN.findall(text):
        words.extend(split_identifier(token))
    return words


def keywords_of(text: str) -> List[str]:
    """Return the de-duplicated content words of free text, in order of appearance."""
    seen: List[str] = []
    for word in re.split(r"[^A-Za-z0-9]+", text.lower()):
        if len(word) <= 2 or word in STOP_WORDS or word.isdigit():
            continue
        if word not in seen:
            seen.append(word)
    return seen


def stems_of(words: Iterable[str]) -> List[str]:
    return [stem(word) for word in words]


__all__ = ["STOP_WORDS", "keywords_of", "split_identifier", "stem", "stems_of", "words_of"]
