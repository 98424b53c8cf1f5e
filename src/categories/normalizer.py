"""
Category label normalization.

Turns a human-entered label ("Sistema Eléctrico", "Electrical-Systems ")
into a comparison key: lower-case, punctuation removed, whitespace
collapsed. The key is a comparison aid only; two different canonical
categories may share it.
"""

from __future__ import annotations

import re

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(label: object) -> str:
    """
    Normalize a category label for comparison.

    Args:
        label: Free-text label; anything that is not a str normalizes to ""

    Returns:
        Normalized key (possibly empty)
    """
    if not isinstance(label, str):
        return ""
    stripped = _NON_WORD.sub("", label.lower())
    return _WHITESPACE.sub(" ", stripped).strip()


def tokens(label: object, min_length: int = 1) -> list[str]:
    """Split a label into normalized tokens, dropping ones shorter than min_length."""
    return [t for t in normalize(label).split(" ") if t and len(t) >= min_length]


# Labels shorter than this ("ILS", "GPS", "de") only count as whole tokens.
SHORT_LABEL_LENGTH = 4


def contains_label(haystack: str, needle: str) -> bool:
    """
    True if normalized `needle` occurs inside normalized `haystack`.

    Short needles must appear as whole tokens, so "ils" is not found in
    "engine oils".
    """
    if not needle or not haystack:
        return False
    if len(needle) < SHORT_LABEL_LENGTH:
        return f" {needle} " in f" {haystack} "
    return needle in haystack
