"""
Aircraft type tags.

Question banks use several spellings for the same family (A320 vs
A320_FAMILY, B737 vs BOEING_737). Tags are case-sensitive; only the
alias table folds spellings.
"""

from __future__ import annotations

A320_FAMILY = "A320_FAMILY"
B737_FAMILY = "B737_FAMILY"
GENERAL = "GENERAL"
ALL = "ALL"

AIRCRAFT_ALIASES: dict[str, str] = {
    "A320": A320_FAMILY,
    "A320_FAMILY": A320_FAMILY,
    "B737": B737_FAMILY,
    "B737_FAMILY": B737_FAMILY,
    "BOEING_737": B737_FAMILY,
    "GENERAL": GENERAL,
}


def canonical_aircraft(tag: str | None) -> str:
    """Map an aircraft tag to its family name; unknown tags pass through."""
    if not tag:
        return ""
    tag = tag.strip()
    return AIRCRAFT_ALIASES.get(tag, tag)


def is_unconstrained(tag: str | None) -> bool:
    return not tag or tag.strip() == ALL


def aircraft_matches(question_tag: str | None, requested: str | None, include_general: bool = False) -> bool:
    """
    Check a question's aircraft tag against a requested aircraft filter.

    Args:
        question_tag: Tag stored on the question
        requested: Filter value; None or "ALL" means no constraint
        include_general: Let GENERAL questions satisfy any aircraft
    """
    if is_unconstrained(requested):
        return True
    question_family = canonical_aircraft(question_tag)
    if include_general and question_family == GENERAL:
        return True
    return question_family == canonical_aircraft(requested)
