"""
Category Matcher.

Decides whether a question's stored category label satisfies a requested
category filter. Labels come from two languages with inconsistent
punctuation and partial phrasing, so matching is a cascade that trades
precision for recall:

1. exact    - normalized labels are equal
2. substring - one normalized label contains the other
3. token overlap - some token of one label contains (or is contained in)
   some token of the other

The tiers run in order and short-circuit on the first hit. The matcher
never raises: non-string or empty input is simply a non-match.

Aliases expanded from the canonical table skip the token tier, and short
aliases ("ILS", "GPS") must appear as whole tokens.

Known weakness: the token tier accepts very short shared fragments
("de", "a"). `min_token_length` drops short tokens from that tier.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum

from src.categories.normalizer import contains_label, normalize, tokens


class MatchTier(str, Enum):
    """Which tier of the cascade produced a match."""

    EXACT = "exact"
    SUBSTRING = "substring"
    TOKEN_OVERLAP = "token_overlap"


def _exact(question: str, target: str, min_token_length: int) -> bool:
    return question == target


def _substring(question: str, target: str, min_token_length: int) -> bool:
    return target in question or question in target


def _alias_substring(question: str, target: str, min_token_length: int) -> bool:
    return contains_label(question, target) or contains_label(target, question)


def _token_overlap(question: str, target: str, min_token_length: int) -> bool:
    q_tokens = tokens(question, min_token_length)
    t_tokens = tokens(target, min_token_length)
    return any(qt in tt or tt in qt for qt in q_tokens for tt in t_tokens)


TIERS: list[tuple[MatchTier, Callable[[str, str, int], bool]]] = [
    (MatchTier.EXACT, _exact),
    (MatchTier.SUBSTRING, _substring),
    (MatchTier.TOKEN_OVERLAP, _token_overlap),
]

# Aliases pulled in from the canonical table are never token-matched.
ALIAS_TIERS: list[tuple[MatchTier, Callable[[str, str, int], bool]]] = [
    (MatchTier.EXACT, _exact),
    (MatchTier.SUBSTRING, _alias_substring),
]


class CategoryMatcher:
    """
    Three-tier category matcher.

    Usage:
        matcher = CategoryMatcher()
        matcher.matches("Electrical Systems", ["Electrical"])  # True (substring)
    """

    def __init__(
        self,
        min_token_length: int = 1,
        tiers: list[tuple[MatchTier, Callable[[str, str, int], bool]]] | None = None,
    ):
        """
        Initialize matcher.

        Args:
            min_token_length: Shortest token the overlap tier will consider
            tiers: Ordered tier list (defaults to exact, substring, token overlap)
        """
        self.min_token_length = max(1, min_token_length)
        self.tiers = tiers if tiers is not None else TIERS

    def match_tier(
        self,
        question_label: object,
        target_labels: object,
        aliases: Iterable[str] = (),
    ) -> MatchTier | None:
        """
        Return the first tier that matches any target, or None.

        Requested labels go through the full cascade. Aliases expanded from
        the canonical table only get the exact and substring tiers, since
        their generic words ("systems", "sistema") would token-match
        unrelated categories.

        Args:
            question_label: Category stored on the question
            target_labels: Requested category labels
            aliases: Extra labels the requested ones stand for
        """
        question = normalize(question_label)
        if not question:
            return None
        if isinstance(target_labels, str) or not isinstance(target_labels, Iterable):
            return None

        tier = self._first_tier(question, target_labels, self.tiers)
        if tier is None:
            tier = self._first_tier(question, aliases, ALIAS_TIERS)
        return tier

    def matches(self, question_label: object, target_labels: object, aliases: Iterable[str] = ()) -> bool:
        """True if the question label satisfies any of the target labels or aliases."""
        return self.match_tier(question_label, target_labels, aliases) is not None

    def _first_tier(
        self,
        question: str,
        labels: Iterable[object],
        tiers: list[tuple[MatchTier, Callable[[str, str, int], bool]]],
    ) -> MatchTier | None:
        for raw_target in labels:
            target = normalize(raw_target)
            if not target:
                continue
            for tier, check in tiers:
                if check(question, target, self.min_token_length):
                    return tier
        return None


_default_matcher = CategoryMatcher()


def matches(question_label: object, target_labels: object) -> bool:
    """Module-level shortcut using the default (permissive) matcher."""
    return _default_matcher.matches(question_label, target_labels)
