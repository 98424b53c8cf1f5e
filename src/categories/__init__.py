"""
Category normalization and matching.

This module provides:
- normalize: label -> comparison key
- CategoryMatcher: exact / substring / token-overlap cascade
- canonical category table with English and Spanish aliases
"""

from .mappings import (
    CANONICAL_CATEGORIES,
    CanonicalCategory,
    available_categories,
    canonicalize,
    describe,
    expand,
    expand_all,
    is_wildcard,
)
from .matcher import CategoryMatcher, MatchTier, matches
from .normalizer import contains_label, normalize, tokens

__all__ = [
    "normalize",
    "tokens",
    "contains_label",
    "CategoryMatcher",
    "MatchTier",
    "matches",
    "CANONICAL_CATEGORIES",
    "CanonicalCategory",
    "available_categories",
    "canonicalize",
    "describe",
    "expand",
    "expand_all",
    "is_wildcard",
]
