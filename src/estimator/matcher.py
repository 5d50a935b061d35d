"""Fuzzy model matching for machinery model strings.

Model numbers encode a family prefix before the first hyphen and a
generation suffix after it ("ZX200-6"). Records of the same family are
comparable for pricing even when the generation differs.

Relevance scores:
- 100: exact (case-sensitive) match
- 90: one model is a prefix of the other
- 85: same family token
- 80: one family token appears inside the other model string
"""

from __future__ import annotations

EXACT = 100
PREFIX = 90
SAME_FAMILY = 85
FAMILY_SUBSTRING = 80


def family_token(model: str) -> str:
    """Return the substring before the first hyphen.

    A model without a hyphen (or with nothing before it) is its own family.
    """
    head, sep, _ = model.partition("-")
    if not sep or not head:
        return model
    return head


def model_relevance(query: str, candidate: str | None) -> int | None:
    """Relevance of ``candidate`` for ``query``, or None when unrelated."""
    if not query or not candidate:
        return None
    if candidate == query:
        return EXACT
    if candidate.startswith(query) or query.startswith(candidate):
        return PREFIX

    query_family = family_token(query)
    candidate_family = family_token(candidate)
    if query_family == candidate_family:
        return SAME_FAMILY
    if query_family in candidate or candidate_family in query:
        return FAMILY_SUBSTRING
    return None


def is_related_model(query: str, candidate: str | None) -> bool:
    """Inclusion filter for historical records (all four rules)."""
    return model_relevance(query, candidate) is not None


def is_prefix_match(query: str, candidate: str | None) -> bool:
    """Stricter inclusion filter for live records: exact or prefix only."""
    relevance = model_relevance(query, candidate)
    return relevance is not None and relevance >= PREFIX
