"""Fuzzy client search with Cyrillic/Latin transliteration.

Two scores per candidate:
- 0 when any searched field contains the query (case-insensitive);
- otherwise the smallest Levenshtein distance between the query and a
  field, kept only within ``max_allowed_distance(len(query))``.

Results are sorted by score with a stable sort, so equal scores keep the
order of the input collection.
"""

from typing import Any, Hashable, Iterable, Mapping, Sequence, TypeVar

from rapidfuzz.distance import Levenshtein

from paperbot.models.client import CLIENT_SEARCH_FIELDS, ClientView
from paperbot.services.transliteration import has_cyrillic, transliterate

C = TypeVar("C")

EXACT_SCORE = 0
MIN_ALLOWED_DISTANCE = 3
DISTANCE_RATIO = 0.4


def levenshtein_distance(a: str, b: str) -> int:
    """Single-character insert/delete/substitute edit distance."""
    return Levenshtein.distance(a, b)


def max_allowed_distance(query_length: int) -> int:
    return max(MIN_ALLOWED_DISTANCE, int(query_length * DISTANCE_RATIO))


def _field_value(candidate: Any, field: str) -> str:
    if isinstance(candidate, Mapping):
        value = candidate.get(field)
    else:
        value = getattr(candidate, field, None)
    return "" if value is None else str(value).lower()


def score_candidate(candidate: Any, query: str, fields: Iterable[str]) -> int:
    """Score one candidate against an already lowercased query."""
    values = [_field_value(candidate, field) for field in fields]
    if any(query in value for value in values):
        return EXACT_SCORE
    if not values:
        return len(query)
    return min(levenshtein_distance(query, value) for value in values)


def match(candidates: Sequence[C], query: str, fields: Iterable[str]) -> list[C]:
    """Return the candidates similar to ``query``, best first.

    An empty or whitespace-only query returns the whole collection.
    """
    if not query or not query.strip():
        return list(candidates)

    lowered = query.strip().lower()
    fields = tuple(fields)
    limit = max_allowed_distance(len(lowered))

    scored = []
    for candidate in candidates:
        score = score_candidate(candidate, lowered, fields)
        if score <= limit:
            scored.append((score, candidate))

    scored.sort(key=lambda pair: pair[0])
    return [candidate for _, candidate in scored]


def _dedup_key(candidate: Any, key: str) -> Hashable | None:
    if isinstance(candidate, Mapping):
        value = candidate.get(key)
    else:
        value = getattr(candidate, key, None)
    if not value:
        return None
    try:
        hash(value)
    except TypeError:
        # Unhashable ids fall back to equality
        return None
    return value


def match_with_transliteration(
    candidates: Sequence[C],
    query: str,
    fields: Iterable[str],
    key: str = "id",
) -> list[C]:
    """Union of matches for the query as typed and for its Latin spelling.

    Results of the literal query come first. Duplicates are dropped by
    ``key``; candidates without a key are compared by equality.
    """
    fields = tuple(fields)
    primary = match(candidates, query, fields)
    if not query or not query.strip() or not has_cyrillic(query):
        return primary

    secondary = match(candidates, transliterate(query), fields)

    merged: list[C] = []
    seen_keys: set = set()
    for candidate in [*primary, *secondary]:
        candidate_key = _dedup_key(candidate, key)
        if candidate_key is not None:
            if candidate_key in seen_keys:
                continue
            seen_keys.add(candidate_key)
        elif candidate in merged:
            continue
        merged.append(candidate)
    return merged


def search_clients(clients: Sequence[ClientView], query: str) -> list[ClientView]:
    return match_with_transliteration(clients, query, CLIENT_SEARCH_FIELDS)


def group_candidates(candidates: Iterable[ClientView]) -> dict[tuple[str, str], list[ClientView]]:
    """Group branch duplicates by (display name, product), in first-seen order."""
    groups: dict[tuple[str, str], list[ClientView]] = {}
    for candidate in candidates:
        groups.setdefault(candidate.group_key, []).append(candidate)
    return groups


def flatten_groups(groups: Mapping[tuple[str, str], list[ClientView]]) -> list[ClientView]:
    return [candidate for members in groups.values() for candidate in members]
