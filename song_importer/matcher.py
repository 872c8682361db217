from __future__ import annotations

from typing import List, Sequence

from .types import Candidate, MatchDecision


def contains_either(value: str | None, target: str | None) -> bool:
    """Case-insensitive substring check in both directions.

    An empty target is contained in every value, so it always matches.
    """
    v = (value or "").lower()
    t = (target or "").lower()
    return t in v or v in t


def find_best_match(candidates: Sequence[Candidate], title: str, artist: str) -> MatchDecision:
    """Pick one candidate using containment tiers.

    1. title and artist both match
    2. artist matches
    3. first candidate (search results are already ranked by relevance)

    Returns None only when there are no candidates at all.
    """
    if not candidates:
        return None

    for cand in candidates:
        if contains_either(cand.artist, artist) and contains_either(cand.name, title):
            return cand

    by_artist = find_by_artist(candidates, artist)
    if by_artist is not None:
        return by_artist

    return candidates[0]


def find_by_artist(candidates: Sequence[Candidate], artist: str) -> MatchDecision:
    for cand in candidates:
        if contains_either(cand.artist, artist):
            return cand
    return None


def describe_candidates(candidates: Sequence[Candidate]) -> List[str]:
    return [f'[{c.id}] "{c.name}" by {c.artist}' for c in candidates]
