"""Weighted-recency scoring of a user's activity history.

Pure functions over ``ActivityEvent`` sequences ordered most recent first.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Set

from cineverse.domain.models.activity import ActivityEvent, ActivityType
from cineverse.domain.models.recommendation import ScoredCandidate

ACTIVITY_HISTORY_LIMIT = 100
RECENCY_WINDOW = 50
EXCLUSION_WINDOW = 20
SEED_COUNT = 8
SIMILAR_CANDIDATE_LIMIT = 15
MAX_RECOMMENDATIONS = 20
DEFAULT_WEIGHT = 1

ACTIVITY_WEIGHTS: Dict[ActivityType, int] = {
    ActivityType.PLAY: 10,
    ActivityType.PURCHASE: 8,
    ActivityType.LIKE: 6,
    ActivityType.SHARE: 5,
    ActivityType.COMMENT: 4,
    ActivityType.VIEW: 3,
    ActivityType.SEARCH: 2,
    ActivityType.PAGE_VIEW: 1,
}


def activity_weight(activity_type) -> int:
    try:
        return ACTIVITY_WEIGHTS.get(ActivityType(activity_type), DEFAULT_WEIGHT)
    except ValueError:
        return DEFAULT_WEIGHT


def recency_multiplier(position: int) -> float:
    """Linear boost for the 50 most recent events: 1.5 at position 0 down to 1.01."""
    if position < RECENCY_WINDOW:
        return 1 + (RECENCY_WINDOW - position) / 100
    return 1.0


def accumulate_scores(events: Sequence[ActivityEvent]) -> Dict[int, float]:
    scores: Dict[int, float] = defaultdict(float)
    for position, event in enumerate(events):
        if event.movie_id is None:
            continue
        scores[event.movie_id] += activity_weight(event.activity_type) * recency_multiplier(position)
    return dict(scores)


def recently_seen(events: Sequence[ActivityEvent], window: int = EXCLUSION_WINDOW) -> Set[int]:
    return {event.movie_id for event in events[:window] if event.movie_id is not None}


def rank_candidates(scores: Dict[int, float]) -> List[ScoredCandidate]:
    """Highest score first; equal scores fall back to the lower movie id."""
    ordered = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
    return [ScoredCandidate(movie_id=movie_id, score=score) for movie_id, score in ordered]


def select_seeds(scores: Dict[int, float], count: int = SEED_COUNT) -> List[int]:
    return [candidate.movie_id for candidate in rank_candidates(scores)[:count]]


def merge_candidates(
    candidate_lists: Iterable[Iterable[int]], excluded: Set[int], limit: int = SIMILAR_CANDIDATE_LIMIT
) -> List[int]:
    """Flatten in order, dropping excluded and repeated ids, and keep the first ``limit``."""
    merged: List[int] = []
    seen: Set[int] = set()
    for candidates in candidate_lists:
        for movie_id in candidates:
            if movie_id in excluded or movie_id in seen:
                continue
            seen.add(movie_id)
            merged.append(movie_id)
    return merged[:limit]
