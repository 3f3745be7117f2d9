import asyncio
from typing import Dict, List, Optional, Set

from cineverse.domain.exceptions import UpstreamRequestError, UpstreamUnavailableError
from cineverse.domain.models.movie import MovieRecord
from cineverse.domain.models.recommendation import MovieListResult
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.domain.ports.services.metadata_client import MetadataClient
from cineverse.domain.services.scoring_engine import (
    ACTIVITY_HISTORY_LIMIT,
    MAX_RECOMMENDATIONS,
    SIMILAR_CANDIDATE_LIMIT,
    accumulate_scores,
    merge_candidates,
    recently_seen,
    select_seeds,
)

UPSTREAM_ERRORS = (UpstreamUnavailableError, UpstreamRequestError)

ANONYMOUS_BLEND = (("popular", 10), ("trending", 10))
NEW_USER_BLEND = (("popular", 7), ("trending", 7), ("top_rated", 6))


class PersonalizedRecommendationService:
    """Ranks movies for a user from their recent activity.

    Seeds are the highest scoring movies in the activity window; candidates are
    their similar titles, minus anything the user touched recently, topped up
    with trending titles when fewer than 15 remain. Users without history get
    a fixed blend of lists.
    """

    def __init__(self, metadata_client: MetadataClient, activity_repository: ActivityRepository, logger: LoggerPort):
        self.metadata_client = metadata_client
        self.activity_repository = activity_repository
        self.logger = logger

    async def recommend(self, user_id: Optional[int], limit: int = MAX_RECOMMENDATIONS) -> MovieListResult:
        limit = max(1, min(limit, MAX_RECOMMENDATIONS))
        try:
            result = await self._rank(user_id)
        except UPSTREAM_ERRORS as exc:
            self.logger.warning(f"Personalized ranking failed ({exc.detail or exc.message}), serving popular movies")
            try:
                popular = await self.metadata_client.get_popular(1)
            except UPSTREAM_ERRORS as fallback_exc:
                self.logger.error(f"Popular fallback failed: {fallback_exc.detail or fallback_exc.message}")
                raise UpstreamUnavailableError(
                    "Error fetching recommendations", detail=fallback_exc.detail or fallback_exc.message
                ) from fallback_exc
            result = MovieListResult(movies=popular.movies, degraded_sources=["personalized"])

        result.movies = result.movies[:limit]
        return result

    async def _rank(self, user_id: Optional[int]) -> MovieListResult:
        if user_id is None:
            return await self._blend(ANONYMOUS_BLEND)

        events = await self.activity_repository.query_recent(user_id, ACTIVITY_HISTORY_LIMIT)
        if not events:
            self.logger.info(f"No activity for user {user_id}, serving new-user blend")
            return await self._blend(NEW_USER_BLEND)

        scores = accumulate_scores(events)
        excluded = recently_seen(events)
        seeds = select_seeds(scores)
        self.logger.info(f"User {user_id}: {len(events)} events, {len(scores)} scored movies, seeds {seeds}")

        degraded: List[str] = []
        records: Dict[int, MovieRecord] = {}
        similar_ids: List[List[int]] = []

        expansions = await asyncio.gather(
            *(self.metadata_client.get_details(seed) for seed in seeds), return_exceptions=True
        )
        for seed, expansion in zip(seeds, expansions):
            if isinstance(expansion, Exception):
                self.logger.source_degraded("personalized", f"similar:{seed}", expansion)
                degraded.append(f"similar:{seed}")
                similar_ids.append([])
                continue
            if isinstance(expansion, BaseException):
                raise expansion
            for movie in expansion.similar_movies:
                records.setdefault(movie.id, movie)
            similar_ids.append([movie.id for movie in expansion.similar_movies])

        candidates = [records[movie_id] for movie_id in merge_candidates(similar_ids, excluded)]

        if len(candidates) < SIMILAR_CANDIDATE_LIMIT:
            candidates.extend(await self._trending_backfill(candidates, excluded, degraded))

        if degraded:
            self.logger.warning(f"Personalized ranking for user {user_id} degraded: {', '.join(degraded)}")
        return MovieListResult(movies=candidates[:MAX_RECOMMENDATIONS], degraded_sources=degraded)

    async def _trending_backfill(
        self, candidates: List[MovieRecord], excluded: Set[int], degraded: List[str]
    ) -> List[MovieRecord]:
        try:
            trending = await self.metadata_client.get_trending("week")
        except UPSTREAM_ERRORS as exc:
            if not candidates:
                raise
            self.logger.source_degraded("personalized", "trending", exc)
            degraded.append("trending")
            return []

        present = {movie.id for movie in candidates}
        backfill: List[MovieRecord] = []
        for movie in trending.movies:
            if len(candidates) + len(backfill) >= MAX_RECOMMENDATIONS:
                break
            if movie.id in excluded or movie.id in present:
                continue
            present.add(movie.id)
            backfill.append(movie)
        return backfill

    async def _blend(self, blend) -> MovieListResult:
        fetchers = {
            "popular": lambda: self.metadata_client.get_popular(1),
            "trending": lambda: self.metadata_client.get_trending("week"),
            "top_rated": lambda: self.metadata_client.get_top_rated(1),
        }
        pages = await asyncio.gather(*(fetchers[source]() for source, _ in blend), return_exceptions=True)

        movies: List[MovieRecord] = []
        degraded: List[str] = []
        for (source, count), page in zip(blend, pages):
            if isinstance(page, Exception):
                self.logger.source_degraded("blend", source, page)
                degraded.append(source)
                continue
            if isinstance(page, BaseException):
                raise page
            movies.extend(page.movies[:count])

        if len(degraded) == len(blend):
            raise UpstreamUnavailableError("Movie metadata service unavailable", detail="all blend sources failed")
        return MovieListResult(movies=movies, degraded_sources=degraded)
