import asyncio
from typing import Dict, List

from cineverse.domain.exceptions import UpstreamRequestError, UpstreamUnavailableError
from cineverse.domain.models.movie import MovieRecord
from cineverse.domain.models.recommendation import MovieListResult
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.domain.ports.services.metadata_client import MetadataClient

UPSTREAM_ERRORS = (UpstreamUnavailableError, UpstreamRequestError)

MOST_SEARCHED_QUERIES = 30
MOST_SEARCHED_IDS = 15
AGGREGATE_LIMIT = 20


class MovieAggregationService:
    def __init__(
        self,
        metadata_client: MetadataClient,
        search_history_repository: SearchHistoryRepository,
        logger: LoggerPort,
    ):
        self.metadata_client = metadata_client
        self.search_history_repository = search_history_repository
        self.logger = logger

    async def most_searched(self) -> MovieListResult:
        """Movies behind the most frequent searches.

        Trending and popular titles top the list up only when fewer than 15
        searched movies resolve.
        """
        entries = await self.search_history_repository.get_most_searched(MOST_SEARCHED_QUERIES)

        movie_ids: List[int] = []
        for entry in entries:
            for movie_id in entry.movie_ids:
                if movie_id not in movie_ids:
                    movie_ids.append(movie_id)
        movie_ids = movie_ids[:MOST_SEARCHED_IDS]

        details, lists = await asyncio.gather(
            asyncio.gather(
                *(self.metadata_client.get_details(movie_id) for movie_id in movie_ids), return_exceptions=True
            ),
            asyncio.gather(
                self.metadata_client.get_trending("week"), self.metadata_client.get_popular(1), return_exceptions=True
            ),
        )

        degraded: List[str] = []
        movies: List[MovieRecord] = []
        present = set(movie_ids)
        for movie_id, detail in zip(movie_ids, details):
            if isinstance(detail, Exception):
                self.logger.source_degraded("most searched", f"details:{movie_id}", detail)
                degraded.append(f"details:{movie_id}")
                continue
            if isinstance(detail, BaseException):
                raise detail
            present.add(detail.id)
            movies.append(detail.to_record())

        if len(movies) < MOST_SEARCHED_IDS:
            for source, page in zip(("trending", "popular"), lists):
                if isinstance(page, Exception):
                    self.logger.source_degraded("most searched", source, page)
                    degraded.append(source)
                    continue
                if isinstance(page, BaseException):
                    raise page
                for movie in page.movies:
                    if len(movies) >= AGGREGATE_LIMIT:
                        break
                    if movie.id not in present:
                        present.add(movie.id)
                        movies.append(movie)

        if not movies and degraded:
            return await self._trending_fallback("most searched")

        movies.sort(key=lambda movie: movie.popularity, reverse=True)
        return MovieListResult(movies=movies[:AGGREGATE_LIMIT], degraded_sources=degraded)

    async def recently_added(self) -> MovieListResult:
        """Fresh releases merged from discover, now-playing and upcoming, newest release first."""
        sources = ("discover", "now_playing", "upcoming")
        pages = await asyncio.gather(
            self.metadata_client.discover_recent(),
            self.metadata_client.get_now_playing(1),
            self.metadata_client.get_upcoming(1),
            return_exceptions=True,
        )

        degraded: List[str] = []
        merged: Dict[int, MovieRecord] = {}
        for source, page in zip(sources, pages):
            if isinstance(page, Exception):
                self.logger.source_degraded("recently added", source, page)
                degraded.append(source)
                continue
            if isinstance(page, BaseException):
                raise page
            for movie in page.movies:
                merged[movie.id] = movie

        if len(degraded) == len(sources):
            try:
                now_playing = await self.metadata_client.get_now_playing(1)
            except UPSTREAM_ERRORS as exc:
                raise UpstreamUnavailableError(
                    "Error fetching recently added movies", detail=exc.detail or exc.message
                ) from exc
            return MovieListResult(movies=now_playing.movies[:AGGREGATE_LIMIT], degraded_sources=degraded)

        dated = [movie for movie in merged.values() if movie.release_date is not None]
        dated.sort(key=lambda movie: movie.release_date, reverse=True)
        return MovieListResult(movies=dated[:AGGREGATE_LIMIT], degraded_sources=degraded)

    async def _trending_fallback(self, label: str) -> MovieListResult:
        self.logger.warning(f"All {label} sources failed, serving trending")
        try:
            trending = await self.metadata_client.get_trending("week")
        except UPSTREAM_ERRORS as exc:
            raise UpstreamUnavailableError(
                f"Error fetching {label} movies", detail=exc.detail or exc.message
            ) from exc
        return MovieListResult(movies=trending.movies[:AGGREGATE_LIMIT], degraded_sources=[label])
