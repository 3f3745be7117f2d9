import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, TypeVar

import httpx

from cineverse.domain.clock import utcnow
from cineverse.domain.exceptions import NotFoundError, UpstreamRequestError, UpstreamUnavailableError
from cineverse.domain.models.genre import genre_names_for
from cineverse.domain.models.movie import CastMember, MovieDetails, MoviePage, MovieRecord, Trailer
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.domain.ports.services.metadata_client import MetadataClient
from cineverse.infrastructure.config.settings import TMDBSettings
from cineverse.infrastructure.logging.std_logger_adapter import StdLoggerAdapter

POSTER_SIZE = "w500"
SIMILAR_LIMIT = 10
CAST_LIMIT = 10
SEARCH_RESULT_LIMIT = 30
PERSON_SEARCH_LIMIT = 2
PERSON_MOVIES_LIMIT = 8
GENRE_MOVIES_LIMIT = 12
TRENDING_WINDOWS = ("day", "week")
MALFORMED_PAYLOAD_ERRORS = (AttributeError, KeyError, TypeError, ValueError)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff for transient upstream failures.

    ``max_retries`` counts retries after the first attempt. 4xx responses are
    never retried.
    """

    max_retries: int = 3
    backoff_base: float = 1.0
    backoff_factor: float = 2.0
    backoff_max: float = 8.0
    retry_statuses: FrozenSet[int] = field(default_factory=lambda: frozenset({500, 502, 503, 504}))

    def delay_for(self, retry_number: int) -> float:
        return min(self.backoff_base * self.backoff_factor ** (retry_number - 1), self.backoff_max)

    @classmethod
    def from_settings(cls, settings: TMDBSettings) -> "RetryPolicy":
        return cls(
            max_retries=settings.max_retries,
            backoff_base=settings.backoff_base_seconds,
            backoff_max=settings.backoff_max_seconds,
        )


def _image_url(base_url: str, path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{base_url}/{POSTER_SIZE}{path}"


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _first(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def normalize_movie(raw: Mapping[str, Any], image_base_url: str = "https://image.tmdb.org/t/p") -> MovieRecord:
    """Map a provider payload (snake_case or camelCase) onto ``MovieRecord``."""
    genre_ids = list(_first(raw, "genre_ids", "genreIds", default=[]))
    raw_genres = raw.get("genres") or []
    if raw_genres:
        genres = [genre["name"] if isinstance(genre, Mapping) else str(genre) for genre in raw_genres]
        if not genre_ids:
            genre_ids = [genre["id"] for genre in raw_genres if isinstance(genre, Mapping) and "id" in genre]
    else:
        genres = genre_names_for(genre_ids)

    return MovieRecord(
        id=int(_first(raw, "id", "tmdbId")),
        title=_first(raw, "title", "name", "original_title", default=""),
        overview=raw.get("overview") or "",
        genres=genres,
        genre_ids=genre_ids,
        popularity=float(raw.get("popularity") or 0.0),
        rating=float(_first(raw, "vote_average", "rating", default=0.0)),
        release_date=_parse_date(_first(raw, "release_date", "releaseDate")),
        poster_url=_first(raw, "posterUrl", default=None) or _image_url(image_base_url, raw.get("poster_path")),
        backdrop_url=_first(raw, "backdropUrl", default=None) or _image_url(image_base_url, raw.get("backdrop_path")),
    )


def _pick_trailer(videos: Iterable[Mapping[str, Any]]) -> Optional[Trailer]:
    videos = [video for video in videos if video.get("key")]
    if not videos:
        return None
    chosen = next(
        (video for video in videos if video.get("type") == "Trailer" and video.get("site") == "YouTube"),
        videos[0],
    )
    return Trailer(
        key=chosen["key"], name=chosen.get("name"), url=f"https://www.youtube.com/embed/{chosen['key']}"
    )


def normalize_details(raw: Mapping[str, Any], image_base_url: str = "https://image.tmdb.org/t/p") -> MovieDetails:
    base = normalize_movie(raw, image_base_url)
    credits = raw.get("credits") or {}
    director = next((member for member in credits.get("crew") or [] if member.get("job") == "Director"), None)

    return MovieDetails(
        **base.model_dump(),
        tagline=raw.get("tagline") or None,
        runtime=raw.get("runtime"),
        budget=raw.get("budget"),
        revenue=raw.get("revenue"),
        status=raw.get("status"),
        production_companies=[company["name"] for company in raw.get("production_companies") or []],
        trailer=_pick_trailer((raw.get("videos") or {}).get("results") or []),
        cast=[
            CastMember(
                id=member["id"],
                name=member["name"],
                character=member.get("character"),
                profile_url=_image_url(image_base_url, member.get("profile_path")),
            )
            for member in (credits.get("cast") or [])[:CAST_LIMIT]
        ],
        director=director["name"] if director else None,
        similar_movies=[
            normalize_movie(movie, image_base_url)
            for movie in ((raw.get("similar") or {}).get("results") or [])[:SIMILAR_LIMIT]
        ],
    )


def search_relevance(movie: MovieRecord) -> float:
    return movie.popularity * 0.7 + movie.rating * 3


class TMDBMetadataClient(MetadataClient):
    def __init__(
        self,
        settings: TMDBSettings,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        fallback_transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[LoggerPort] = None,
    ):
        self.settings = settings
        self.retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        self.logger = logger or StdLoggerAdapter(__name__)

        timeout = httpx.Timeout(settings.timeout_seconds, connect=settings.connect_timeout_seconds)
        if transport is None and settings.force_ipv4:
            transport = httpx.AsyncHTTPTransport(local_address="0.0.0.0")
        self._client = httpx.AsyncClient(
            base_url=settings.base_url, timeout=timeout, transport=transport, headers=self._headers()
        )

        self._fallback_client: Optional[httpx.AsyncClient] = None
        if fallback_transport is not None:
            self._fallback_client = httpx.AsyncClient(
                base_url=settings.base_url, timeout=timeout, transport=fallback_transport, headers=self._headers()
            )
        elif settings.proxy_url:
            self._fallback_client = httpx.AsyncClient(
                base_url=settings.base_url, timeout=timeout, proxy=settings.proxy_url, headers=self._headers()
            )

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.read_access_token:
            headers["Authorization"] = f"Bearer {self.settings.read_access_token}"
        return headers

    def _params(self, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        merged = dict(params or {})
        if not self.settings.read_access_token and self.settings.api_key:
            merged["api_key"] = self.settings.api_key
        return merged

    async def aclose(self) -> None:
        await self._client.aclose()
        if self._fallback_client is not None:
            await self._fallback_client.aclose()

    async def _send(self, client: httpx.AsyncClient, path: str, params: Dict[str, Any]) -> httpx.Response:
        retry_number = 0
        while True:
            try:
                response = await client.get(path, params=params)
                if response.status_code not in self.retry_policy.retry_statuses:
                    return response
                reason = f"status {response.status_code}"
            except httpx.TransportError as exc:
                if retry_number >= self.retry_policy.max_retries:
                    raise
                reason = type(exc).__name__
            else:
                if retry_number >= self.retry_policy.max_retries:
                    return response

            retry_number += 1
            delay = self.retry_policy.delay_for(retry_number)
            self.logger.warning(
                f"TMDB request {path} failed ({reason}), retry {retry_number}/{self.retry_policy.max_retries} "
                f"in {delay:.1f}s"
            )
            await asyncio.sleep(delay)

    def _decode(self, response: httpx.Response, path: str) -> Dict[str, Any]:
        status = response.status_code
        if status == 404:
            raise NotFoundError("Movie not found", detail=f"TMDB returned 404 for {path}")
        if status in self.retry_policy.retry_statuses or status >= 500:
            raise UpstreamUnavailableError(
                "Movie metadata service unavailable", detail=f"TMDB returned {status} for {path}"
            )
        if status >= 400:
            raise UpstreamRequestError("Movie metadata request rejected", detail=f"TMDB returned {status} for {path}")
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamRequestError(
                "Malformed movie metadata response", detail=f"TMDB returned a non-JSON body for {path}"
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamRequestError(
                "Malformed movie metadata response", detail=f"TMDB returned {type(data).__name__} for {path}"
            )
        return data

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        request_params = self._params(params)
        try:
            response = await self._send(self._client, path, request_params)
        except httpx.TransportError as exc:
            if self._fallback_client is None:
                self.logger.error(f"TMDB request {path} exhausted retries: {type(exc).__name__}")
                raise UpstreamUnavailableError(
                    "Movie metadata service unavailable", detail=f"{type(exc).__name__} while fetching {path}"
                ) from exc
            self.logger.warning(f"TMDB request {path} exhausted retries, trying fallback route")
            try:
                response = await self._fallback_client.get(path, params=request_params)
            except httpx.TransportError as fallback_exc:
                self.logger.error(f"TMDB fallback request {path} failed: {type(fallback_exc).__name__}")
                raise UpstreamUnavailableError(
                    "Movie metadata service unavailable",
                    detail=f"{type(fallback_exc).__name__} while fetching {path}",
                ) from fallback_exc
        return self._decode(response, path)

    def _parse(self, path: str, parser: Callable[[Mapping[str, Any]], T], data: Mapping[str, Any]) -> T:
        try:
            return parser(data)
        except MALFORMED_PAYLOAD_ERRORS as exc:
            raise UpstreamRequestError(
                "Malformed movie metadata response", detail=f"{type(exc).__name__} while reading {path}"
            ) from exc

    async def _get_page(self, path: str, params: Optional[Dict[str, Any]] = None) -> MoviePage:
        return self._parse(path, self._to_page, await self._get(path, params))

    def _to_page(self, data: Mapping[str, Any]) -> MoviePage:
        return MoviePage(
            movies=[normalize_movie(movie, self.settings.image_base_url) for movie in data.get("results") or []],
            page=data.get("page") or 1,
            total_pages=data.get("total_pages") or 0,
            total_results=data.get("total_results") or 0,
        )

    async def get_popular(self, page: int = 1) -> MoviePage:
        return await self._get_page("/movie/popular", {"page": page})

    async def get_trending(self, window: str = "week") -> MoviePage:
        if window not in TRENDING_WINDOWS:
            window = "week"
        return await self._get_page(f"/trending/movie/{window}")

    async def get_top_rated(self, page: int = 1) -> MoviePage:
        return await self._get_page("/movie/top_rated", {"page": page})

    async def get_now_playing(self, page: int = 1) -> MoviePage:
        return await self._get_page("/movie/now_playing", {"page": page})

    async def get_upcoming(self, page: int = 1) -> MoviePage:
        return await self._get_page("/movie/upcoming", {"page": page})

    async def get_by_genre(self, genre_id: int, page: int = 1) -> MoviePage:
        return await self._get_page(
            "/discover/movie", {"with_genres": genre_id, "page": page, "sort_by": "popularity.desc"}
        )

    async def get_details(self, movie_id: int) -> MovieDetails:
        path = f"/movie/{movie_id}"
        data = await self._get(path, {"append_to_response": "credits,videos,similar"})
        return self._parse(path, lambda raw: normalize_details(raw, self.settings.image_base_url), data)

    async def discover_recent(self) -> MoviePage:
        return await self._get_page(
            "/discover/movie",
            {
                "sort_by": "release_date.desc",
                "release_date.lte": utcnow().date().isoformat(),
                "vote_count.gte": 50,
                "page": 1,
            },
        )

    async def get_genres(self) -> Dict[int, str]:
        data = await self._get("/genre/movie/list")
        return self._parse(
            "/genre/movie/list",
            lambda raw: {genre["id"]: genre["name"] for genre in raw.get("genres") or []},
            data,
        )

    async def search(self, query: str, page: int = 1) -> MoviePage:
        """Title search widened with matching people's credits and matching genres."""
        movie_search, person_search, genres = await asyncio.gather(
            self._get("/search/movie", {"query": query, "page": page, "include_adult": "false"}),
            self._get("/search/person", {"query": query, "page": 1}),
            self.get_genres(),
            return_exceptions=True,
        )
        if isinstance(movie_search, BaseException):
            raise movie_search

        movies = self._parse("/search/movie", self._to_page, movie_search).movies
        seen = {movie.id for movie in movies}

        if isinstance(person_search, Exception):
            self.logger.source_degraded(f"search '{query}'", "people", person_search)
        elif isinstance(person_search, BaseException):
            raise person_search
        else:
            people = (person_search.get("results") or [])[:PERSON_SEARCH_LIMIT]
            credits = await asyncio.gather(
                *(self._get(f"/person/{person['id']}/movie_credits") for person in people), return_exceptions=True
            )
            for person_credits in credits:
                if isinstance(person_credits, Exception):
                    self.logger.source_degraded(f"search '{query}'", "person credits", person_credits)
                    continue
                if isinstance(person_credits, BaseException):
                    raise person_credits
                candidates = list(person_credits.get("cast") or []) + [
                    member for member in person_credits.get("crew") or [] if member.get("job") == "Director"
                ]
                candidates = [
                    movie
                    for movie in candidates
                    if movie.get("id") and movie["id"] not in seen and (movie.get("popularity") or 0) > 5
                ]
                candidates.sort(key=lambda movie: movie.get("popularity") or 0, reverse=True)
                for raw in candidates[:PERSON_MOVIES_LIMIT]:
                    if raw["id"] in seen:
                        continue
                    seen.add(raw["id"])
                    movies.append(normalize_movie(raw, self.settings.image_base_url))

        if isinstance(genres, Exception):
            self.logger.source_degraded(f"search '{query}'", "genres", genres)
        elif isinstance(genres, BaseException):
            raise genres
        else:
            lowered = query.lower()
            matching = [genre_id for genre_id, name in genres.items() if lowered in name.lower()][:2]
            if matching:
                try:
                    genre_movies = await self._get(
                        "/discover/movie",
                        {
                            "with_genres": ",".join(str(genre_id) for genre_id in matching),
                            "sort_by": "popularity.desc",
                            "vote_count.gte": 100,
                            "page": 1,
                        },
                    )
                except (UpstreamUnavailableError, UpstreamRequestError, NotFoundError) as exc:
                    self.logger.source_degraded(f"search '{query}'", "genre discovery", exc)
                else:
                    extra = [raw for raw in genre_movies.get("results") or [] if raw.get("id") not in seen]
                    for raw in extra[:GENRE_MOVIES_LIMIT]:
                        seen.add(raw["id"])
                        movies.append(normalize_movie(raw, self.settings.image_base_url))

        movies.sort(key=search_relevance, reverse=True)
        movies = movies[:SEARCH_RESULT_LIMIT]
        return MoviePage(
            movies=movies,
            page=movie_search.get("page") or page,
            total_pages=movie_search.get("total_pages") or 0,
            total_results=len(movies),
        )
