from datetime import date

import httpx
import pytest
import pytest_asyncio

from cineverse.domain.exceptions import NotFoundError, UpstreamRequestError, UpstreamUnavailableError
from cineverse.infrastructure.adapters.services.tmdb_metadata_client import (
    RetryPolicy,
    TMDBMetadataClient,
    normalize_details,
    normalize_movie,
)
from cineverse.infrastructure.config.settings import TMDBSettings

NO_DELAY = RetryPolicy(max_retries=3, backoff_base=0)

POPULAR_PAYLOAD = {
    "page": 1,
    "total_pages": 3,
    "total_results": 60,
    "results": [
        {
            "id": 27205,
            "title": "Inception",
            "overview": "Dreams within dreams.",
            "genre_ids": [28, 878],
            "popularity": 83.2,
            "vote_average": 8.4,
            "release_date": "2010-07-15",
            "poster_path": "/inception.jpg",
        }
    ],
}


def _settings(**overrides):
    values = {"api_key": "test-key", "read_access_token": None}
    values.update(overrides)
    return TMDBSettings(**values)


class TestNormalization:
    def test_snake_case_payload(self):
        movie = normalize_movie(POPULAR_PAYLOAD["results"][0])

        assert movie.id == 27205
        assert movie.genres == ["Action", "Science Fiction"]
        assert movie.rating == 8.4
        assert movie.release_date == date(2010, 7, 15)
        assert movie.poster_url == "https://image.tmdb.org/t/p/w500/inception.jpg"

    def test_camel_case_payload(self):
        movie = normalize_movie(
            {
                "tmdbId": 603,
                "title": "The Matrix",
                "genreIds": [28],
                "releaseDate": "1999-03-30",
                "posterUrl": "https://cdn.example.com/matrix.jpg",
            }
        )

        assert movie.id == 603
        assert movie.genre_ids == [28]
        assert movie.release_date == date(1999, 3, 30)
        assert movie.poster_url == "https://cdn.example.com/matrix.jpg"

    def test_malformed_release_date_becomes_none(self):
        assert normalize_movie({"id": 1, "title": "X", "release_date": ""}).release_date is None
        assert normalize_movie({"id": 1, "title": "X", "release_date": "soon"}).release_date is None

    def test_details_pick_youtube_trailer_and_director(self):
        details = normalize_details(
            {
                "id": 1,
                "title": "Heat",
                "genres": [{"id": 80, "name": "Crime"}],
                "videos": {
                    "results": [
                        {"key": "teaser1", "type": "Teaser", "site": "YouTube"},
                        {"key": "trailer1", "type": "Trailer", "site": "YouTube", "name": "Official Trailer"},
                    ]
                },
                "credits": {
                    "cast": [{"id": 10, "name": "Al Pacino", "character": "Vincent Hanna"}],
                    "crew": [{"id": 20, "name": "Michael Mann", "job": "Director"}],
                },
                "similar": {"results": [{"id": i, "title": f"Similar {i}"} for i in range(2, 20)]},
            }
        )

        assert details.genres == ["Crime"]
        assert details.genre_ids == [80]
        assert details.trailer.key == "trailer1"
        assert details.trailer.url == "https://www.youtube.com/embed/trailer1"
        assert details.director == "Michael Mann"
        assert details.cast[0].name == "Al Pacino"
        assert len(details.similar_movies) == 10


class TestTMDBMetadataClient:
    @pytest_asyncio.fixture
    async def make_client(self):
        clients = []

        def factory(handler, fallback_handler=None, settings=None):
            client = TMDBMetadataClient(
                settings or _settings(),
                retry_policy=NO_DELAY,
                transport=httpx.MockTransport(handler),
                fallback_transport=httpx.MockTransport(fallback_handler) if fallback_handler else None,
            )
            clients.append(client)
            return client

        yield factory

        for client in clients:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_get_popular_sends_api_key_and_normalizes(self, make_client):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=POPULAR_PAYLOAD)

        client = make_client(handler)

        page = await client.get_popular(2)

        assert seen[0].url.path == "/3/movie/popular"
        assert seen[0].url.params["api_key"] == "test-key"
        assert seen[0].url.params["page"] == "2"
        assert page.total_pages == 3
        assert page.movies[0].title == "Inception"

    @pytest.mark.asyncio
    async def test_bearer_token_replaces_api_key(self, make_client):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": []})

        client = make_client(handler, settings=_settings(read_access_token="v4-token"))

        await client.get_top_rated()

        assert seen[0].headers["Authorization"] == "Bearer v4-token"
        assert "api_key" not in seen[0].url.params

    @pytest.mark.asyncio
    async def test_unknown_trending_window_defaults_to_week(self, make_client):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"results": []})

        client = make_client(handler)

        await client.get_trending("month")

        assert paths == ["/3/trending/movie/week"]

    @pytest.mark.asyncio
    async def test_404_maps_to_not_found(self, make_client):
        client = make_client(lambda request: httpx.Response(404, json={"status_message": "missing"}))

        with pytest.raises(NotFoundError):
            await client.get_details(999999)

    @pytest.mark.asyncio
    async def test_transient_status_is_retried_until_success(self, make_client):
        statuses = iter([503, 503, 200])
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            status = next(statuses)
            if status == 200:
                return httpx.Response(200, json=POPULAR_PAYLOAD)
            return httpx.Response(status)

        client = make_client(handler)

        page = await client.get_popular()

        assert len(calls) == 3
        assert page.movies[0].id == 27205

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_unavailable(self, make_client):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(502)

        client = make_client(handler)

        with pytest.raises(UpstreamUnavailableError):
            await client.get_popular()
        assert len(calls) == 4

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self, make_client):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, json={"status_message": "Invalid API key"})

        client = make_client(handler)

        with pytest.raises(UpstreamRequestError):
            await client.get_popular()
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_connection_failures_use_fallback_route(self, make_client):
        primary_calls = []

        def primary(request: httpx.Request) -> httpx.Response:
            primary_calls.append(request)
            raise httpx.ConnectError("connection reset", request=request)

        def fallback(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=POPULAR_PAYLOAD)

        client = make_client(primary, fallback)

        page = await client.get_popular()

        assert len(primary_calls) == 4
        assert page.movies[0].title == "Inception"

    @pytest.mark.asyncio
    async def test_connection_failures_without_fallback_raise_unavailable(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamUnavailableError):
            await client.get_upcoming()

    @pytest.mark.asyncio
    async def test_search_merges_person_credits_and_genres(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path == "/3/search/movie":
                return httpx.Response(
                    200, json={"page": 1, "total_pages": 1, "results": [{"id": 1, "title": "Drama Queen"}]}
                )
            if path == "/3/search/person":
                return httpx.Response(200, json={"results": [{"id": 77, "name": "Someone"}]})
            if path == "/3/person/77/movie_credits":
                return httpx.Response(
                    200,
                    json={
                        "cast": [
                            {"id": 2, "title": "Famous", "popularity": 50.0},
                            {"id": 3, "title": "Obscure", "popularity": 1.0},
                            {"id": 1, "title": "Drama Queen", "popularity": 40.0},
                        ],
                        "crew": [],
                    },
                )
            if path == "/3/genre/movie/list":
                return httpx.Response(200, json={"genres": [{"id": 18, "name": "Drama"}]})
            if path == "/3/discover/movie":
                assert request.url.params["with_genres"] == "18"
                return httpx.Response(200, json={"results": [{"id": 4, "title": "Genre Pick", "popularity": 9.0}]})
            return httpx.Response(404)

        client = make_client(handler)

        page = await client.search("drama")

        ids = [movie.id for movie in page.movies]
        assert ids == [2, 4, 1]
        assert page.total_results == 3

    @pytest.mark.asyncio
    async def test_search_survives_person_lookup_failure(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path == "/3/search/movie":
                return httpx.Response(200, json={"results": [{"id": 1, "title": "Alien"}]})
            if path == "/3/search/person":
                return httpx.Response(500)
            return httpx.Response(200, json={"genres": []})

        client = make_client(handler)

        page = await client.search("alien")

        assert [movie.id for movie in page.movies] == [1]

    @pytest.mark.asyncio
    async def test_rate_limit_is_not_retried(self, make_client):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429, json={"status_message": "Too many requests"})

        client = make_client(handler)

        with pytest.raises(UpstreamRequestError):
            await client.get_popular()
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_non_json_body_raises_request_error(self, make_client):
        client = make_client(lambda request: httpx.Response(200, text="<html>gateway page</html>"))

        with pytest.raises(UpstreamRequestError) as exc_info:
            await client.get_details(2)
        assert exc_info.value.detail == "TMDB returned a non-JSON body for /movie/2"

    @pytest.mark.asyncio
    async def test_malformed_payload_raises_request_error(self, make_client):
        client = make_client(lambda request: httpx.Response(200, json={"results": [{"title": "No id"}, "oops"]}))

        with pytest.raises(UpstreamRequestError, match="Malformed movie metadata response"):
            await client.get_now_playing()

    @pytest.mark.asyncio
    async def test_json_list_body_raises_request_error(self, make_client):
        client = make_client(lambda request: httpx.Response(200, json=[1, 2, 3]))

        with pytest.raises(UpstreamRequestError):
            await client.get_trending()
