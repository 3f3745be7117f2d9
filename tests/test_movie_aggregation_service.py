from datetime import date

import pytest

from cineverse.applications.services.movie_aggregation_service import MovieAggregationService
from cineverse.domain.exceptions import UpstreamUnavailableError
from cineverse.domain.models.library import SearchHistoryEntry
from cineverse.domain.models.movie import MoviePage

from .factories import movie_factory


def _unavailable():
    return UpstreamUnavailableError("Movie metadata service unavailable", detail="TMDB returned 502")


class TestMostSearched:
    @pytest.fixture
    def service(self, mock_metadata_client, mock_search_history_repository, mock_logger):
        return MovieAggregationService(mock_metadata_client, mock_search_history_repository, mock_logger)

    @pytest.fixture(autouse=True)
    def searches(self, mock_search_history_repository):
        mock_search_history_repository.get_most_searched.return_value = [
            SearchHistoryEntry(query="nolan", search_count=9, movie_ids=[1, 2]),
            SearchHistoryEntry(query="dune", search_count=4, movie_ids=[2, 3]),
        ]

    @pytest.mark.asyncio
    async def test_merges_searched_titles_with_backfill(self, service, mock_metadata_client):
        mock_metadata_client.get_details.side_effect = lambda movie_id: movie_factory.create_details(
            movie_id, popularity=500.0 - movie_id
        )
        mock_metadata_client.get_trending.return_value = movie_factory.create_page(start_id=200)
        mock_metadata_client.get_popular.return_value = movie_factory.create_page(start_id=100)

        result = await service.most_searched()

        ids = [movie.id for movie in result.movies]
        assert ids[:3] == [1, 2, 3]
        assert ids[3:] == list(range(200, 217))
        assert [call.args[0] for call in mock_metadata_client.get_details.call_args_list] == [1, 2, 3]
        assert not result.degraded

    @pytest.mark.asyncio
    async def test_failed_detail_lookup_is_skipped(self, service, mock_metadata_client, mock_logger):
        def details(movie_id):
            if movie_id == 2:
                raise _unavailable()
            return movie_factory.create_details(movie_id, popularity=500.0)

        mock_metadata_client.get_details.side_effect = details
        mock_metadata_client.get_trending.return_value = MoviePage()
        mock_metadata_client.get_popular.return_value = MoviePage()

        result = await service.most_searched()

        assert [movie.id for movie in result.movies] == [1, 3]
        assert result.degraded_sources == ["details:2"]
        mock_logger.source_degraded.assert_called_once()
        assert mock_logger.source_degraded.call_args.args[:2] == ("most searched", "details:2")

    @pytest.mark.asyncio
    async def test_fifteen_resolved_titles_need_no_backfill(
        self, service, mock_metadata_client, mock_search_history_repository
    ):
        mock_search_history_repository.get_most_searched.return_value = [
            SearchHistoryEntry(query="marvel", search_count=12, movie_ids=list(range(1, 16))),
        ]
        mock_metadata_client.get_details.side_effect = lambda movie_id: movie_factory.create_details(
            movie_id, popularity=float(movie_id)
        )
        mock_metadata_client.get_trending.return_value = movie_factory.create_page(start_id=200)
        mock_metadata_client.get_popular.return_value = movie_factory.create_page(start_id=100)

        result = await service.most_searched()

        assert [movie.id for movie in result.movies] == list(range(15, 0, -1))

    @pytest.mark.asyncio
    async def test_backfill_skips_searched_titles_that_failed(self, service, mock_metadata_client):
        def details(movie_id):
            if movie_id == 2:
                raise ValueError("unexpected payload")
            return movie_factory.create_details(movie_id, popularity=500.0)

        mock_metadata_client.get_details.side_effect = details
        mock_metadata_client.get_trending.return_value = MoviePage(
            movies=[movie_factory.create_movie(2, popularity=900.0), movie_factory.create_movie(4, popularity=1.0)]
        )
        mock_metadata_client.get_popular.return_value = MoviePage()

        result = await service.most_searched()

        assert [movie.id for movie in result.movies] == [1, 3, 4]
        assert result.degraded_sources == ["details:2"]

    @pytest.mark.asyncio
    async def test_falls_back_to_trending_when_everything_fails(self, service, mock_metadata_client):
        mock_metadata_client.get_details.side_effect = _unavailable()
        mock_metadata_client.get_popular.side_effect = _unavailable()
        mock_metadata_client.get_trending.side_effect = [_unavailable(), movie_factory.create_page(start_id=300)]

        result = await service.most_searched()

        assert [movie.id for movie in result.movies] == list(range(300, 320))
        assert result.degraded_sources == ["most searched"]

    @pytest.mark.asyncio
    async def test_raises_when_trending_fallback_fails(self, service, mock_metadata_client):
        mock_metadata_client.get_details.side_effect = _unavailable()
        mock_metadata_client.get_popular.side_effect = _unavailable()
        mock_metadata_client.get_trending.side_effect = _unavailable()

        with pytest.raises(UpstreamUnavailableError, match="Error fetching most searched movies"):
            await service.most_searched()


class TestRecentlyAdded:
    @pytest.fixture
    def service(self, mock_metadata_client, mock_search_history_repository, mock_logger):
        return MovieAggregationService(mock_metadata_client, mock_search_history_repository, mock_logger)

    @pytest.mark.asyncio
    async def test_merges_sources_newest_first(self, service, mock_metadata_client):
        mock_metadata_client.discover_recent.return_value = MoviePage(
            movies=[
                movie_factory.create_movie(1, release_date=date(2024, 3, 1)),
                movie_factory.create_movie(2, release_date=None),
            ]
        )
        mock_metadata_client.get_now_playing.return_value = MoviePage(
            movies=[movie_factory.create_movie(3, release_date=date(2024, 5, 1))]
        )
        mock_metadata_client.get_upcoming.return_value = MoviePage(
            movies=[
                movie_factory.create_movie(1, release_date=date(2024, 3, 1)),
                movie_factory.create_movie(4, release_date=date(2024, 4, 1)),
            ]
        )

        result = await service.recently_added()

        assert [movie.id for movie in result.movies] == [3, 4, 1]
        assert not result.degraded

    @pytest.mark.asyncio
    async def test_one_failed_source_degrades(self, service, mock_metadata_client):
        mock_metadata_client.discover_recent.side_effect = _unavailable()
        mock_metadata_client.get_now_playing.return_value = MoviePage(
            movies=[movie_factory.create_movie(3, release_date=date(2024, 5, 1))]
        )
        mock_metadata_client.get_upcoming.return_value = MoviePage()

        result = await service.recently_added()

        assert [movie.id for movie in result.movies] == [3]
        assert result.degraded_sources == ["discover"]

    @pytest.mark.asyncio
    async def test_all_sources_failing_retries_now_playing(self, service, mock_metadata_client):
        mock_metadata_client.discover_recent.side_effect = _unavailable()
        mock_metadata_client.get_upcoming.side_effect = _unavailable()
        mock_metadata_client.get_now_playing.side_effect = [_unavailable(), movie_factory.create_page(start_id=50)]

        result = await service.recently_added()

        assert [movie.id for movie in result.movies] == list(range(50, 70))
        assert mock_metadata_client.get_now_playing.await_count == 2
