import pytest
from fastapi import status

from cineverse.infrastructure.adapters.repositories.sqlalchemy_movie_repository import SQLAlchemyMovieRepository

from .conftest import BaseIntegrationTest
from .factories import movie_factory


class TestCatalogAPI(BaseIntegrationTest):
    @pytest.mark.asyncio
    async def test_sync_requires_admin(self, client, auth_headers):
        response = await client.post("/catalog/sync", headers=auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Admin access required"

    @pytest.mark.asyncio
    async def test_sync_requires_token(self, client):
        response = await client.post("/catalog/sync")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_admin_sync_fills_catalog(self, client, metadata_client, admin_headers):
        response = await client.post("/catalog/sync", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        report = response.json()
        assert report["pages_requested"] == 5
        assert report["pages_synced"] == 5
        assert report["failed_pages"] == []
        assert metadata_client.get_popular.await_count == 5

        catalog = (await client.get("/catalog/", params={"limit": 5})).json()
        assert catalog["total"] == 20
        assert [movie["id"] for movie in catalog["movies"]] == [100, 101, 102, 103, 104]

    @pytest.mark.asyncio
    async def test_catalog_paging(self, client, test_session):
        await SQLAlchemyMovieRepository(test_session).upsert_many(movie_factory.create_page(start_id=1).movies)

        response = await client.get("/catalog/", params={"offset": 18, "limit": 10})

        assert [movie["id"] for movie in response.json()["movies"]] == [19, 20]


class TestRecommendationsAPI(BaseIntegrationTest):
    @pytest.mark.asyncio
    async def test_similar_movies_from_catalog(self, client, test_session):
        await SQLAlchemyMovieRepository(test_session).upsert_many(
            [
                movie_factory.create_movie(1, title="Alien", overview="Crew hunted by a creature in space"),
                movie_factory.create_movie(2, title="Aliens", overview="Marines hunted by creatures in space"),
                movie_factory.create_movie(3, title="Notting Hill", overview="A bookseller falls in love"),
            ]
        )

        response = await client.post("/recommendations/similar", json={"movie_title": "alien", "top_k": 2})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["movie"] == "Alien"
        assert data["count"] == 2
        assert data["similar_movies"][0]["movie"]["id"] == 2

    @pytest.mark.asyncio
    async def test_unknown_title(self, client):
        response = await client.post("/recommendations/similar", json={"movie_title": "Nothing Here"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Movie not found"

    @pytest.mark.asyncio
    async def test_health_reports_catalog_size(self, client, test_session):
        await SQLAlchemyMovieRepository(test_session).upsert_many([movie_factory.create_movie(1)])

        response = await client.get("/recommendations/health")

        assert response.json() == {"status": "ok", "catalog_size": 1}


class TestApplication(BaseIntegrationTest):
    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "CineVerse API is running"}

    @pytest.mark.asyncio
    async def test_error_envelope_for_missing_body(self, client):
        response = await client.post("/auth/login", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["message"] == "Invalid request"
        assert data["error"].startswith("email")

    @pytest.mark.asyncio
    async def test_unexpected_failure_uses_error_envelope(self, client, metadata_client):
        metadata_client.get_popular.side_effect = RuntimeError("connection pool exhausted")

        response = await client.get("/movies/")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"message": "Internal server error", "error": "RuntimeError"}
        assert "connection pool" not in response.text
