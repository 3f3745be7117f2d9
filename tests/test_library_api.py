import pytest
from fastapi import status

from .conftest import BaseIntegrationTest
from .factories import movie_factory

MATRIX = {"movie_id": 603, "movie_title": "The Matrix"}


class TestWatchlistAPI(BaseIntegrationTest):
    @pytest.mark.asyncio
    async def test_add_list_remove(self, client, auth_headers):
        added = await client.post(
            "/library/watchlist", json={"movie_id": 550, "movie_title": "Fight Club"}, headers=auth_headers
        )
        listed = await client.get("/library/watchlist", headers=auth_headers)
        removed = await client.delete("/library/watchlist/550", headers=auth_headers)
        after = await client.get("/library/watchlist", headers=auth_headers)

        assert added.status_code == status.HTTP_201_CREATED
        assert [item["movie_id"] for item in listed.json()["watchlist"]] == [550]
        assert removed.json() == {"message": "Removed from watchlist"}
        assert after.json() == {"watchlist": []}

    @pytest.mark.asyncio
    async def test_adding_twice_keeps_one_entry(self, client, auth_headers):
        payload = {"movie_id": 550, "movie_title": "Fight Club"}
        await client.post("/library/watchlist", json=payload, headers=auth_headers)
        await client.post("/library/watchlist", json=payload, headers=auth_headers)

        listed = await client.get("/library/watchlist", headers=auth_headers)

        assert len(listed.json()["watchlist"]) == 1

    @pytest.mark.asyncio
    async def test_remove_missing_movie(self, client, auth_headers):
        response = await client.delete("/library/watchlist/550", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_watchlist_requires_authentication(self, client):
        response = await client.get("/library/watchlist")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestViewingHistoryAPI(BaseIntegrationTest):
    @pytest.mark.asyncio
    async def test_progress_updates_single_entry(self, client, auth_headers):
        await client.post("/library/history", json={**MATRIX, "progress": 40}, headers=auth_headers)
        final = await client.post("/library/history", json={**MATRIX, "progress": 100}, headers=auth_headers)
        history = await client.get("/library/history", headers=auth_headers)

        assert final.json()["completed"] is True
        entries = history.json()["history"]
        assert len(entries) == 1
        assert entries[0]["progress"] == 100

    @pytest.mark.asyncio
    async def test_progress_out_of_range(self, client, auth_headers):
        response = await client.post("/library/history", json={**MATRIX, "progress": 120}, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_clear_history(self, client, auth_headers):
        for movie_id in (1, 2, 3):
            payload = {"movie_id": movie_id, "movie_title": f"Movie {movie_id}"}
            await client.post("/library/history", json=payload, headers=auth_headers)

        cleared = await client.delete("/library/history", headers=auth_headers)
        limited = await client.get("/library/history", params={"limit": 2}, headers=auth_headers)

        assert cleared.json() == {"message": "Cleared 3 history entries"}
        assert limited.json() == {"history": []}


class TestSearchHistoryAPI(BaseIntegrationTest):
    @pytest.mark.asyncio
    async def test_delete_entry_and_clear(self, client, metadata_client, auth_headers):
        metadata_client.search.return_value = movie_factory.create_page(start_id=1, count=2)
        for query in ("alien", "heat", "ronin"):
            await client.get("/movies/search", params={"q": query}, headers=auth_headers)

        entries = (await client.get("/library/search-history", headers=auth_headers)).json()["searches"]
        deleted = await client.delete(f"/library/search-history/{entries[0]['id']}", headers=auth_headers)
        missing = await client.delete(f"/library/search-history/{entries[0]['id']}", headers=auth_headers)
        cleared = await client.delete("/library/search-history", headers=auth_headers)

        assert [entry["query"] for entry in entries] == ["ronin", "heat", "alien"]
        assert deleted.json() == {"message": "Search entry deleted"}
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert cleared.json() == {"message": "Cleared 2 search entries"}

    @pytest.mark.asyncio
    async def test_anonymous_searches_are_not_listed(self, client, metadata_client, auth_headers):
        metadata_client.search.return_value = movie_factory.create_page(start_id=1, count=2)
        await client.get("/movies/search", params={"q": "alien"})

        entries = (await client.get("/library/search-history", headers=auth_headers)).json()["searches"]

        assert entries == []
