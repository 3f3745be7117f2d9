from cineverse.applications.interfaces.dtos.library import Watchlist, WatchlistRequest
from cineverse.domain.clock import utcnow
from cineverse.domain.exceptions import NotFoundError
from cineverse.domain.models.library import WatchlistItem
from cineverse.domain.ports.repositories.library_repository import WatchlistRepository


class AddToWatchlistUseCase:
    def __init__(self, watchlist_repository: WatchlistRepository):
        self.watchlist_repository = watchlist_repository

    async def execute(self, user_id: int, request: WatchlistRequest) -> WatchlistItem:
        return await self.watchlist_repository.upsert(
            WatchlistItem(
                user_id=user_id,
                movie_id=request.movie_id,
                movie_title=request.movie_title,
                movie_poster=request.movie_poster,
                added_at=utcnow(),
            )
        )


class RemoveFromWatchlistUseCase:
    def __init__(self, watchlist_repository: WatchlistRepository):
        self.watchlist_repository = watchlist_repository

    async def execute(self, user_id: int, movie_id: int) -> None:
        if not await self.watchlist_repository.remove(user_id, movie_id):
            raise NotFoundError("Movie not in watchlist")


class GetWatchlistUseCase:
    def __init__(self, watchlist_repository: WatchlistRepository):
        self.watchlist_repository = watchlist_repository

    async def execute(self, user_id: int) -> Watchlist:
        return Watchlist(watchlist=await self.watchlist_repository.get_by_user(user_id))
