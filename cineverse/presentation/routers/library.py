from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cineverse.applications.interfaces.dtos.library import (
    SearchHistoryList,
    ViewingHistory,
    ViewingHistoryRequest,
    Watchlist,
    WatchlistRequest,
)
from cineverse.applications.interfaces.dtos.message import Message
from cineverse.applications.use_cases.library.search_history import (
    ClearSearchHistoryUseCase,
    DeleteSearchEntryUseCase,
    GetSearchHistoryUseCase,
)
from cineverse.applications.use_cases.library.viewing_history import (
    DEFAULT_HISTORY_LIMIT,
    ClearViewingHistoryUseCase,
    GetViewingHistoryUseCase,
    RecordViewingUseCase,
)
from cineverse.applications.use_cases.library.watchlist import (
    AddToWatchlistUseCase,
    GetWatchlistUseCase,
    RemoveFromWatchlistUseCase,
)
from cineverse.domain.models.library import ViewingHistoryItem, WatchlistItem
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.library_repository import ViewingHistoryRepository, WatchlistRepository
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository
from cineverse.infrastructure.config.dependencies import (
    get_current_user,
    get_search_history_repository,
    get_viewing_history_repository,
    get_watchlist_repository,
)

router = APIRouter(prefix="/library", tags=["library"])

CurrentUserDep = Annotated[User, Depends(get_current_user)]
WatchlistRepositoryDep = Annotated[WatchlistRepository, Depends(get_watchlist_repository)]
ViewingHistoryRepositoryDep = Annotated[ViewingHistoryRepository, Depends(get_viewing_history_repository)]
SearchHistoryRepositoryDep = Annotated[SearchHistoryRepository, Depends(get_search_history_repository)]


@router.get("/watchlist", response_model=Watchlist)
async def read_watchlist(current_user: CurrentUserDep, watchlist_repository: WatchlistRepositoryDep):
    use_case = GetWatchlistUseCase(watchlist_repository)
    return await use_case.execute(current_user.id)


@router.post("/watchlist", status_code=HTTPStatus.CREATED, response_model=WatchlistItem)
async def add_to_watchlist(
    request: WatchlistRequest, current_user: CurrentUserDep, watchlist_repository: WatchlistRepositoryDep
):
    use_case = AddToWatchlistUseCase(watchlist_repository)
    return await use_case.execute(current_user.id, request)


@router.delete("/watchlist/{movie_id}", response_model=Message)
async def remove_from_watchlist(
    movie_id: int, current_user: CurrentUserDep, watchlist_repository: WatchlistRepositoryDep
):
    use_case = RemoveFromWatchlistUseCase(watchlist_repository)
    await use_case.execute(current_user.id, movie_id)
    return {"message": "Removed from watchlist"}


@router.get("/history", response_model=ViewingHistory)
async def read_viewing_history(
    current_user: CurrentUserDep,
    viewing_history_repository: ViewingHistoryRepositoryDep,
    limit: Annotated[int, Query(ge=1, le=200)] = DEFAULT_HISTORY_LIMIT,
):
    use_case = GetViewingHistoryUseCase(viewing_history_repository)
    return await use_case.execute(current_user.id, limit)


@router.post("/history", response_model=ViewingHistoryItem)
async def record_viewing(
    request: ViewingHistoryRequest,
    current_user: CurrentUserDep,
    viewing_history_repository: ViewingHistoryRepositoryDep,
):
    use_case = RecordViewingUseCase(viewing_history_repository)
    return await use_case.execute(current_user.id, request)


@router.delete("/history", response_model=Message)
async def clear_viewing_history(current_user: CurrentUserDep, viewing_history_repository: ViewingHistoryRepositoryDep):
    use_case = ClearViewingHistoryUseCase(viewing_history_repository)
    removed = await use_case.execute(current_user.id)
    return {"message": f"Cleared {removed} history entries"}


@router.get("/search-history", response_model=SearchHistoryList)
async def read_search_history(current_user: CurrentUserDep, search_history_repository: SearchHistoryRepositoryDep):
    use_case = GetSearchHistoryUseCase(search_history_repository)
    return await use_case.execute(current_user.id)


@router.delete("/search-history/{entry_id}", response_model=Message)
async def delete_search_entry(
    entry_id: int, current_user: CurrentUserDep, search_history_repository: SearchHistoryRepositoryDep
):
    use_case = DeleteSearchEntryUseCase(search_history_repository)
    await use_case.execute(current_user.id, entry_id)
    return {"message": "Search entry deleted"}


@router.delete("/search-history", response_model=Message)
async def clear_search_history(current_user: CurrentUserDep, search_history_repository: SearchHistoryRepositoryDep):
    use_case = ClearSearchHistoryUseCase(search_history_repository)
    removed = await use_case.execute(current_user.id)
    return {"message": f"Cleared {removed} search entries"}
