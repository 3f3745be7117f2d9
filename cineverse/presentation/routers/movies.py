from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from cineverse.applications.interfaces.dtos.activity import TrackActivityRequest, TrackActivityResponse
from cineverse.applications.interfaces.dtos.movie import (
    MovieDetailResponse,
    MovieList,
    MoviePageResponse,
    PersonalizedMovieList,
    SuggestionList,
)
from cineverse.applications.services.movie_aggregation_service import MovieAggregationService
from cineverse.applications.services.movie_browse_service import MovieBrowseService
from cineverse.applications.services.personalized_recommendation_service import PersonalizedRecommendationService
from cineverse.applications.use_cases.activity.track_activity import TrackActivityUseCase
from cineverse.applications.use_cases.movie.search_movies import SearchMoviesUseCase
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository
from cineverse.domain.ports.services.metadata_client import MetadataClient
from cineverse.domain.services.scoring_engine import MAX_RECOMMENDATIONS
from cineverse.infrastructure.config.dependencies import (
    get_activity_repository,
    get_current_user,
    get_metadata_client,
    get_movie_aggregation_service,
    get_movie_browse_service,
    get_optional_user,
    get_personalized_recommendation_service,
    get_search_history_repository,
)
from cineverse.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"])

BrowseServiceDep = Annotated[MovieBrowseService, Depends(get_movie_browse_service)]
AggregationServiceDep = Annotated[MovieAggregationService, Depends(get_movie_aggregation_service)]
RecommendationServiceDep = Annotated[
    PersonalizedRecommendationService, Depends(get_personalized_recommendation_service)
]
MetadataClientDep = Annotated[MetadataClient, Depends(get_metadata_client)]
ActivityRepositoryDep = Annotated[ActivityRepository, Depends(get_activity_repository)]
SearchHistoryRepositoryDep = Annotated[SearchHistoryRepository, Depends(get_search_history_repository)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]
PageParam = Annotated[int, Query(ge=1, le=500)]


def _page_response(page) -> MoviePageResponse:
    return MoviePageResponse(
        movies=page.movies, page=page.page, total_pages=page.total_pages, total_results=page.total_results
    )


@router.get("/", response_model=MoviePageResponse)
async def popular_movies(browse_service: BrowseServiceDep, page: PageParam = 1):
    return _page_response(await browse_service.popular(page))


@router.get("/trending", response_model=MovieList)
async def trending_movies(browse_service: BrowseServiceDep, time: str = "week"):
    return {"movies": await browse_service.trending(time)}


@router.get("/top-rated", response_model=MoviePageResponse)
async def top_rated_movies(browse_service: BrowseServiceDep, page: PageParam = 1):
    return _page_response(await browse_service.top_rated(page))


@router.get("/now-playing", response_model=MoviePageResponse)
async def now_playing_movies(browse_service: BrowseServiceDep, page: PageParam = 1):
    return _page_response(await browse_service.now_playing(page))


@router.get("/upcoming", response_model=MoviePageResponse)
async def upcoming_movies(browse_service: BrowseServiceDep, page: PageParam = 1):
    return _page_response(await browse_service.upcoming(page))


@router.get("/genre/{genre}", response_model=MovieList)
async def movies_by_genre(
    genre: str, browse_service: BrowseServiceDep, limit: Annotated[int, Query(ge=1, le=100)] = 20
):
    return {"movies": await browse_service.by_genre(genre, limit)}


@router.get("/suggestions", response_model=SuggestionList)
async def search_suggestions(browse_service: BrowseServiceDep, q: str = ""):
    return {"suggestions": await browse_service.suggestions(q)}


@router.get("/search", response_model=MoviePageResponse)
async def search_movies(
    metadata_client: MetadataClientDep,
    search_history_repository: SearchHistoryRepositoryDep,
    current_user: OptionalUserDep,
    q: str = "",
    page: PageParam = 1,
):
    use_case = SearchMoviesUseCase(metadata_client, search_history_repository)
    return await use_case.execute(q, page, current_user.id if current_user else None)


@router.get("/most-searched", response_model=MovieList)
async def most_searched_movies(aggregation_service: AggregationServiceDep):
    result = await aggregation_service.most_searched()
    return {"movies": result.movies}


@router.get("/recently-added", response_model=MovieList)
async def recently_added_movies(aggregation_service: AggregationServiceDep):
    result = await aggregation_service.recently_added()
    return {"movies": result.movies}


@router.get("/personalized", response_model=PersonalizedMovieList)
async def personalized_movies(
    recommendation_service: RecommendationServiceDep,
    current_user: OptionalUserDep,
    limit: Annotated[int, Query(ge=1)] = MAX_RECOMMENDATIONS,
):
    user_id = current_user.id if current_user else None
    result = await recommendation_service.recommend(user_id, limit)
    if result.degraded:
        logger.warning(f"Personalized list for user {user_id} served degraded: {result.degraded_sources}")
    personalized = user_id is not None and "personalized" not in result.degraded_sources
    return {"movies": result.movies, "personalized": personalized}


@router.post("/track-activity", status_code=HTTPStatus.CREATED, response_model=TrackActivityResponse)
async def track_activity(
    request: TrackActivityRequest, current_user: CurrentUserDep, activity_repository: ActivityRepositoryDep
):
    use_case = TrackActivityUseCase(activity_repository)
    event = await use_case.execute(current_user.id, request)
    return {"message": "Activity tracked", "activity_id": event.id}


@router.get("/{movie_id}", response_model=MovieDetailResponse)
async def movie_details(movie_id: int, browse_service: BrowseServiceDep):
    return {"movie": await browse_service.details(movie_id)}
