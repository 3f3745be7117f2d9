from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cineverse.applications.interfaces.dtos.catalog import CatalogPage, CatalogSyncReport
from cineverse.applications.interfaces.dtos.filter_page import FilterPage
from cineverse.applications.use_cases.catalog.list_catalog import ListCatalogUseCase
from cineverse.applications.use_cases.catalog.sync_catalog import SyncCatalogUseCase
from cineverse.domain.ports.repositories.movie_repository import MovieRepository
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.domain.ports.services.metadata_client import MetadataClient
from cineverse.infrastructure.config.dependencies import (
    Principal,
    get_logger,
    get_metadata_client,
    get_movie_repository,
    get_tmdb_settings,
    require_admin,
)
from cineverse.infrastructure.config.settings import TMDBSettings

router = APIRouter(prefix="/catalog", tags=["catalog"])

MovieRepositoryDep = Annotated[MovieRepository, Depends(get_movie_repository)]
MetadataClientDep = Annotated[MetadataClient, Depends(get_metadata_client)]
LoggerDep = Annotated[LoggerPort, Depends(get_logger)]
AdminDep = Annotated[Principal, Depends(require_admin)]


@router.get("/", response_model=CatalogPage)
async def read_catalog(filter_movies: Annotated[FilterPage, Query()], movie_repository: MovieRepositoryDep):
    use_case = ListCatalogUseCase(movie_repository)
    return await use_case.execute(filter_movies)


@router.post("/sync", response_model=CatalogSyncReport)
async def sync_catalog(
    admin: AdminDep,
    metadata_client: MetadataClientDep,
    movie_repository: MovieRepositoryDep,
    logger: LoggerDep,
    settings: Annotated[TMDBSettings, Depends(get_tmdb_settings)],
):
    logger.info(f"Catalog sync requested by {admin.email}")
    use_case = SyncCatalogUseCase(metadata_client, movie_repository, logger, pages=settings.catalog_sync_pages)
    return await use_case.execute()
