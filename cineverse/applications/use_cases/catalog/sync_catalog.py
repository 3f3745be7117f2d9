from cineverse.applications.interfaces.dtos.catalog import CatalogSyncReport
from cineverse.domain.exceptions import UpstreamRequestError, UpstreamUnavailableError
from cineverse.domain.ports.repositories.movie_repository import MovieRepository
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.domain.ports.services.metadata_client import MetadataClient


class SyncCatalogUseCase:
    """Copies the provider's popular pages into the local catalog, upserting by movie id."""

    def __init__(
        self, metadata_client: MetadataClient, movie_repository: MovieRepository, logger: LoggerPort, pages: int = 5
    ):
        self.metadata_client = metadata_client
        self.movie_repository = movie_repository
        self.logger = logger
        self.pages = pages

    async def execute(self) -> CatalogSyncReport:
        report = CatalogSyncReport(pages_requested=self.pages, pages_synced=0, movies_upserted=0)
        for page in range(1, self.pages + 1):
            try:
                result = await self.metadata_client.get_popular(page)
            except (UpstreamUnavailableError, UpstreamRequestError) as exc:
                self.logger.warning(f"Catalog sync skipped page {page}: {exc.detail or exc.message}")
                report.failed_pages.append(page)
                continue

            report.movies_upserted += await self.movie_repository.upsert_many(result.movies)
            report.pages_synced += 1

        self.logger.info(
            f"Catalog sync finished: {report.pages_synced}/{report.pages_requested} pages, "
            f"{report.movies_upserted} movies"
        )
        return report
