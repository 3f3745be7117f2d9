import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from cineverse.applications.use_cases.catalog.sync_catalog import SyncCatalogUseCase
from cineverse.infrastructure.adapters.repositories.sqlalchemy_movie_repository import SQLAlchemyMovieRepository
from cineverse.infrastructure.adapters.services.tmdb_metadata_client import TMDBMetadataClient
from cineverse.infrastructure.config.settings import Settings, TMDBSettings
from cineverse.infrastructure.logging.logger import setup_logging
from cineverse.infrastructure.logging.std_logger_adapter import StdLoggerAdapter
from cineverse.infrastructure.persistence.database import create_tables


async def sync_catalog(database_url: str, pages: int) -> None:
    engine = create_async_engine(database_url)
    client = TMDBMetadataClient(TMDBSettings(), logger=StdLoggerAdapter("cineverse.tmdb"))
    try:
        await create_tables(engine)
        async with AsyncSession(engine, expire_on_commit=False) as session:
            use_case = SyncCatalogUseCase(
                client, SQLAlchemyMovieRepository(session), StdLoggerAdapter("cineverse.catalog"), pages=pages
            )
            report = await use_case.execute()
        print(report.model_dump_json(indent=2))
    finally:
        await client.aclose()
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--database_url", type=str, default=None)
    parser.add_argument("--pages", type=int, default=None)
    args = parser.parse_args()

    setup_logging()
    pages = args.pages or TMDBSettings().catalog_sync_pages
    asyncio.run(sync_catalog(args.database_url or Settings().DATABASE_URL, pages))


if __name__ == "__main__":
    main()
