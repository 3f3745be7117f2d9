from cineverse.applications.interfaces.dtos.catalog import CatalogPage
from cineverse.applications.interfaces.dtos.filter_page import FilterPage
from cineverse.domain.ports.repositories.movie_repository import MovieRepository


class ListCatalogUseCase:
    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    async def execute(self, filter_page: FilterPage) -> CatalogPage:
        movies = await self.movie_repository.get_all(offset=filter_page.offset, limit=filter_page.limit)
        total = await self.movie_repository.count()
        return CatalogPage(movies=movies, total=total)
