from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.models.movie import MovieRecord
from cineverse.domain.ports.repositories.movie_repository import MovieRepository
from cineverse.infrastructure.persistence.models import Movie as SQLMovie


class SQLAlchemyMovieRepository(MovieRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, sql_movie: SQLMovie) -> MovieRecord:
        return MovieRecord(
            id=sql_movie.id,
            title=sql_movie.title,
            overview=sql_movie.overview or "",
            genres=list(sql_movie.genres or []),
            genre_ids=list(sql_movie.genre_ids or []),
            popularity=sql_movie.popularity,
            rating=sql_movie.rating,
            release_date=sql_movie.release_date,
            poster_url=sql_movie.poster_url,
            backdrop_url=sql_movie.backdrop_url,
        )

    async def find_by_title(self, title: str) -> Optional[MovieRecord]:
        sql_movie = await self.session.scalar(
            select(SQLMovie)
            .where(SQLMovie.title.icontains(title, autoescape=True))
            .order_by(SQLMovie.popularity.desc(), SQLMovie.id)
            .limit(1)
        )
        return self._to_domain(sql_movie) if sql_movie else None

    async def get_all_except(self, movie_id: int) -> List[MovieRecord]:
        rows = await self.session.scalars(select(SQLMovie).where(SQLMovie.id != movie_id).order_by(SQLMovie.id))
        return [self._to_domain(row) for row in rows.all()]

    async def get_all(self, offset: int = 0, limit: int = 100) -> List[MovieRecord]:
        rows = await self.session.scalars(
            select(SQLMovie).order_by(SQLMovie.popularity.desc(), SQLMovie.id).offset(offset).limit(limit)
        )
        return [self._to_domain(row) for row in rows.all()]

    async def upsert_many(self, movies: List[MovieRecord]) -> int:
        written = 0
        for movie in movies:
            sql_movie = await self.session.get(SQLMovie, movie.id)
            if sql_movie is None:
                sql_movie = SQLMovie(id=movie.id, title=movie.title)
                self.session.add(sql_movie)
            sql_movie.title = movie.title
            sql_movie.overview = movie.overview
            sql_movie.genres = list(movie.genres)
            sql_movie.genre_ids = list(movie.genre_ids)
            sql_movie.popularity = movie.popularity
            sql_movie.rating = movie.rating
            sql_movie.release_date = movie.release_date
            sql_movie.poster_url = movie.poster_url
            sql_movie.backdrop_url = movie.backdrop_url
            written += 1
        await self.session.commit()
        return written

    async def count(self) -> int:
        return await self.session.scalar(select(func.count()).select_from(SQLMovie)) or 0
