from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cineverse.applications.interfaces.dtos.message import Message
from cineverse.infrastructure.config.dependencies import close_clients
from cineverse.infrastructure.config.settings import Settings
from cineverse.infrastructure.logging.logger import Logger, setup_logging
from cineverse.infrastructure.persistence.database import create_tables, dispose_engine, get_engine, set_engine
from cineverse.presentation.error_handlers import register_error_handlers
from cineverse.presentation.routers import auth, catalog, library, movies, otp, payments, recommendations, social, users

setup_logging()
logger = Logger.get_logger(__name__)

settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = get_engine()
    set_engine(engine)
    if settings.CREATE_TABLES_ON_STARTUP:
        await create_tables(engine)
        logger.info("Database tables ensured")
    try:
        yield
    finally:
        await close_clients()
        await dispose_engine()


app = FastAPI(title="CineVerse API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

app.include_router(auth.router)
app.include_router(otp.router)
app.include_router(users.router)
app.include_router(movies.router)
app.include_router(recommendations.router)
app.include_router(payments.router)
app.include_router(social.router)
app.include_router(library.router)
app.include_router(catalog.router)


@app.get("/", status_code=HTTPStatus.OK, response_model=Message)
def read_root():
    return {"message": "CineVerse API is running"}
