from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite+aiosqlite:///./cineverse.db"
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    CREATE_TABLES_ON_STARTUP: bool = True
    VERIFICATION_CODE_STORE: Literal["database", "memory"] = "database"

    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


class TMDBSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="TMDB_", extra="ignore")

    api_key: Optional[str] = None
    read_access_token: Optional[str] = None
    base_url: str = "https://api.themoviedb.org/3"
    image_base_url: str = "https://image.tmdb.org/t/p"
    timeout_seconds: float = 15.0
    connect_timeout_seconds: float = 5.0
    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 8.0
    force_ipv4: bool = False
    proxy_url: Optional[str] = None
    catalog_sync_pages: int = 5


class PaymentSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="RAZORPAY_", extra="ignore"
    )

    key_id: Optional[str] = None
    key_secret: Optional[str] = None
    base_url: str = "https://api.razorpay.com/v1"
    currency: str = "INR"
    timeout_seconds: float = 15.0
    movie_access_hours: int = 48


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="SMTP_", extra="ignore")

    host: Optional[str] = None
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True
    sender: str = "CineVerse <no-reply@cineverse.local>"
    timeout_seconds: float = 10.0

    @property
    def configured(self) -> bool:
        return bool(self.host)
