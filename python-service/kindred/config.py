import os
from functools import lru_cache
from pydantic import BaseModel, Field
from pathlib import Path as _Path

from dotenv import load_dotenv as _load_dotenv

_load_dotenv(dotenv_path=_Path(__file__).resolve().parent.parent / ".env", override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _redis_pubsub_enabled_default() -> bool:
    explicit = os.getenv("REDIS_PUBSUB_ENABLED")
    if explicit is not None:
        return explicit.lower() in ("1", "true", "yes")
    return bool(os.getenv("REDIS_URL"))


class Settings(BaseModel):
    # Support multiple common env var names for Mongo connection string
    mongo_uri: str = Field(
        default_factory=lambda: (
            os.getenv("MONGO_URI")
            or os.getenv("MONGODB_URI")
            or os.getenv("MONGO_URL")
            or ""
        )
    )
    mongo_db: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "kindred"))
    # Optional: provide a non-SRV fallback URI (e.g., mongodb://127.0.0.1:27017)
    mongo_alt_uri: str = Field(default_factory=lambda: os.getenv("MONGO_ALT_URI", ""))
    mongo_direct: bool = Field(default_factory=lambda: _env_flag("MONGO_DIRECT"))
    cors_origin: str = Field(default_factory=lambda: os.getenv("CORS_ORIGIN", "http://localhost:5173"))
    port: int = Field(default_factory=lambda: int(os.getenv("PY_BACKEND_PORT", "8081")))

    # Identity: bearer tokens are issued elsewhere and only verified here
    jwt_secret: str = Field(default_factory=lambda: os.getenv("JWT_SECRET", ""))
    jwt_audience: str = Field(default_factory=lambda: os.getenv("JWT_AUDIENCE", ""))
    auth_token_ttl: int = Field(default_factory=lambda: int(os.getenv("AUTH_TOKEN_TTL", str(7 * 24 * 3600))))

    # Redis (trigger delivery over pub/sub)
    redis_url: str = Field(default_factory=lambda: os.getenv("REDIS_URL", ""))
    redis_pubsub_enabled: bool = Field(default_factory=_redis_pubsub_enabled_default)
    redis_pubsub_prefix: str = Field(default_factory=lambda: os.getenv("REDIS_PUBSUB_PREFIX", "kd"))

    # Shared secret for the HTTP trigger endpoints (empty disables the check)
    trigger_secret: str = Field(default_factory=lambda: os.getenv("TRIGGER_SECRET", ""))

    # Feed tuning
    feed_default_limit: int = Field(default_factory=lambda: int(os.getenv("FEED_DEFAULT_LIMIT", "25")))
    feed_max_limit: int = Field(default_factory=lambda: int(os.getenv("FEED_MAX_LIMIT", "50")))
    feed_overfetch_cap: int = Field(default_factory=lambda: int(os.getenv("FEED_OVERFETCH_CAP", "150")))
    feed_fill_rounds: int = Field(default_factory=lambda: min(2, int(os.getenv("FEED_FILL_ROUNDS", "2"))))
    feed_query_retries: int = Field(default_factory=lambda: int(os.getenv("FEED_QUERY_RETRIES", "1")))


@lru_cache()
def get_settings() -> Settings:
    return Settings()
