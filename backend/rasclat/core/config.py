from pydantic import BaseModel
import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "Radio Rasclat API")
    app_version: str = os.getenv("APP_VERSION", "2.0.0")
    debug: bool = _flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # any SQLAlchemy URL; sqlite file by default for local development
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./rasclat.db")

    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    token_life_seconds: int = int(os.getenv("TOKEN_LIFE_SECONDS", "3600"))
    # bootstrap admin account, created at startup when both are set
    admin_username: str | None = os.getenv("BACKEND_ADMIN_USER")
    admin_password: str | None = os.getenv("BACKEND_ADMIN_PASSWORD")
    admin_email: str | None = os.getenv("BACKEND_ADMIN_EMAIL")

    # "s3" or "memory"
    storage_backend: str = os.getenv("STORAGE_BACKEND", "s3")
    wasabi_key: str | None = os.getenv("WASABI_KEY")
    wasabi_key_secret: str | None = os.getenv("WASABI_KEY_SECRET")
    wasabi_region: str = os.getenv("WASABI_REGION", "eu-central-1")
    wasabi_endpoint: str = os.getenv("WASABI_ENDPOINT", "https://s3.wasabisys.com")
    wasabi_bucket: str = os.getenv("WASABI_UPLOAD_CONTAINER", "rasclat-uploads")

    # "algolia" or "memory"
    search_backend: str = os.getenv("SEARCH_BACKEND", "algolia")
    algolia_app_id: str | None = os.getenv("ALGOLIA_APP_ID")
    algolia_admin_key: str | None = os.getenv("ALGOLIA_ADMIN_KEY")
    algolia_index_artists: str = os.getenv("ALGOLIA_INDEX_ARTISTS", "artists")
    algolia_index_shows: str = os.getenv("ALGOLIA_INDEX_SHOWS", "shows")
    algolia_index_recordings: str = os.getenv("ALGOLIA_INDEX_RECORDINGS", "recordings")
    algolia_index_blog: str = os.getenv("ALGOLIA_INDEX_BLOG", "blog")
    algolia_index_projects: str = os.getenv("ALGOLIA_INDEX_PROJECTS", "projects")

    radio_url: str = os.getenv("RADIO_URL", "https://rasclat.airtime.pro/api/")
    crowdin_project: str = os.getenv("CROWDIN_PROJECT", "radio-rasclat-web")
    crowdin_login: str | None = os.getenv("CROWDIN_LOGIN")
    crowdin_account_key: str | None = os.getenv("CROWDIN_ACCOUNT_KEY")
    uptimerobot_api_key: str | None = os.getenv("UPTIMEROBOT_API_KEY")
    github_owner: str = os.getenv("GITHUB_OWNER", "dmnktoe")
    changelog_repositories: tuple[str, ...] = ("radio-rasclat-web", "radio-rasclat-ios", "radio-rasclat-server")

    sentry_dsn: str | None = os.getenv("SENTRY_DSN")

    upload_tmp_dir: str = os.getenv("UPLOAD_TMP_DIR", os.path.join("/tmp", "rasclat-uploads"))
    image_max_size: int = int(os.getenv("IMAGE_MAX_SIZE", "1000"))
    image_quality: int = int(os.getenv("IMAGE_QUALITY", "80"))
    recordings_cache_ttl: int = int(os.getenv("RECORDINGS_CACHE_TTL", "30"))
    reindex_enabled: bool = _flag("REINDEX_ENABLED")


@lru_cache
def get_settings() -> Settings:
    return Settings()
