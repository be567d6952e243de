"""Application configuration with environment variable support.

All settings can be overridden via environment variables prefixed with
``FEATUREBOARD_``, or via a ``.env`` file in the project root.

Examples::

    FEATUREBOARD_PORT=9000 featureboard start
    FEATUREBOARD_DATABASE_URL_OVERRIDE=sqlite+aiosqlite:////var/data/board.db featureboard start
    FEATUREBOARD_LOG_LEVEL=DEBUG featureboard start
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root: two levels up from this file (backend/app/config.py -> root)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Feature board configuration. All values overridable via env vars."""

    model_config = SettingsConfigDict(
        env_prefix="FEATUREBOARD_",
        env_file=str(_BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    data_dir: Path = _BASE_DIR / "data"
    database_url_override: str | None = None
    seed_demo_data: bool = False

    # Identity provider contract
    user_header: str = "X-User-Id"
    admin_role: str = "admin"
    # Shared secret for the /_internal identity hooks; unset disables them
    internal_token: str | None = None
    internal_token_header: str = "X-Internal-Token"

    # Logging
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "featureboard.db"

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"sqlite+aiosqlite:///{self.db_path}"


# Singleton instance, import this everywhere
settings = Settings()

DATA_DIR = settings.data_dir
DATABASE_URL = settings.database_url
