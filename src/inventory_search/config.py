"""Service configuration loaded from environment variables."""

from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Search service configuration loaded from environment variables.

    Attributes:
        host: Bind address for the API server.
        port: Port number for the API server.
        debug: Enable debug logging and API documentation.
        shutdown_timeout: Seconds to drain queued index events on shutdown.
        index_path: Directory holding the search index database.
        data_dir: Directory with the ``<entityType>.json`` inventory exports.
        reindex_interval_seconds: Seconds between full rebuilds; 0 disables.
        reindex_on_startup: Queue a full rebuild when the service starts.
        sync_queue_size: Maximum number of queued index events.
        search_max_hits: Maximum hits returned per search.
        suggest_default_limit: Suggestions returned when none are requested.
        suggest_max_limit: Upper bound for requested suggestions.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    shutdown_timeout: float = 30.0

    index_path: Path = Path("data/index")
    data_dir: Path = Path("data/inventory")

    reindex_interval_seconds: float = Field(default=180.0, ge=0)
    reindex_on_startup: bool = True
    sync_queue_size: int = Field(default=2000, ge=1)

    search_max_hits: int = Field(default=50, ge=1)
    suggest_default_limit: int = Field(default=8, ge=1)
    suggest_max_limit: int = Field(default=25, ge=1)

    @computed_field
    @property
    def reindex_enabled(self) -> bool:
        """Whether periodic rebuilds are scheduled.

        Returns:
            True when a positive rebuild interval is configured.
        """
        return self.reindex_interval_seconds > 0
