"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, read from JIRASYNC_* environment variables."""

    base_url: str | None = Field(
        default=None,
        description="Jira REST API root, e.g. https://jira.example.com/rest/api/2",
    )

    database_path: Path = Field(
        default=Path("jira-sync.db"),
        description="SQLite database file holding synced issues and checkpoints",
    )

    page_size: int = Field(
        default=100,
        ge=1,
        description="maxResults requested per search page",
    )

    points_field: str = Field(
        default="customfield_10002",
        description="Custom field carrying the story point estimate",
    )

    timeout: float | None = Field(
        default=None,
        description="HTTP timeout in seconds (None waits indefinitely)",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "JIRASYNC_",
    }
