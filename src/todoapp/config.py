"""
Todo API Configuration

Environment-based configuration management for the Todo API.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class TodoAppSettings(BaseSettings):
    """Todo API configuration loaded from environment variables."""

    # Application
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    ENVIRONMENT: str = Field(
        default="production",
        description="Hosting environment (development, production)"
    )
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8080, description="Server port")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Storage
    DATA_DIRECTORY: str | None = Field(
        default=None,
        description="Absolute directory for the SQLite database (defaults to ./App_Data)"
    )
    DATABASE_URL: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL, overrides DATA_DIRECTORY"
    )
    DATABASE_FILE: str = Field(default="TodoApp.db", description="SQLite database file name")

    # API documentation
    OPENAPI_VERSION: str = Field(default="v1", description="Version label of the OpenAPI documents")
    DOCUMENTATION_MODULES: list[str] = Field(
        default=["todoapp.models.todo", "todoapp.models.problem"],
        description="Modules whose docstrings describe the API schemas"
    )

    model_config = {
        "env_file": ".env",
        "env_prefix": "TODOAPP_",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        """Whether the service runs in the development environment."""
        return self.ENVIRONMENT.lower() == "development"

    def data_directory(self) -> Path:
        """Resolve the data directory, creating it when missing."""
        directory = Path(self.DATA_DIRECTORY) if self.DATA_DIRECTORY else None

        if directory is None or not directory.is_absolute():
            directory = Path.cwd() / "App_Data"

        directory.mkdir(parents=True, exist_ok=True)
        return directory


# Global settings instance
settings = TodoAppSettings()
