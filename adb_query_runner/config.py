from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ArangoDB
    ARANGODB_ENDPOINT: str = "http://localhost:8529/"
    ARANGODB_USERNAME: str = "root"
    ARANGODB_PASSWORD: str = ""

    # Cytoscape (CyREST)
    CYTOSCAPE_BASE_URL: str = "http://localhost:1234/v1"
    CYTOSCAPE_NETWORK_NAME: str = "ArangoDB Graph"
    CYTOSCAPE_MAX_CONCURRENT_COLUMNS: int = Field(default=4, ge=1)

    # Timeouts (seconds)
    HTTP_TIMEOUT: float = 30.0
    PIPELINE_TIMEOUT: float = 300.0

    # Named query catalog
    QUERY_CONFIG_PATH: str = "config.json"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()
