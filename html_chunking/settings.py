"""Runtime settings for the chunking scripts using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ChunkerSettings(BaseSettings):
    """Defaults for the command-line runners, overridable from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="HTML_CHUNKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # YAML configuration; None selects the packaged config.yaml
    config_path: str | None = None

    # Directory holding fixture-* folders with manifest.json files
    fixtures_dir: str = "fixtures"

    # Logging
    log_level: str = "INFO"


def get_settings() -> ChunkerSettings:
    """Return a ChunkerSettings instance."""
    return ChunkerSettings()
