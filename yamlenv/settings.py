"""Tool settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class YamlenvSettings(BaseSettings):
    """Settings for the yamlenv command line tool.

    The library API never reads these; they only configure the CLI.
    """

    model_config = SettingsConfigDict(
        env_prefix="YAMLENV_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_file: str = Field(default="env.yaml")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    cast_to_upper: bool = Field(default=False)


def get_settings() -> YamlenvSettings:
    """Get a settings instance."""
    return YamlenvSettings()
