"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ORG_CONFIG_",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format_json: bool = Field(
        default=True,
        description="Use JSON logging format (False for human-readable logs in development)",
    )

    # Layout of the configuration tree, relative to its root
    teams_dir: str = Field(
        default="teams",
        description="Directory holding one sub-directory per top-level team",
    )
    archived_dir: str = Field(
        default="archived",
        description="Directory holding archived repository definitions",
    )
    rulesets_dir: str = Field(
        default="rulesets",
        description="Directory holding organization-wide ruleset definitions",
    )
    external_users_dir: str = Field(
        default="users/external",
        description="Directory holding external collaborator definitions",
    )


settings = Settings()
