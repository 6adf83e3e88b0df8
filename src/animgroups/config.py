"""Application configuration with pydantic-settings + TOML."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from animgroups.models.group import DEFAULT_NAME, DEFAULT_TICKS_PER_FRAME


def _default_config_dir() -> Path:
    return Path.home() / ".animgroups"


def config_path() -> Path:
    """Location of the optional TOML config file."""
    return _default_config_dir() / "config.toml"


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ANIMGROUPS_",
        env_nested_delimiter="__",
    )

    # used when creating new scene files; existing scenes carry their own
    ticks_per_frame: int = Field(default=DEFAULT_TICKS_PER_FRAME, gt=0)
    index_property: str = Field(default="babylonjs_AnimationList", min_length=1)
    default_group_name: str = DEFAULT_NAME
    json_indent: int | None = Field(default=None, ge=0)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = config_path()
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))


def load_config() -> AppConfig:
    """Load application config from the environment and config.toml."""
    return AppConfig()
