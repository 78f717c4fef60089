"""Configuration management using pydantic-settings."""

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_MAX_INPUT_DIMENSION = 1024
DEFAULT_MAX_SIZE = 2048
DEFAULT_COMPRESS_LEVEL = 9
DEFAULT_SOFTWARE = "Fuzzpaint"
CONFIG_PATH = Path("~/.config/fuzzpaint-thumbnailer/config.toml").expanduser()


def _xdg_dir(var: str, fallback: str) -> Path:
    """XDG base directory. Relative values are invalid and ignored."""
    value = os.environ.get(var)
    if value and Path(value).is_absolute():
        return Path(value)
    return Path(fallback).expanduser()


def xdg_cache_home() -> Path:
    return _xdg_dir("XDG_CACHE_HOME", "~/.cache")


def xdg_data_home() -> Path:
    return _xdg_dir("XDG_DATA_HOME", "~/.local/share")


class LimitsConfig(BaseModel):
    max_input_dimension: int = Field(default=DEFAULT_MAX_INPUT_DIMENSION, gt=0)
    max_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0)


class OutputConfig(BaseModel):
    compress_level: int = Field(default=DEFAULT_COMPRESS_LEVEL, ge=0, le=9)
    upscale: bool = True
    software: str = DEFAULT_SOFTWARE


class CacheConfig(BaseModel):
    directory: Path = Field(default_factory=lambda: xdg_cache_home() / "thumbnails")
    record_failures: bool = True

    @field_validator("directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()


class DesktopConfig(BaseModel):
    data_home: Path = Field(default_factory=xdg_data_home)

    @field_validator("data_home", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FUZZPAINT_THUMBNAILER_", env_nested_delimiter="__"
    )

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    desktop: DesktopConfig = Field(default_factory=DesktopConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats the config file, which arrives as init kwargs
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults.

    Only the sections present in the file are passed on, so environment
    overrides still apply on top of it.
    """
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        sections = {k: v for k, v in data.items() if k in Settings.model_fields}
        return Settings(**sections)

    return Settings()
