# region Docstring
"""
clipkeep.config.factory
Settings base class and cached settings factory.
Overview:
- FactoryBaseSettings layers YAML files under the environment and .env sources so a
    clipboard daemon can be configured per user and per checkout.
Contents:
- Functions:
    - config_files() -> list[Path]:
        YAML files consulted, lowest priority first: the per-user file in the data
        directory, then config.yaml and config.{env}.yaml in the application root.
    - get_settings(settings_cls) -> settings_cls:
        One cached instance per settings class.
- Classes:
    - FactoryBaseSettings:
        Priority (highest to lowest): environment, .env, YAML files (later files in
        config_files() win), init kwargs, field defaults.
Design notes:
- Settings are frozen. Code that changes configuration at runtime builds a new value
    with model_copy(update=...) and hands it to ClipboardHistory.apply_settings().
- A single config.yaml may hold keys for every settings class; unknown keys are
    ignored by each class.
"""
# endregion
# region Imports
from functools import lru_cache
from pathlib import Path
from typing import List, Type, TypeVar

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .base import APP_ENV, APP_ROOT, DATA_DIR

# endregion

T = TypeVar("T", bound=BaseSettings)


def config_files() -> List[Path]:
    return [
        DATA_DIR / "config.yaml",
        APP_ROOT / "config.yaml",
        APP_ROOT / f"config.{APP_ENV}.yaml",
    ]


# region FactoryBaseSettings Class
class FactoryBaseSettings(BaseSettings):
    """Frozen BaseSettings reading CLIPKEEP_* variables, .env and YAML files."""

    model_config = SettingsConfigDict(
        env_file=APP_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Missing files are skipped by the YAML source
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=config_files())
        return (
            env_settings,
            dotenv_settings,
            yaml_settings,
            init_settings,
        )


# endregion
# region get_settings Factory Function
@lru_cache
def get_settings(settings_cls: Type[T]) -> T:
    """Load `settings_cls` once; call get_settings.cache_clear() to re-read sources."""
    return settings_cls()


# endregion

__all__ = ["FactoryBaseSettings", "config_files", "get_settings"]
