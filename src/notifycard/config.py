from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from notifycard.exceptions import ConfigError
from notifycard.expressions.evaluator import DEFAULT_MAX_DEPTH
from notifycard.logging import get_logger

__all__ = [
    "NotifyCardConfig",
    "ExpressionConfig",
    "TemplateConfig",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "notifycard.yaml"

# Project config path for the load_config() call in progress.
_project_config_path: ContextVar[Path | None] = ContextVar(
    "notifycard_project_config_path", default=None
)


class ExpressionConfig(BaseModel):
    """Settings for expression evaluation.

    Attributes:
        max_depth: Maximum nesting of parentheses and ``!`` in one expression.
    """

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=100)


class TemplateConfig(BaseModel):
    """Settings for template rendering.

    Attributes:
        max_placeholders: Maximum ``{{ }}`` placeholders per template, or
            null to disable the check.
    """

    max_placeholders: int | None = Field(default=1000, ge=1)


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source that reads one YAML file (missing file = no values)."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._data: dict[str, Any] = {}
        if yaml_file is None or not yaml_file.exists():
            return
        try:
            loaded = yaml.safe_load(yaml_file.read_text())
        except yaml.YAMLError as e:
            raise ConfigError(
                message=f"Invalid YAML in {yaml_file}: {e}",
                field=None,
                value=None,
            ) from e
        if loaded is None:
            logger.warning("config_file_empty", path=str(yaml_file))
        elif not isinstance(loaded, dict):
            raise ConfigError(
                message=f"Config file {yaml_file} must contain a mapping",
                field=None,
                value=type(loaded).__name__,
            )
        else:
            self._data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._data:
            return self._data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._data


class NotifyCardConfig(BaseSettings):
    """Root configuration object."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFYCARD_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    expressions: ExpressionConfig = Field(default_factory=ExpressionConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Order the sources, highest priority first.

        1. Explicit init arguments
        2. Environment variables (NOTIFYCARD_*)
        3. Project YAML (./notifycard.yaml or the path given to load_config)
        4. User YAML (~/.config/notifycard/config.yaml)
        """
        project_path = _project_config_path.get()
        if project_path is None:
            project_path = Path.cwd() / PROJECT_CONFIG_NAME
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Return ~/.config/notifycard/config.yaml."""
    return Path.home() / ".config" / "notifycard" / "config.yaml"


def load_config(config_path: Path | None = None) -> NotifyCardConfig:
    """Load configuration: defaults -> user -> project -> env.

    Args:
        config_path: Project config file. Defaults to ./notifycard.yaml.

    Returns:
        The merged NotifyCardConfig.

    Raises:
        ConfigError: If a file is not valid YAML or a value fails validation.
    """
    project_path = config_path or Path.cwd() / PROJECT_CONFIG_NAME
    if not project_path.exists():
        logger.debug("project_config_missing", path=str(project_path))

    token = _project_config_path.set(project_path)
    try:
        return NotifyCardConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_path.reset(token)
