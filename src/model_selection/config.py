"""Model selection configuration settings.

Provides settings for the selection CLI and logging, the legacy environment
lookup, and loading of user model catalogs.
"""

import json
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ModelConfigError
from .models import AuthType
from .schemas import ModelConfig


class ModelSelectionSettings(BaseSettings):
    """General model selection settings."""

    auth_type: str = Field(
        default=AuthType.QWEN_OAUTH.value,
        description="Auth type to select models from",
    )
    selected_model: str | None = Field(
        default=None,
        description="Previously persisted model id",
    )
    providers_file: Path | None = Field(
        default=None,
        description="JSON file with the user model catalog",
    )
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    model_config = SettingsConfigDict(
        env_prefix="MODEL_SELECTION_",
        env_file=".env",
        extra="ignore",
    )


class LegacyEnvironmentSettings(BaseSettings):
    """Legacy model environment variables, read from the process environment."""

    openai_model: str | None = Field(
        default=None,
        description="Model for the OpenAI auth type (OPENAI_MODEL)",
    )

    model_config = SettingsConfigDict(extra="ignore")


@lru_cache
def get_settings() -> ModelSelectionSettings:
    """Get cached model selection settings."""
    return ModelSelectionSettings()


def get_model_from_environment(auth_type: AuthType | str) -> str | None:
    """Get a model id from environment variables.

    Only the OpenAI auth type has a legacy variable (OPENAI_MODEL).

    Args:
        auth_type: Auth type being initialized

    Returns:
        Model id, or None if not set for this auth type
    """
    if auth_type == AuthType.USE_OPENAI:
        return LegacyEnvironmentSettings().openai_model or None
    return None


def load_model_providers(data: Mapping[str, Any]) -> dict[str, list[ModelConfig]]:
    """Validate a user model catalog.

    Args:
        data: Mapping of auth type to a list of model entries. A settings
            document with a ``modelProviders`` key is also accepted.

    Returns:
        Model definitions grouped by auth type

    Raises:
        ModelConfigError: If the catalog has the wrong shape
    """
    if "modelProviders" in data:
        data = data["modelProviders"]
    if not isinstance(data, Mapping):
        raise ModelConfigError("Model providers config must be a mapping of authType to models")

    providers: dict[str, list[ModelConfig]] = {}
    for auth_type, entries in data.items():
        if not isinstance(entries, list):
            raise ModelConfigError(
                f"Models for authType '{auth_type}' must be a list",
                auth_type=auth_type,
            )
        try:
            providers[auth_type] = [ModelConfig.model_validate(entry) for entry in entries]
        except ValidationError as e:
            raise ModelConfigError(
                f"Invalid model config in authType '{auth_type}': {e}",
                auth_type=auth_type,
                cause=e,
            ) from e

    return providers


def load_model_providers_file(path: Path) -> dict[str, list[ModelConfig]]:
    """Load a user model catalog from a JSON file.

    Raises:
        ModelConfigError: If the file cannot be read or parsed
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ModelConfigError(f"Failed to load model providers from '{path}': {e}", cause=e) from e

    if not isinstance(data, Mapping):
        raise ModelConfigError(f"Model providers file '{path}' must contain a JSON object")

    return load_model_providers(data)
