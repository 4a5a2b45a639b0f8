"""Model registry grouped by auth type.

Holds the built-in Qwen OAuth catalog plus user-configured models, each
resolved against the global defaults.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from .exceptions import ModelConfigError
from .models import (
    DEFAULT_BASE_URLS,
    DEFAULT_GENERATION_CONFIG,
    DEFAULT_QWEN_MODEL,
    QWEN_OAUTH_MODELS,
    AuthType,
    auth_type_label,
    coerce_auth_type,
)
from .schemas import (
    AvailableModel,
    ModelCapabilities,
    ModelConfig,
    ModelGenerationConfig,
    ResolvedModelConfig,
)

logger = structlog.get_logger()

ModelProvidersConfig = Mapping[str, Sequence[ModelConfig | Mapping[str, Any]]]


class ModelRegistry:
    """Central registry of model configurations, organized by auth type.

    The registry is read-only after construction, so concurrent readers need
    no locking.
    """

    def __init__(self, model_providers_config: ModelProvidersConfig | None = None) -> None:
        """Initialize model registry.

        Args:
            model_providers_config: Optional mapping of auth type to model
                definitions. Entries under the Qwen OAuth auth type are ignored.

        Raises:
            ModelConfigError: If any model definition is malformed
        """
        self._models_by_auth_type: dict[AuthType | str, dict[str, ResolvedModelConfig]] = {}
        # Reverse index: model id -> auth types, in registration order
        self._auth_types_by_model_id: dict[str, list[AuthType | str]] = {}

        # Built-in models are always registered and cannot be overridden
        self._register_auth_type_models(AuthType.QWEN_OAUTH, QWEN_OAUTH_MODELS)

        for raw_auth_type, models in (model_providers_config or {}).items():
            auth_type = coerce_auth_type(raw_auth_type)
            if auth_type == AuthType.QWEN_OAUTH:
                logger.debug(
                    "model_config_ignored",
                    auth_type=AuthType.QWEN_OAUTH.value,
                    count=len(models),
                )
                continue
            self._register_auth_type_models(auth_type, models)

        logger.info(
            "model_registry_initialized",
            auth_types=[auth_type_label(at) for at in self._models_by_auth_type],
            model_count=self.get_total_model_count(),
        )

    def _register_auth_type_models(
        self,
        auth_type: AuthType | str,
        models: Sequence[ModelConfig | Mapping[str, Any]],
    ) -> None:
        model_map: dict[str, ResolvedModelConfig] = {}

        for entry in models:
            resolved = self._resolve_model_config(entry, auth_type)
            model_map[resolved.id] = resolved
            self._auth_types_by_model_id.setdefault(resolved.id, []).append(auth_type)

        self._models_by_auth_type[auth_type] = model_map

    def _resolve_model_config(
        self,
        entry: ModelConfig | Mapping[str, Any],
        auth_type: AuthType | str,
    ) -> ResolvedModelConfig:
        """Apply defaults to a model definition.

        Args:
            entry: Model definition, as a schema object or raw mapping
            auth_type: Auth type the definition is registered under

        Returns:
            Fully resolved model configuration

        Raises:
            ModelConfigError: If the entry is invalid or has no id
        """
        try:
            config = entry if isinstance(entry, ModelConfig) else ModelConfig.model_validate(entry)
        except ValidationError as e:
            raise ModelConfigError(
                f"Invalid model config in authType '{auth_type_label(auth_type)}': {e}",
                auth_type=auth_type,
                cause=e,
            ) from e

        if not config.id:
            raise ModelConfigError.missing_id(auth_type)

        return ResolvedModelConfig(
            id=config.id,
            auth_type=auth_type,
            name=config.name or config.id,
            description=config.description,
            env_key=config.env_key,
            base_url=config.base_url or DEFAULT_BASE_URLS.get(auth_type_label(auth_type), ""),
            capabilities=config.capabilities or ModelCapabilities(),
            generation_config=self._merge_generation_config(config.generation_config),
        )

    @staticmethod
    def _merge_generation_config(
        config: ModelGenerationConfig | None,
    ) -> ModelGenerationConfig:
        """Shallow-merge explicit generation fields over the global defaults."""
        overrides = config.model_dump(exclude_none=True) if config else {}
        return ModelGenerationConfig(**{**DEFAULT_GENERATION_CONFIG, **overrides})

    def get_models_for_auth_type(self, auth_type: AuthType | str) -> list[AvailableModel]:
        """Get display summaries of all models for an auth type.

        Args:
            auth_type: Auth type to list

        Returns:
            Models in registration order, empty if the auth type is unknown
        """
        models = self._models_by_auth_type.get(auth_type)
        if not models:
            return []

        return [
            AvailableModel(
                id=model.id,
                label=model.name,
                description=model.description,
                capabilities=model.capabilities,
                auth_type=model.auth_type,
                is_vision=model.capabilities.vision,
            )
            for model in models.values()
        ]

    def get_available_auth_types(self) -> list[AuthType | str]:
        """Get all auth types that have at least one model configured."""
        return [auth_type for auth_type, models in self._models_by_auth_type.items() if models]

    def get_model(self, auth_type: AuthType | str, model_id: str) -> ResolvedModelConfig | None:
        """Get model by auth type and id.

        Returns:
            Resolved model if found, None otherwise
        """
        models = self._models_by_auth_type.get(auth_type)
        if models is None:
            return None
        return models.get(model_id)

    def has_model(self, auth_type: AuthType | str, model_id: str) -> bool:
        """Check if a model exists for the given auth type."""
        return self.get_model(auth_type, model_id) is not None

    def has_auth_type(self, auth_type: AuthType | str) -> bool:
        """Check if any models are registered for the auth type."""
        return bool(self._models_by_auth_type.get(auth_type))

    def get_first_model_for_auth_type(
        self, auth_type: AuthType | str
    ) -> ResolvedModelConfig | None:
        """Get the first registered model for an auth type."""
        models = self._models_by_auth_type.get(auth_type)
        if not models:
            return None
        return next(iter(models.values()))

    def get_default_model_for_auth_type(
        self, auth_type: AuthType | str
    ) -> ResolvedModelConfig | None:
        """Get the default model for an auth type.

        Qwen OAuth always defaults to the coder model. Other auth types
        default to their first configured model.
        """
        if auth_type == AuthType.QWEN_OAUTH:
            return self.get_model(auth_type, DEFAULT_QWEN_MODEL)
        return self.get_first_model_for_auth_type(auth_type)

    def get_total_model_count(self) -> int:
        """Get the number of models across all auth types."""
        return sum(len(models) for models in self._models_by_auth_type.values())

    def find_auth_types_for_model(
        self,
        model_id: str,
        preferred_auth_type: AuthType | str | None = None,
    ) -> list[AuthType | str]:
        """Find all auth types that offer a model id.

        Args:
            model_id: Model id to look up
            preferred_auth_type: Optional auth type to move to the front

        Returns:
            Auth types offering the model, empty if none
        """
        auth_types = list(self._auth_types_by_model_id.get(model_id, []))
        if preferred_auth_type is not None:
            preferred_auth_type = coerce_auth_type(preferred_auth_type)

        if preferred_auth_type is None or preferred_auth_type not in auth_types:
            return auth_types

        return [preferred_auth_type] + [at for at in auth_types if at != preferred_auth_type]
