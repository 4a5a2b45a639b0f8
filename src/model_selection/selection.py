"""Model selection manager.

Owns the two-level selection state (auth type -> model) for a session and
switches models transactionally, rolling back when the change callback
fails.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import structlog

from .config import get_model_from_environment
from .exceptions import ModelNotFoundError, NoModelSelectedError
from .models import AuthType, SelectionSource, auth_type_label, coerce_auth_type
from .registry import ModelProvidersConfig, ModelRegistry
from .schemas import AvailableModel, CurrentModelInfo, ModelSwitchMetadata, ResolvedModelConfig

logger = structlog.get_logger()

# Notified after a switch commits; may be a coroutine function
ModelChangeCallback = Callable[[AuthType | str, ResolvedModelConfig], Awaitable[None] | None]
EnvironmentLookup = Callable[[AuthType | str], str | None]


class ModelSelectionManager:
    """Manages the active auth type and model for a session.

    Only successful calls to :meth:`switch_model` change the selection after
    initialization. Switches are serialized, including the change callback.
    """

    def __init__(
        self,
        *,
        initial_auth_type: AuthType | str | None = None,
        initial_model_id: str | None = None,
        on_model_change: ModelChangeCallback | None = None,
        model_providers_config: ModelProvidersConfig | None = None,
        registry: ModelRegistry | None = None,
        environment_lookup: EnvironmentLookup = get_model_from_environment,
    ) -> None:
        """Initialize selection manager.

        Args:
            initial_auth_type: Auth type from persisted settings (default: Qwen OAuth)
            initial_model_id: Model id from persisted settings
            on_model_change: Callback invoked after each committed switch
            model_providers_config: User model catalog used to build the registry
            registry: Pre-built registry, used instead of model_providers_config
            environment_lookup: Returns a model id from the environment for an auth type

        Raises:
            ValueError: If both registry and model_providers_config are given
            ModelConfigError: If the model catalog is malformed
        """
        if registry is not None and model_providers_config is not None:
            raise ValueError("Pass either registry or model_providers_config, not both")

        self._registry = registry if registry is not None else ModelRegistry(model_providers_config)
        self._on_model_change = on_model_change
        self._environment_lookup = environment_lookup
        self._switch_lock = asyncio.Lock()

        self._current_auth_type = coerce_auth_type(initial_auth_type or AuthType.QWEN_OAUTH)
        self._current_model_id = ""
        self._selection_source = SelectionSource.DEFAULT
        self._selection_timestamp = datetime.now(UTC)

        self._initialize_selection(initial_model_id or "")

    def _initialize_selection(self, initial_model_id: str) -> None:
        """Pick the starting model: persisted, then environment, then default."""
        auth_type = self._current_auth_type

        resolved = self._resolve_initial_model(initial_model_id)
        if resolved is None:
            logger.warning(
                "model_selection_empty",
                auth_type=auth_type_label(auth_type),
                requested_model=initial_model_id or None,
            )
            return

        self._select(*resolved)

        if initial_model_id and initial_model_id != self._current_model_id:
            logger.info(
                "persisted_model_unavailable",
                auth_type=auth_type_label(auth_type),
                requested_model=initial_model_id,
            )

        logger.info(
            "model_selection_initialized",
            auth_type=auth_type_label(auth_type),
            model_id=self._current_model_id,
            source=self._selection_source.value,
        )

    def _resolve_initial_model(self, initial_model_id: str) -> tuple[str, SelectionSource] | None:
        auth_type = self._current_auth_type

        if initial_model_id and self._registry.has_model(auth_type, initial_model_id):
            return initial_model_id, SelectionSource.SETTINGS

        # Legacy environment variables
        env_model = self._environment_lookup(auth_type)
        if env_model and self._registry.has_model(auth_type, env_model):
            return env_model, SelectionSource.ENVIRONMENT

        default_model = self._registry.get_default_model_for_auth_type(auth_type)
        if default_model is not None:
            return default_model.id, SelectionSource.DEFAULT

        return None

    def _select(self, model_id: str, source: SelectionSource) -> None:
        self._current_model_id = model_id
        self._selection_source = source
        self._selection_timestamp = datetime.now(UTC)

    async def switch_model(
        self,
        model_id: str,
        source: SelectionSource,
        metadata: ModelSwitchMetadata | None = None,
    ) -> ResolvedModelConfig:
        """Switch model within the current auth type.

        The new selection is committed before the change callback runs. If
        the callback fails (or is cancelled) the model id is restored and
        the error is re-raised; source and timestamp keep the attempted
        values.

        Args:
            model_id: Model to switch to
            source: How the switch was requested (informational only)
            metadata: Optional reason/context for logging

        Returns:
            Resolved configuration of the new model

        Raises:
            ModelNotFoundError: If the model is not registered for the current auth type
        """
        async with self._switch_lock:
            auth_type = self._current_auth_type
            model = self._registry.get_model(auth_type, model_id)
            if model is None:
                logger.warning(
                    "model_switch_rejected",
                    auth_type=auth_type_label(auth_type),
                    model_id=model_id,
                    source=source.value,
                )
                raise ModelNotFoundError(auth_type, model_id)

            previous_model_id = self._current_model_id
            self._select(model_id, source)

            try:
                if self._on_model_change is not None:
                    result = self._on_model_change(auth_type, model)
                    if inspect.isawaitable(result):
                        await result
            except BaseException as e:
                self._current_model_id = previous_model_id
                logger.warning(
                    "model_switch_rolled_back",
                    auth_type=auth_type_label(auth_type),
                    model_id=model_id,
                    previous_model_id=previous_model_id,
                    error=repr(e),
                )
                raise

            logger.info(
                "model_switched",
                auth_type=auth_type_label(auth_type),
                model_id=model_id,
                previous_model_id=previous_model_id,
                source=source.value,
                reason=metadata.reason if metadata else None,
                context=metadata.context if metadata else None,
            )
            return model

    @property
    def registry(self) -> ModelRegistry:
        """Registry backing this manager."""
        return self._registry

    @property
    def current_auth_type(self) -> AuthType | str:
        return self._current_auth_type

    @property
    def current_model_id(self) -> str:
        """Current model id, empty when nothing is selected."""
        return self._current_model_id

    @property
    def selection_source(self) -> SelectionSource:
        return self._selection_source

    @property
    def selection_timestamp(self) -> datetime:
        """UTC time of the last selection or switch attempt."""
        return self._selection_timestamp

    def get_current_model(self) -> CurrentModelInfo:
        """Get the active selection with its resolved configuration.

        Raises:
            NoModelSelectedError: If no model is selected, or the selected
                model is no longer in the registry
        """
        if not self._current_model_id:
            raise NoModelSelectedError("No model selected")

        model = self._registry.get_model(self._current_auth_type, self._current_model_id)
        if model is None:
            raise NoModelSelectedError(
                f"Current model '{self._current_model_id}' not found for "
                f"authType '{auth_type_label(self._current_auth_type)}'"
            )

        return CurrentModelInfo(
            auth_type=self._current_auth_type,
            model_id=self._current_model_id,
            model=model,
            selection_source=self._selection_source,
            selection_timestamp=self._selection_timestamp,
        )

    def set_on_model_change(self, callback: ModelChangeCallback | None) -> None:
        """Replace the model change callback."""
        self._on_model_change = callback

    def get_available_models(self, auth_type: AuthType | str | None = None) -> list[AvailableModel]:
        """Get models for an auth type, defaulting to the current one."""
        return self._registry.get_models_for_auth_type(auth_type or self._current_auth_type)

    def get_available_auth_types(self) -> list[AuthType | str]:
        """Get auth types with at least one model."""
        return self._registry.get_available_auth_types()

    def has_model(self, model_id: str, auth_type: AuthType | str | None = None) -> bool:
        """Check if a model exists, in the current auth type unless one is given."""
        return self._registry.has_model(auth_type or self._current_auth_type, model_id)

    def get_model(
        self, model_id: str, auth_type: AuthType | str | None = None
    ) -> ResolvedModelConfig | None:
        """Get a model, from the current auth type unless one is given."""
        return self._registry.get_model(auth_type or self._current_auth_type, model_id)

    def find_auth_types_for_model(self, model_id: str) -> list[AuthType | str]:
        """Find auth types offering a model, current auth type first."""
        return self._registry.find_auth_types_for_model(model_id, self._current_auth_type)
