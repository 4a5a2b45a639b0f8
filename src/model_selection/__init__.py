"""Model registry and selection.

Resolves which model and provider credentials are active for a session and
lets that selection change safely at runtime.
"""

from .exceptions import (
    ModelConfigError,
    ModelNotFoundError,
    ModelSelectionError,
    NoModelSelectedError,
)
from .models import (
    DEFAULT_BASE_URLS,
    DEFAULT_GENERATION_CONFIG,
    DEFAULT_QWEN_MODEL,
    QWEN_OAUTH_MODELS,
    AuthType,
    SelectionSource,
)
from .registry import ModelProvidersConfig, ModelRegistry
from .schemas import (
    AvailableModel,
    CurrentModelInfo,
    ModelCapabilities,
    ModelConfig,
    ModelGenerationConfig,
    ModelSwitchMetadata,
    ResolvedModelConfig,
)
from .selection import ModelChangeCallback, ModelSelectionManager

__all__ = [
    # Registry
    "ModelRegistry",
    "ModelProvidersConfig",
    # Selection
    "ModelSelectionManager",
    "ModelChangeCallback",
    # Models
    "AuthType",
    "SelectionSource",
    "DEFAULT_BASE_URLS",
    "DEFAULT_GENERATION_CONFIG",
    "DEFAULT_QWEN_MODEL",
    "QWEN_OAUTH_MODELS",
    # Schemas
    "AvailableModel",
    "CurrentModelInfo",
    "ModelCapabilities",
    "ModelConfig",
    "ModelGenerationConfig",
    "ModelSwitchMetadata",
    "ResolvedModelConfig",
    # Exceptions
    "ModelSelectionError",
    "ModelConfigError",
    "ModelNotFoundError",
    "NoModelSelectedError",
]
