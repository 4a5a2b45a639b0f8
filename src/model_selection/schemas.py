"""Model configuration schemas.

Type-safe Pydantic models for model catalogs and selection state. Inputs
accept both snake_case field names and the camelCase keys used in settings
files.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .models import AuthType, SelectionSource


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        protected_namespaces=(),
    )


class ModelCapabilities(_FrozenModel):
    """Model capability flags."""

    vision: bool = False


class ModelGenerationConfig(_FrozenModel):
    """Sampling and request parameters for a model.

    Values are passed to the provider as given. Undeclared keys are kept so
    provider-specific options survive the merge with the defaults.
    """

    model_config = ConfigDict(extra="allow")

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_tokens: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    repetition_penalty: float | None = None
    timeout: int | None = Field(default=None, description="Request timeout in ms")
    max_retries: int | None = Field(default=None, alias="maxRetries")
    disable_cache_control: bool | None = Field(default=None, alias="disableCacheControl")


class ModelConfig(_FrozenModel):
    """Model definition as supplied by the built-in catalog or user settings.

    Only ``id`` is required, and the registry enforces it so the error can
    name the offending auth type.
    """

    id: str | None = None
    name: str | None = None
    description: str | None = None
    env_key: str | None = Field(
        default=None,
        alias="envKey",
        description="Environment variable to read the API key from",
    )
    base_url: str | None = Field(default=None, alias="baseUrl")
    capabilities: ModelCapabilities | None = None
    generation_config: ModelGenerationConfig | None = Field(
        default=None, alias="generationConfig"
    )


class ResolvedModelConfig(ModelConfig):
    """Model definition with every default applied."""

    id: str
    auth_type: AuthType | str = Field(alias="authType")
    name: str
    base_url: str = Field(alias="baseUrl")
    capabilities: ModelCapabilities = Field(default_factory=ModelCapabilities)
    generation_config: ModelGenerationConfig = Field(alias="generationConfig")


class AvailableModel(_FrozenModel):
    """Model summary for display surfaces."""

    id: str
    label: str
    description: str | None = None
    capabilities: ModelCapabilities = Field(default_factory=ModelCapabilities)
    auth_type: AuthType | str
    is_vision: bool = False


class ModelSwitchMetadata(_FrozenModel):
    """Informational context attached to a model switch."""

    reason: str | None = None
    context: str | None = None


class CurrentModelInfo(_FrozenModel):
    """The active selection with its resolved definition."""

    auth_type: AuthType | str
    model_id: str
    model: ResolvedModelConfig
    selection_source: SelectionSource
    selection_timestamp: datetime
