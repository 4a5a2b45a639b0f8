"""Model selection constants.

Defines provider (auth) types, selection sources, generation defaults and
the built-in Qwen OAuth catalog.
"""

from enum import Enum
from typing import Any


class AuthType(str, Enum):
    """Provider/credential scheme a model is served through."""

    QWEN_OAUTH = "qwen-oauth"
    USE_OPENAI = "openai"
    USE_GEMINI = "gemini-api-key"
    USE_VERTEX_AI = "vertex-ai"
    LOGIN_WITH_GOOGLE = "oauth-personal"
    CLOUD_SHELL = "cloud-shell"


class SelectionSource(str, Enum):
    """How the current model was selected.

    Used for tracking and observability only. No source takes priority
    over another when a new selection is made.
    """

    DEFAULT = "default"
    ENVIRONMENT = "environment"
    SETTINGS = "settings"
    PROGRAMMATIC_OVERRIDE = "programmatic_override"
    USER_MANUAL = "user_manual"


def coerce_auth_type(value: "AuthType | str") -> "AuthType | str":
    """Return the AuthType member for a known value, else the value itself."""
    if isinstance(value, AuthType):
        return value
    try:
        return AuthType(value)
    except ValueError:
        return value


def auth_type_label(auth_type: "AuthType | str") -> str:
    """Plain string form of an auth type, for messages and log fields."""
    return auth_type.value if isinstance(auth_type, AuthType) else str(auth_type)


# Default generation parameters, merged field-by-field under model overrides
DEFAULT_GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.7,
    "top_p": 0.9,
    "max_tokens": 4096,
    "timeout": 60000,
    "max_retries": 3,
}

# Default API base URL per auth type
DEFAULT_BASE_URLS: dict[str, str] = {
    AuthType.QWEN_OAUTH.value: "https://dashscope.aliyuncs.com/compatible-mode/v1",
    AuthType.USE_OPENAI.value: "https://api.openai.com/v1",
}

# Canonical model for the built-in auth type
DEFAULT_QWEN_MODEL = "coder-model"

# Hard-coded Qwen OAuth models. User configuration cannot override these.
QWEN_OAUTH_MODELS: list[dict[str, Any]] = [
    {
        "id": "coder-model",
        "name": "Qwen Coder",
        "description": (
            "The latest Qwen Coder model from Alibaba Cloud ModelStudio "
            "(version: qwen3-coder-plus-2025-09-23)"
        ),
        "capabilities": {"vision": False},
        "generation_config": {
            "temperature": 0.7,
            "top_p": 0.9,
            "max_tokens": 8192,
            "timeout": 60000,
            "max_retries": 3,
        },
    },
    {
        "id": "vision-model",
        "name": "Qwen Vision",
        "description": (
            "The latest Qwen Vision model from Alibaba Cloud ModelStudio "
            "(version: qwen3-vl-plus-2025-09-23)"
        ),
        "capabilities": {"vision": True},
        "generation_config": {
            "temperature": 0.7,
            "top_p": 0.9,
            "max_tokens": 8192,
            "timeout": 60000,
            "max_retries": 3,
        },
    },
]
