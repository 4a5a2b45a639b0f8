"""
Pytest configuration and fixtures
"""

from typing import Any

import pytest

from model_selection.config import get_settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from model settings in the host environment."""
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    for name in (
        "MODEL_SELECTION_AUTH_TYPE",
        "MODEL_SELECTION_SELECTED_MODEL",
        "MODEL_SELECTION_PROVIDERS_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


@pytest.fixture
def openai_providers() -> dict[str, list[dict[str, Any]]]:
    """User model catalog with three OpenAI-compatible models."""
    return {
        "openai": [
            {
                "id": "gpt-4-turbo",
                "name": "GPT-4 Turbo",
                "baseUrl": "https://api.openai.com/v1",
            },
            {
                "id": "gpt-3.5-turbo",
                "name": "GPT-3.5 Turbo",
                "baseUrl": "https://api.openai.com/v1",
            },
            {
                "id": "deepseek-coder",
                "name": "DeepSeek Coder",
                "baseUrl": "https://api.deepseek.com/v1",
            },
        ],
    }
