"""Custom exceptions for model registry and selection."""

from __future__ import annotations

from .models import AuthType, auth_type_label


class ModelSelectionError(Exception):
    """Base exception for model registry and selection errors.

    Attributes:
        message: Error description
        cause: Original exception that caused this error
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize model selection error.

        Args:
            message: Error description
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.cause = cause


class ModelConfigError(ModelSelectionError):
    """A model catalog entry is malformed.

    Raised while building the registry, which is aborted as a whole.
    """

    def __init__(
        self,
        message: str,
        auth_type: AuthType | str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.auth_type = auth_type

    @classmethod
    def missing_id(cls, auth_type: AuthType | str) -> ModelConfigError:
        """Error for an entry with an empty or missing id."""
        return cls(
            f"Model config in authType '{auth_type_label(auth_type)}' "
            "missing required field: id",
            auth_type=auth_type,
        )


class ModelNotFoundError(ModelSelectionError):
    """Requested model is not registered for the auth type."""

    def __init__(self, auth_type: AuthType | str, model_id: str) -> None:
        super().__init__(
            f"Model '{model_id}' not found for authType '{auth_type_label(auth_type)}'"
        )
        self.auth_type = auth_type
        self.model_id = model_id


class NoModelSelectedError(ModelSelectionError):
    """No valid current selection exists.

    Raised when the manager is in the unselected state, or when the stored
    model id no longer resolves in the registry.
    """

    pass
