"""
Failure classification for the binder engine.

Read paths never raise: they log and fall back to the last known local state.
The exceptions below are for the places where a caller must be told:

- Validation failures, rejected before anything is written
- Admin writes refused by the config store's allow-list
- Storage and catalog failures, raised by collaborators and caught by
  the services that own a fallback
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"
    DUPLICATE = "duplicate"

    # Resource failures
    NOT_FOUND = "not_found"

    # Authorization
    PERMISSION_DENIED = "permission_denied"

    # Service failures
    STORAGE_UNAVAILABLE = "storage_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)


class BinderValidationError(KnownError):
    """
    Raised when a collection, slot or admin record fails validation.

    Always raised before any write happens.
    """

    def __init__(
        self,
        message: str,
        kind: FailureKind = FailureKind.INVALID_INPUT,
        detail: str | None = None,
    ):
        super().__init__(kind=kind, message=message, detail=detail)


class AdminPermissionError(KnownError):
    """
    Raised when an admin config write is refused.

    Unlike regular-user read fallbacks this is never swallowed: it signals
    a real authorization problem.
    """

    def __init__(self, actor_id: str | None, document: str):
        self.actor_id = actor_id
        self.document = document
        super().__init__(
            kind=FailureKind.PERMISSION_DENIED,
            message=f"Not allowed to write admin config '{document}'.",
            detail=f"actor={actor_id!r}",
            suggestion="Ask an existing admin to add your account to the allow-list.",
        )


class StorageUnavailableError(KnownError):
    """Raised by a storage collaborator when the backend cannot be reached."""

    def __init__(self, store: str, detail: str | None = None):
        self.store = store
        super().__init__(
            kind=FailureKind.STORAGE_UNAVAILABLE,
            message=f"{store} storage is unavailable.",
            detail=detail,
        )


class CatalogError(KnownError):
    """Raised when the card catalog or species API request fails."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.EXTERNAL_API_ERROR, message=message, detail=detail)
