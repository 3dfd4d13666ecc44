"""
Tests for failure classification.

Every failure the engine reports is a KnownError with a kind the caller
can switch on.
"""

import pytest

from binderdex.models.errors import (
    AdminPermissionError,
    BinderValidationError,
    CatalogError,
    FailureKind,
    KnownError,
    StorageUnavailableError,
)


class TestKnownErrors:
    @pytest.mark.parametrize(
        "error,kind",
        [
            (BinderValidationError("bad"), FailureKind.INVALID_INPUT),
            (AdminPermissionError("uid", "customCards"), FailureKind.PERMISSION_DENIED),
            (StorageUnavailableError("Device"), FailureKind.STORAGE_UNAVAILABLE),
            (CatalogError("down"), FailureKind.EXTERNAL_API_ERROR),
        ],
    )
    def test_every_error_is_classified(self, error: KnownError, kind: FailureKind) -> None:
        """Each error subclass carries its failure kind."""
        assert isinstance(error, KnownError)
        assert error.kind == kind
        assert error.message

    def test_validation_kind_override(self) -> None:
        error = BinderValidationError("taken", kind=FailureKind.DUPLICATE, detail="id='x'")

        assert error.kind == FailureKind.DUPLICATE
        assert error.detail == "id='x'"
        assert str(error) == "taken"

    def test_permission_error_explains(self) -> None:
        """Permission errors name the document and suggest a fix."""
        error = AdminPermissionError(None, "globalBinderSlots")

        assert "globalBinderSlots" in error.message
        assert error.actor_id is None
        assert error.suggestion

    def test_storage_error_names_store(self) -> None:
        error = StorageUnavailableError("Account", detail="timeout")

        assert error.message == "Account storage is unavailable."
        assert error.detail == "timeout"
