"""Unit tests for admin_deletion.foundation.domain.exceptions."""

from __future__ import annotations

import pytest

from admin_deletion.foundation.domain.exceptions import (
    AuditWriteFailedError,
    AuthenticationError,
    CommitFailedError,
    DomainError,
    NotFoundError,
    QueryFailedError,
    StorageError,
    TransactionStartFailedError,
    UpdateFailedError,
    ValidationError,
)


@pytest.mark.unit
class TestDomainError:
    def test_str_without_context(self) -> None:
        assert str(DomainError("boom")) == "boom"

    def test_str_includes_context(self) -> None:
        err = DomainError("boom", context={"user_id": "u-1"})
        assert str(err) == "boom (user_id=u-1)"

    def test_repr(self) -> None:
        err = DomainError("boom", context={"a": 1})
        assert repr(err) == "DomainError('boom', context={'a': 1})"


@pytest.mark.unit
class TestNotFoundError:
    def test_message_and_context(self) -> None:
        err = NotFoundError("User", "alice@example.com")

        assert err.message == "User not found: alice@example.com"
        assert err.context == {"resource_type": "User", "resource_id": "alice@example.com"}
        assert err.error_code == "RESOURCE_NOT_FOUND"


@pytest.mark.unit
class TestValidationError:
    def test_message_and_context(self) -> None:
        err = ValidationError("group_ids", "At least one group must be selected")

        assert err.field == "group_ids"
        assert err.message == (
            "Validation failed for 'group_ids': At least one group must be selected"
        )
        assert err.error_code == "VALIDATION_ERROR"


@pytest.mark.unit
class TestAuthenticationError:
    def test_overrides_error_code_per_instance(self) -> None:
        err = AuthenticationError("expired", auth_error="invalid_token", error_code="TOKEN_EXPIRED")

        assert err.error_code == "TOKEN_EXPIRED"
        assert AuthenticationError.error_code == "AUTHENTICATION_ERROR"


@pytest.mark.unit
class TestStorageErrors:
    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (TransactionStartFailedError, "TRANSACTION_START_FAILED"),
            (QueryFailedError, "QUERY_FAILED"),
            (UpdateFailedError, "UPDATE_FAILED"),
            (AuditWriteFailedError, "AUDIT_WRITE_FAILED"),
            (CommitFailedError, "COMMIT_FAILED"),
        ],
    )
    def test_phase_codes(self, cls: type[StorageError], code: str) -> None:
        err = cls("failed", group_id="G1")

        assert isinstance(err, StorageError)
        assert err.error_code == code
        assert err.context == {"group_id": "G1"}
