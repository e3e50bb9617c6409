"""Unit tests for AppError hierarchy."""

import pytest

from errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    IdentityError,
    NotFoundError,
    StorageError,
    ValidationError,
)


class TestAppErrorSubclasses:
    def test_validation_error(self):
        e = ValidationError("bad input")
        assert e.status_code == 400
        assert e.error_code == "validation_error"
        assert e.message == "bad input"

    def test_authentication_error(self):
        e = AuthenticationError("Invalid API key")
        assert e.status_code == 401
        assert e.error_code == "authentication_error"

    def test_identity_error_is_authentication_error(self):
        e = IdentityError("bad owner")
        assert isinstance(e, AuthenticationError)
        assert e.status_code == 401
        assert e.error_code == "invalid_identity"

    def test_forbidden_error(self):
        e = ForbiddenError("API key does not have write permission")
        assert e.status_code == 403
        assert e.error_code == "forbidden"

    def test_not_found_error(self):
        e = NotFoundError("API key not found")
        assert e.status_code == 404
        assert e.error_code == "not_found"

    def test_conflict_error(self):
        e = ConflictError("already exists")
        assert e.status_code == 409
        assert e.error_code == "conflict"

    def test_storage_error(self):
        e = StorageError("connection refused")
        assert isinstance(e, AppError)
        assert e.status_code == 500
        assert e.error_code == "storage_error"


class TestAppErrorToDict:
    def test_basic(self):
        e = AuthenticationError("API key is required")
        assert e.to_dict() == {"error": "API key is required", "code": "authentication_error"}

    @pytest.mark.parametrize(
        "kwargs, key, value",
        [
            ({"field": "permissions"}, "field", "permissions"),
            ({"details": {"allowed": ["read"]}}, "details", {"allowed": ["read"]}),
        ],
        ids=["with_field", "with_details"],
    )
    def test_optional_key_present(self, kwargs, key, value):
        e = ValidationError("invalid", **kwargs)
        assert e.to_dict()[key] == value

    def test_no_optional_keys_when_absent(self):
        d = NotFoundError("missing").to_dict()
        assert "field" not in d
        assert "details" not in d

    def test_storage_error_hides_detail(self):
        d = StorageError("mongodb://user:pw@host refused", details={"x": 1}).to_dict()
        assert "refused" not in d["error"]
        assert "details" not in d
        assert d["code"] == "storage_error"
