"""
Tests for the application exception handler and the error hierarchy.
"""

import pytest
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from core.exception_handler import application_exception_handler
from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class TestApplicationErrors:
    """Tests for BaseApplicationError and its subclasses."""

    def test_default_error_code(self):
        error = NotFoundError("Plan not found")

        assert error.error_code == "NOT_FOUND"
        assert error.details == {}
        assert str(error) == "[NOT_FOUND] Plan not found"

    def test_to_dict_omits_empty_details(self):
        assert ValidationError("Bad", error_code="INVALID_SPLIT").to_dict() == {
            "error": "Bad",
            "error_code": "INVALID_SPLIT",
        }

    def test_to_dict_includes_details(self):
        error = ConflictError("Stale", details={"current_version": 2})

        assert error.to_dict()["details"] == {"current_version": 2}

    @pytest.mark.parametrize(
        "error_class,expected_status",
        [
            (ValidationError, 400),
            (PermissionDeniedError, 403),
            (NotFoundError, 404),
            (ConflictError, 409),
            (ExternalServiceError, 502),
        ],
    )
    def test_status_codes(self, error_class, expected_status):
        assert error_class("x").status_code == expected_status


class TestApplicationExceptionHandler:
    """Tests for application_exception_handler()."""

    def test_renders_application_error_with_its_status(self):
        error = ConflictError("Already subscribed", error_code="ALREADY_SUBSCRIBED")

        response = application_exception_handler(error, {"view": None})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data == {
            "error": "Already subscribed",
            "error_code": "ALREADY_SUBSCRIBED",
        }

    def test_custom_status_code_on_subclass(self):
        class TeapotError(BaseApplicationError):
            status_code = 418

        response = application_exception_handler(TeapotError("x"), {})

        assert response.status_code == 418

    def test_defers_drf_exceptions(self):
        response = application_exception_handler(NotAuthenticated(), {})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unknown_exceptions_are_not_handled(self):
        assert application_exception_handler(RuntimeError("boom"), {}) is None
