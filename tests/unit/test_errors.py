"""Unit tests for the structured error catalog."""

import pytest
from certmaker.errors import CertMakerError, ErrorKind, GenerationError, ValidationError


class TestErrorCatalog:
    """Verify both error kinds have correct codes and serialization."""

    def test_base_error(self):
        e = CertMakerError(code="TEST", message="test msg", suggestion="try this")
        d = e.to_dict()
        assert d["error_code"] == "TEST"
        assert d["message"] == "test msg"
        assert d["suggestion"] == "try this"

    def test_validation_error_carries_every_field(self):
        e = ValidationError(
            "Input validation failed",
            {"person.name": "Name is required", "person.email": "Invalid email format"},
        )
        assert e.code == "VALIDATION_FAILED"
        assert e.kind is ErrorKind.VALIDATION
        assert set(e.field_errors) == {"person.name", "person.email"}
        assert "person.email" in e.message
        assert e.to_dict()["detail"] == e.field_errors

    def test_validation_error_without_fields(self):
        e = ValidationError("Certificate ID cannot be empty")
        assert e.field_errors == {}
        assert e.message == "Certificate ID cannot be empty"
        assert "detail" not in e.to_dict()

    def test_generation_error_keeps_cause(self):
        cause = PermissionError("denied")
        e = GenerationError("Failed to save certificate file", cause)
        assert e.code == "GENERATION_FAILED"
        assert e.kind is ErrorKind.GENERATION
        assert e.cause is cause
        assert "PermissionError" in e.to_dict()["detail"]

    def test_generation_error_without_cause(self):
        e = GenerationError("Unsupported output format: bmp")
        assert e.cause is None
        assert "detail" not in e.to_dict()

    def test_all_errors_are_exceptions(self):
        for cls in (ValidationError, GenerationError):
            assert issubclass(cls, CertMakerError)
            assert issubclass(cls, Exception)

    def test_kind_is_serialized(self):
        assert ValidationError("x").to_dict()["kind"] == "validation"
        assert GenerationError("x").to_dict()["kind"] == "generation"

    def test_raise_and_catch_by_kind(self):
        with pytest.raises(CertMakerError) as info:
            raise GenerationError("boom")
        assert info.value.kind is ErrorKind.GENERATION
