"""Tests for domain exceptions and their JSON shape."""

from app.domain.exceptions import (
    CopyTimeoutException,
    PlatformException,
    SqlNotConfiguredException,
    TenantNotFoundException,
    ValidationException,
)


def test_platform_exception_defaults_error_code_to_class_name() -> None:
    exc = PlatformException("boom")
    assert exc.error_code == "PlatformException"
    assert exc.to_dict() == {"error": "PlatformException", "message": "boom", "details": {}}


def test_validation_exception_carries_field() -> None:
    exc = ValidationException("Select at least one module to copy", field="modules")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "modules"}
    assert ValidationException("bad").details == {}


def test_tenant_not_found_names_the_side() -> None:
    exc = TenantNotFoundException("t-1", role="source")
    assert str(exc) == "Source tenant not found: t-1"
    assert exc.details == {"tenant_id": "t-1", "role": "source"}


def test_tenant_not_found_without_side() -> None:
    exc = TenantNotFoundException("t-1")
    assert exc.message == "Tenant not found: t-1"
    assert "role" not in exc.details


def test_copy_timeout_exception() -> None:
    exc = CopyTimeoutException("a", "b", 2.5)
    assert exc.error_code == "COPY_TIMEOUT"
    assert "2.5s" in exc.message
    assert exc.details["target_tenant_id"] == "b"


def test_sql_not_configured_is_service_unavailable() -> None:
    assert SqlNotConfiguredException().error_code == "SERVICE_UNAVAILABLE"
