"""Unit tests for kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from datafilter.kernel.errors import (
    ILLEGAL_RECORD_ACCESS_MESSAGE,
    ApplicationError,
    BaseError,
    ConfigurationUnavailableError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    RecordAccessDeniedError,
    UnauthorizedError,
    UnknownFilterError,
    ValidationError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_to_dict_includes_cause_repr(self) -> None:
        err = BaseError("wrapper", cause=ValueError("original"))
        assert "original" in err.to_dict()["cause"]

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        err = BaseError("wrap", cause=cause)
        assert err.__cause__ is cause

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops", detail={"x": 1})))
        assert parsed["code"] == "oops"
        assert parsed["detail"] == {"x": 1}

    def test_repr_contains_code_and_message(self) -> None:
        r = repr(BaseError("hello", code="hi"))
        assert "hi" in r
        assert "hello" in r


class TestHierarchy:
    @pytest.mark.parametrize(
        ("cls", "parent"),
        [
            (DomainError, BaseError),
            (ValidationError, DomainError),
            (UnknownFilterError, ValidationError),
            (ApplicationError, BaseError),
            (UnauthorizedError, ApplicationError),
            (ForbiddenError, ApplicationError),
            (RecordAccessDeniedError, ForbiddenError),
            (InfrastructureError, BaseError),
            (ConfigurationUnavailableError, InfrastructureError),
        ],
    )
    def test_subclassing(self, cls: type, parent: type) -> None:
        assert issubclass(cls, parent)


class TestUnknownFilterError:
    def test_names_the_filter(self) -> None:
        err = UnknownFilterError("datafilter_nope")
        assert err.filter_name == "datafilter_nope"
        assert "datafilter_nope" in err.message
        assert err.code == "unknown_filter"

    def test_to_dict_has_errors_list(self) -> None:
        assert UnknownFilterError("x").to_dict()["errors"] == []


class TestRecordAccessDeniedError:
    def test_fixed_message(self) -> None:
        err = RecordAccessDeniedError()
        assert err.message == ILLEGAL_RECORD_ACCESS_MESSAGE == "Illegal Record Access"
        assert err.code == "illegal_record_access"
        assert err.permission is None

    def test_carries_privilege(self) -> None:
        err = RecordAccessDeniedError(permission="View HIV Encounters")
        assert err.permission == "View HIV Encounters"
        assert err.message == ILLEGAL_RECORD_ACCESS_MESSAGE

    def test_caught_as_forbidden(self) -> None:
        with pytest.raises(ForbiddenError):
            raise RecordAccessDeniedError()


class TestConfigurationUnavailableError:
    def test_default_message(self) -> None:
        err = ConfigurationUnavailableError("datafilter.strictMode")
        assert err.property_name == "datafilter.strictMode"
        assert "datafilter.strictMode" in err.message

    def test_keeps_cause(self) -> None:
        cause = OSError("db down")
        err = ConfigurationUnavailableError("p", cause=cause)
        assert err.__cause__ is cause
