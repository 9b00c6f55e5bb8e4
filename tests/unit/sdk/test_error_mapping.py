from py_category_sync.application.results import Err, FailureKind
from py_category_sync.domain.errors import DomainError, ValidationError
from py_category_sync.sdk.errors import (
    DomainViolation,
    NotFound,
    UnexpectedError,
    UserInputError,
    error_from_result,
    map_exception,
)


def test_map_validation_error_to_user_input():
    e = map_exception(ValidationError("bad"))
    assert isinstance(e, UserInputError)
    assert str(e) == "bad"


def test_map_domain_error_to_domain_violation():
    e = map_exception(DomainError("rule"))
    assert isinstance(e, DomainViolation)


def test_map_value_error_to_user_input():
    e = map_exception(ValueError("oops"))
    assert isinstance(e, UserInputError)


def test_map_lookup_error_to_not_found():
    e = map_exception(KeyError("cat-1"))
    assert isinstance(e, NotFound)


def test_map_other_to_unexpected():
    e = map_exception(RuntimeError("boom"))
    assert isinstance(e, UnexpectedError)


def test_error_from_result():
    assert isinstance(error_from_result(Err("missing", FailureKind.HTTP, 404)), NotFound)
    assert isinstance(error_from_result(Err("bad", FailureKind.INVALID)), UserInputError)
    assert isinstance(error_from_result(Err("nope", FailureKind.HTTP, 400)), UserInputError)
    assert isinstance(error_from_result(Err("down", FailureKind.NETWORK)), UnexpectedError)
    assert str(error_from_result(Err("boom", FailureKind.HTTP, 500))) == "boom"


def test_public_errors_pass_through_unchanged():
    for exc in (UserInputError("a"), DomainViolation("b"), NotFound("c"), UnexpectedError("d")):
        assert map_exception(exc) is exc
