"""异常层次测试。"""

from __future__ import annotations

import pytest

from aurimyth.generic_api.common import (
    GenericApiError,
    MissingValueError,
    PropertyNotFoundError,
    RegistrationError,
)


@pytest.mark.parametrize("error_class", [PropertyNotFoundError, MissingValueError, RegistrationError])
def test_subclasses_share_base(error_class: type[GenericApiError]) -> None:
    with pytest.raises(GenericApiError):
        raise error_class()


def test_default_message() -> None:
    error = PropertyNotFoundError()
    assert str(error) == PropertyNotFoundError.default_message
    assert error.metadata == {}


def test_explicit_message_and_metadata() -> None:
    error = MissingValueError("TestModel.Nullable 的值为空", metadata={"field": "Nullable"})
    assert str(error) == "TestModel.Nullable 的值为空"
    assert error.message == "TestModel.Nullable 的值为空"
    assert error.metadata == {"field": "Nullable"}
    assert "MissingValueError" in repr(error)


def test_chained_cause_is_kept() -> None:
    cause = KeyError("x")
    with pytest.raises(PropertyNotFoundError) as exc_info:
        try:
            raise cause
        except KeyError as exc:
            raise PropertyNotFoundError("with inner") from exc
    assert exc_info.value.__cause__ is cause
