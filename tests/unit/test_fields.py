from __future__ import annotations

import pytest

from influxdb_wire.exceptions import NullFieldError
from influxdb_wire.fields import (
    FieldBool,
    FieldFloat,
    FieldInt,
    FieldNull,
    FieldString,
    line_field,
    to_line_field,
)


def test_line_field_coercion() -> None:
    assert line_field(True) == FieldBool(True)
    assert line_field(3) == FieldInt(3)
    assert line_field(3.0) == FieldFloat(3.0)
    assert line_field("x") == FieldString("x")
    assert line_field(FieldInt(4)) == FieldInt(4)


def test_bool_is_not_an_int() -> None:
    assert line_field(False) != FieldInt(0)
    with pytest.raises(TypeError):
        FieldInt(True)


def test_line_field_rejects_null() -> None:
    with pytest.raises(NullFieldError):
        line_field(None)
    with pytest.raises(NullFieldError):
        line_field(FieldNull())


@pytest.mark.parametrize("value", [float("nan"), float("inf"), FieldFloat(float("-inf"))])
def test_line_field_rejects_non_finite_floats(value) -> None:
    with pytest.raises(ValueError):
        line_field(value)


def test_line_field_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        line_field([1, 2])


def test_int_range_is_signed_64_bit() -> None:
    assert FieldInt(2**63 - 1).value == 2**63 - 1
    assert FieldInt(-(2**63)).value == -(2**63)
    with pytest.raises(ValueError):
        FieldInt(2**63)


def test_narrowing_query_fields() -> None:
    for field in [FieldInt(1), FieldFloat(1.5), FieldString("s"), FieldBool(False)]:
        assert to_line_field(field) is field
    with pytest.raises(NullFieldError):
        to_line_field(FieldNull())


def test_value_based_equality_and_display() -> None:
    assert FieldFloat(1) == FieldFloat(1.0)
    assert FieldInt(1) != FieldFloat(1.0)
    assert FieldNull() == FieldNull()
    assert FieldNull().value is None
    assert str(FieldBool(True)) == "true"
    assert str(FieldNull()) == "null"
    assert str(FieldFloat(2.5)) == "2.5"
