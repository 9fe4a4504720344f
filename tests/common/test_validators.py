from __future__ import annotations

import pytest

from employee_management.common.validators import (
    require_email,
    require_float,
    require_min_length,
    require_non_empty,
    require_text,
)
from employee_management.core.exceptions import ValidationError


def test_text_is_stripped_and_required():
    assert require_non_empty("  Ada ", "Name") == "Ada"
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty("   ", "Name")
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty(None, "Name")


@pytest.mark.parametrize("value", [5, 1.5, ["a"], {"a": 1}, True])
def test_non_text_values_are_validation_errors(value):
    with pytest.raises(ValidationError, match="must be text"):
        require_non_empty(value, "Name")
    with pytest.raises(ValidationError):
        require_email(value)
    with pytest.raises(ValidationError):
        require_min_length(value, "Password", 6)


def test_missing_optional_text_is_empty():
    assert require_text(None, "Phone") == ""
    assert require_text(" 555 ", "Phone") == " 555 "


def test_email_is_lowercased_and_checked():
    assert require_email(" Ada@Example.COM ") == "ada@example.com"
    with pytest.raises(ValidationError, match="Email is not valid"):
        require_email("ada@example")


def test_float_accepts_numbers_and_numeric_strings():
    assert require_float("1.5", "Radius") == 1.5
    assert require_float(3, "Radius") == 3.0
    for bad in ("wide", None, [], False):
        with pytest.raises(ValidationError, match="Radius must be a number"):
            require_float(bad, "Radius")
