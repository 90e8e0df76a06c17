"""
Value Formatter.

Pure functions translating between user input, typed Python values and the
literal syntax of the service's query language:

| FieldType | Accepted Python values | Literal |
| --- | --- | --- |
| `STRING` | `str` | `'text'` (or `"text"` if the text holds a `'`) |
| `INTEGER` | `int` | `42` |
| `FLOAT` | `int`, `float` (finite) | `4.2` |
| `BOOLEAN` | `bool` | `true` / `false` |
| `DATE` | `datetime.datetime`, `datetime.date` | `dt '2018-01-31 12:00:00'` / `dt '2018-01-31'` |
"""

import datetime
import decimal
import math
from typing import Any, Optional

from ..enum import FieldType
from ..errors import FormatError

_SINGLE_QUOTE = "'"
_DOUBLE_QUOTE = '"'

_TRUE_TEXTS = {"true", "1", "yes"}
_FALSE_TEXTS = {"false", "0", "no"}


def _mismatch(value: Any, field_type: FieldType) -> FormatError:
    return FormatError(
        f"Value {value!r} of type '{type(value).__name__}' is not a valid '{field_type}' value"
    )


def _as_field_type(field_type: Any) -> FieldType:
    try:
        return FieldType(field_type)
    except ValueError:
        raise FormatError(f"Unsupported field type {field_type!r}") from None


def _quote(text: str) -> str:
    # The query lexer has no escape sequence inside literals: a quote can only
    # appear inside a literal delimited by the other quote character.
    if _SINGLE_QUOTE not in text:
        return f"{_SINGLE_QUOTE}{text}{_SINGLE_QUOTE}"
    if _DOUBLE_QUOTE not in text:
        return f"{_DOUBLE_QUOTE}{text}{_DOUBLE_QUOTE}"
    raise FormatError(
        f"String value {text!r} contains both quote characters and cannot be expressed as a literal"
    )


def format_value(value: Any, field_type: FieldType) -> str:
    """
    Renders one typed value as a query-language literal.

    Args:
        value: The value to render. Must already be of the Python type matching
            `field_type` (see the module table).
        field_type: The declared type of the field the value belongs to.

    Returns:
        The literal, ready to be embedded in a `field=literal` clause.

    Raises:
        FormatError: If `value` is `None` or its runtime type does not match `field_type`.
    """
    if value is None:
        raise FormatError(f"Cannot format an absent value as '{field_type}'")

    field_type = _as_field_type(field_type)

    if field_type is FieldType.STRING:
        if not isinstance(value, str):
            raise _mismatch(value, field_type)
        return _quote(value)

    if field_type is FieldType.INTEGER:
        # bool is an int subclass but is never a valid integer filter
        if isinstance(value, bool) or not isinstance(value, int):
            raise _mismatch(value, field_type)
        return str(value)

    if field_type is FieldType.FLOAT:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _mismatch(value, field_type)
        if isinstance(value, float) and not math.isfinite(value):
            raise FormatError(f"Non-finite value {value!r} has no literal form")
        if isinstance(value, int):
            return str(value)
        # The number lexer reads only `-digits[.digits]`, never exponents
        return format(decimal.Decimal(repr(value)), "f")

    if field_type is FieldType.BOOLEAN:
        if not isinstance(value, bool):
            raise _mismatch(value, field_type)
        return "true" if value else "false"

    # FieldType.DATE
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            raise FormatError(f"Timezone-aware value {value!r} has no '{field_type}' literal form")
        if value.microsecond:
            raise FormatError(f"Value {value!r} is more precise than the one-second '{field_type}' literal")
        return f"dt {_quote(value.isoformat(sep=' ', timespec='seconds'))}"
    if isinstance(value, datetime.date):
        return f"dt {_quote(value.isoformat())}"
    raise _mismatch(value, field_type)


def parse_value(text: Optional[str], field_type: FieldType) -> Any:
    """
    Converts raw user input into the typed value accepted by `format_value()`.

    Surrounding whitespace is stripped; blank input yields `None` (no filter).

    Raises:
        FormatError: If the text cannot be read as a `field_type` value.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None

    field_type = _as_field_type(field_type)
    try:
        if field_type is FieldType.STRING:
            return text
        if field_type is FieldType.INTEGER:
            return int(text)
        if field_type is FieldType.FLOAT:
            return float(text)
        if field_type is FieldType.BOOLEAN:
            lowered = text.lower()
            if lowered in _TRUE_TEXTS:
                return True
            if lowered in _FALSE_TEXTS:
                return False
            raise ValueError(f"expected one of {sorted(_TRUE_TEXTS | _FALSE_TEXTS)}")
        # FieldType.DATE
        try:
            return datetime.date.fromisoformat(text)
        except ValueError:
            return datetime.datetime.fromisoformat(text)
    except ValueError as e:
        raise FormatError(f"Cannot read {text!r} as a '{field_type}' value: {e}") from e
