"""
Column value coercion.

Converts raw request values (usually JSON strings/numbers) to the python
type of a mapped column, using pydantic's lax validation rules.
"""

from functools import lru_cache
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import Column


@lru_cache(maxsize=64)
def _adapter_for(python_type: type) -> TypeAdapter:
    return TypeAdapter(Optional[python_type])


def column_python_type(column: Column) -> Optional[type]:
    """Python type of a column, or None when the column type does not declare one."""
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


def coerce_column_value(column: Column, value: Any) -> Any:
    """
    Coerce `value` to the python type of `column`.

    Values for columns without a declared python type are returned unchanged.

    Raises:
        ValueError: If the value cannot be converted.
    """
    python_type = column_python_type(column)
    if python_type is None or value is None:
        return value

    try:
        return _adapter_for(python_type).validate_python(value)
    except ValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        raise ValueError(
            f"Invalid value {value!r} for column '{column.key}': {messages}"
        ) from e
