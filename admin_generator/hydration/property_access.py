"""
Property Path Accessor.

Reads values from arbitrary objects by property path, e.g.
"author.name", "tags[0].label" or "[meta][title]".

Each path element is resolved against the current value in this order:
    - bracketed element: mapping key, or sequence index when numeric
    - dotted element on a mapping: key lookup
    - dotted element on an object: attribute, then get_x(), is_x(), has_x()
"""

import re
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any, List, Tuple

from admin_generator.exceptions import AdminGeneratorError


_ELEMENT_PATTERN = re.compile(r"\.?([^.\[\]]+)|\[([^\[\]]+)\]")


class PropertyAccessError(AdminGeneratorError):
    """Raised when a property path is malformed or cannot be resolved."""

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)


@lru_cache(maxsize=256)
def parse_property_path(path: str) -> Tuple[Tuple[str, bool], ...]:
    """
    Split a property path into (element, is_index) pairs.

    Raises:
        PropertyAccessError: If the path is empty or malformed.
    """
    if not path:
        raise PropertyAccessError("Property path must not be empty.", path)

    elements: List[Tuple[str, bool]] = []
    position = 0
    while position < len(path):
        match = _ELEMENT_PATTERN.match(path, position)
        if match is None or match.end() == position:
            raise PropertyAccessError(
                f"Could not parse property path '{path}'. Unexpected token at position {position}.",
                path,
            )
        # A leading dot is only valid between elements
        if position == 0 and path.startswith("."):
            raise PropertyAccessError(f"Property path '{path}' must not start with a dot.", path)

        name, index = match.group(1), match.group(2)
        elements.append((index, True) if index is not None else (name, False))
        position = match.end()

    return tuple(elements)


class PropertyAccessor:
    """
    Resolves property paths on objects, mappings and sequences.

    Example:
        accessor = PropertyAccessor()
        accessor.get_value(article, "author.name")
    """

    def get_value(self, obj: Any, path: str) -> Any:
        """
        Read the value found at `path` on `obj`.

        Raises:
            PropertyAccessError: If any element of the path cannot be read.
        """
        value = obj
        for element, is_index in parse_property_path(path):
            if is_index:
                value = self._read_index(value, element, path)
            else:
                value = self._read_property(value, element, path)
        return value

    def is_readable(self, obj: Any, path: str) -> bool:
        """Check whether `path` can be read on `obj`."""
        try:
            self.get_value(obj, path)
        except PropertyAccessError:
            return False
        return True

    def _read_index(self, value: Any, key: str, path: str) -> Any:
        if isinstance(value, Mapping):
            if key in value:
                return value[key]
            raise PropertyAccessError(f"Index '[{key}]' does not exist in '{path}'.", path)

        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            try:
                return value[int(key)]
            except (ValueError, IndexError):
                raise PropertyAccessError(f"Index '[{key}]' does not exist in '{path}'.", path)

        raise PropertyAccessError(
            f"Cannot read index '[{key}]' from value of type {type(value).__name__} in '{path}'.",
            path,
        )

    def _read_property(self, value: Any, name: str, path: str) -> Any:
        if value is None:
            raise PropertyAccessError(
                f"Cannot read property '{name}' from null value in '{path}'.",
                path,
            )

        if isinstance(value, Mapping):
            if name in value:
                return value[name]
            raise PropertyAccessError(f"Key '{name}' does not exist in '{path}'.", path)

        if not name.startswith("_") and hasattr(value, name):
            attribute = getattr(value, name)
            # Bound methods are read by calling them, like getters
            if callable(attribute) and hasattr(attribute, "__self__"):
                return attribute()
            return attribute

        camel = name[:1].upper() + name[1:]
        for prefix in ("get_", "is_", "has_", "get", "is", "has"):
            accessor_name = f"{prefix}{name}" if prefix.endswith("_") else f"{prefix}{camel}"
            accessor = getattr(value, accessor_name, None)
            if callable(accessor):
                return accessor()

        raise PropertyAccessError(
            f"Neither the property '{name}' nor one of the methods 'get_{name}()', "
            f"'is_{name}()', 'has_{name}()' exist on {type(value).__name__} in '{path}'.",
            path,
        )
