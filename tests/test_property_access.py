"""
Unit Tests for property path access.
"""

from types import SimpleNamespace

import pytest

from admin_generator.hydration.property_access import (
    PropertyAccessError,
    PropertyAccessor,
    parse_property_path,
)


class Person:
    """Plain object exposing values through getters."""

    def __init__(self, first: str, last: str, active: bool = True) -> None:
        self._first = first
        self._last = last
        self._active = active

    def get_full_name(self) -> str:
        return f"{self._first} {self._last}"

    def is_active(self) -> bool:
        return self._active

    def has_initials(self) -> bool:
        return bool(self._first and self._last)

    def getNickname(self) -> str:
        return self._first.lower()


@pytest.fixture
def accessor():
    return PropertyAccessor()


class TestParsePropertyPath:
    """Tests for property path parsing."""

    def test_dotted_path(self):
        """Test dotted elements are split in order."""
        assert parse_property_path("author.name") == (("author", False), ("name", False))

    def test_bracketed_path(self):
        """Test bracketed elements are marked as indexes."""
        assert parse_property_path("tags[0].label") == (
            ("tags", False),
            ("0", True),
            ("label", False),
        )
        assert parse_property_path("[meta][title]") == (("meta", True), ("title", True))

    @pytest.mark.parametrize("path", ["", ".name", "author..name", "tags[0"])
    def test_malformed_paths_raise(self, path):
        """Test malformed paths are rejected."""
        with pytest.raises(PropertyAccessError):
            parse_property_path(path)


class TestPropertyAccessor:
    """Tests for PropertyAccessor.get_value()."""

    def test_reads_attributes(self, accessor):
        """Test plain and nested attributes."""
        obj = SimpleNamespace(id=5, author=SimpleNamespace(name="Ada"))

        assert accessor.get_value(obj, "id") == 5
        assert accessor.get_value(obj, "author.name") == "Ada"

    def test_reads_mapping_keys(self, accessor):
        """Test dotted and bracketed access on mappings."""
        obj = {"meta": {"title": "Hello"}}

        assert accessor.get_value(obj, "meta.title") == "Hello"
        assert accessor.get_value(obj, "[meta][title]") == "Hello"

    def test_reads_sequence_index(self, accessor):
        """Test numeric indexes on sequences."""
        obj = SimpleNamespace(tags=[SimpleNamespace(label="python"), SimpleNamespace(label="sql")])

        assert accessor.get_value(obj, "tags[1].label") == "sql"

    def test_reads_getter_methods(self, accessor):
        """Test get_/is_/has_ prefixed and camel-case getters."""
        person = Person("Ada", "Lovelace")

        assert accessor.get_value(person, "full_name") == "Ada Lovelace"
        assert accessor.get_value(person, "active") is True
        assert accessor.get_value(person, "initials") is True
        assert accessor.get_value(person, "nickname") == "ada"

    def test_calls_bound_methods(self, accessor):
        """Test a path naming a method reads its return value."""
        person = Person("Ada", "Lovelace")

        assert accessor.get_value(person, "get_full_name") == "Ada Lovelace"

    def test_missing_property_raises(self, accessor):
        """Test unknown properties raise with the path attached."""
        with pytest.raises(PropertyAccessError) as exc_info:
            accessor.get_value(SimpleNamespace(id=1), "title")

        assert exc_info.value.path == "title"
        assert "title" in str(exc_info.value)

    def test_null_intermediate_raises(self, accessor):
        """Test reading through None raises instead of returning None."""
        with pytest.raises(PropertyAccessError, match="null"):
            accessor.get_value(SimpleNamespace(author=None), "author.name")

    def test_missing_index_raises(self, accessor):
        """Test out-of-range indexes and missing keys raise."""
        with pytest.raises(PropertyAccessError):
            accessor.get_value({"tags": []}, "tags[0]")
        with pytest.raises(PropertyAccessError):
            accessor.get_value({"meta": {}}, "[meta][title]")

    def test_private_attributes_not_readable(self, accessor):
        """Test underscore-prefixed attributes are not exposed."""
        assert accessor.is_readable(Person("Ada", "Lovelace"), "_first") is False

    def test_is_readable(self, accessor):
        """Test is_readable() reports instead of raising."""
        obj = SimpleNamespace(id=1)

        assert accessor.is_readable(obj, "id") is True
        assert accessor.is_readable(obj, "missing") is False
