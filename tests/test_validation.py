"""
Unit Tests for entity validation.
"""

import pytest
from pydantic import BaseModel, Field

from admin_generator.validation import EntityValidator, ValidationResult
from admin_generator.validation.validator import BLANK_MESSAGE, TOO_LONG_MESSAGE

from blog_models import Article


class ArticleSchema(BaseModel):
    title: str = Field(min_length=3)
    views: int = Field(ge=0)


@pytest.fixture
def validator():
    return EntityValidator()


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_collects_errors(self):
        result = ValidationResult()
        result.add_field_error("title", "first").add_field_error("title", "second")
        result.add_general_error("general")

        assert result.has_errors() is True
        assert result.get_field_errors("title") == ["first", "second"]
        assert result.get_field_errors("body") == []
        assert result.to_dict() == {
            "field_errors": {"title": ["first", "second"]},
            "general_errors": ["general"],
        }

    def test_empty_result(self):
        assert ValidationResult().has_errors() is False


class TestEntityValidator:
    """Tests for EntityValidator.validate()."""

    def test_valid_entity(self, validator):
        """Test an entity with required values passes."""
        result = validator.validate(Article(title="Hello", status="draft", views=0, published=False), {})

        assert result.has_errors() is False

    def test_required_column_blank(self, validator):
        """Test non-nullable columns without defaults must be set."""
        result = validator.validate(Article(), {})

        assert result.get_field_errors("title") == [BLANK_MESSAGE]
        # defaults and generated keys are not required
        assert result.get_field_errors("status") == []
        assert result.get_field_errors("id") == []
        assert result.get_field_errors("created_at") == []

    def test_string_too_long(self, validator):
        result = validator.validate(Article(title="x" * 21), {})

        assert result.get_field_errors("title") == [TOO_LONG_MESSAGE.format(limit=20)]
        assert "20 characters or less" in result.get_field_errors("title")[0]

    def test_schema_errors_mapped_to_fields(self, validator):
        """Test pydantic schema errors are reported per field."""
        article = Article(title="Hi", views=-1)

        result = validator.validate(article, {"validation_schema": ArticleSchema})

        assert len(result.get_field_errors("title")) == 1
        assert len(result.get_field_errors("views")) == 1

    def test_ignore_standard_validator(self, validator):
        """Test standard checks are skipped but the entity method still runs."""
        article = Article(title="forbidden")

        result = validator.validate(article, {"ignore_standard_validator": True})

        assert result.field_errors == {}
        assert result.general_errors == ["This title is not allowed."]

        blank = validator.validate(Article(), {"ignore_standard_validator": True})
        assert blank.has_errors() is False

    def test_entity_validation_method_disabled(self, validator):
        result = validator.validate(Article(title="Forbidden"), {"entity_validation_method": None})

        assert result.has_errors() is False

    def test_custom_entity_validation_method(self, validator):
        """Test the configured method name is used."""
        class Note:
            def check(self, result):
                result.add_general_error("checked")

        result = validator.validate(Note(), {"entity_validation_method": "check"})

        assert result.general_errors == ["checked"]
