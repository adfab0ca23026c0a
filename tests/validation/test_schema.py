"""
Tests for attribute bag validation.
"""

from typing import Literal

from pydantic import BaseModel

from promptweave.validation.schema import effective_schema, validate_props


class CardProps(BaseModel):
    title: str
    count: int = 0
    kind: Literal["info", "warning"] = "info"


class TestValidateProps:
    """Tests for validate_props."""

    def test_valid_props_coerced(self):
        """Lax coercion applies ("3" -> 3)."""
        props, diagnostics = validate_props("Card", {"title": "Hi", "count": "3"}, CardProps)
        assert diagnostics == []
        assert props == {"title": "Hi", "count": 3, "kind": "info"}

    def test_no_schema_passes_through(self):
        props, diagnostics = validate_props("Card", {"anything": 1}, None)
        assert props == {"anything": 1}
        assert diagnostics == []

    def test_unknown_attributes_dropped(self):
        """Attributes the schema does not declare are dropped."""
        props, diagnostics = validate_props("Card", {"title": "Hi", "extra": 1}, CardProps)
        assert "extra" not in props
        assert diagnostics == []

    def test_permissive_keeps_unknown_attributes(self):
        """Permissive components receive unknown attributes untouched."""
        props, diagnostics = validate_props("Card", {"title": "Hi", "extra": [1]}, CardProps, permissive=True)
        assert props["extra"] == [1]
        assert diagnostics == []

    def test_one_diagnostic_per_violation(self):
        """Each violated constraint becomes a hard-error diagnostic."""
        props, diagnostics = validate_props(
            "Card", {"count": "many", "kind": "loud"}, CardProps, owner="0.1"
        )
        assert props == {"count": "many", "kind": "loud"}
        assert {diagnostic.prop for diagnostic in diagnostics} == {"title", "count", "kind"}
        assert all(not diagnostic.is_warning for diagnostic in diagnostics)
        assert all(diagnostic.component == "Card" for diagnostic in diagnostics)
        assert all(diagnostic.owner == "0.1" for diagnostic in diagnostics)

    def test_diagnostic_codes_and_messages(self):
        """Codes are pydantic error types; messages cite the attribute."""
        _, diagnostics = validate_props("Card", {"title": "Hi", "count": "many"}, CardProps)
        (diagnostic,) = diagnostics
        assert diagnostic.code == "int_parsing"
        assert diagnostic.message.startswith("Card: attribute 'count':")

    def test_nested_violation_path(self):
        """A violation inside a list value records where it happened."""

        class SizesProps(BaseModel):
            sizes: list[int]

        _, diagnostics = validate_props("Grid", {"sizes": [1, 2, "big"]}, SizesProps)
        (diagnostic,) = diagnostics
        assert diagnostic.prop == "sizes"
        assert diagnostic.path == (2,)
        assert diagnostic.message.startswith("Grid: attribute 'sizes.2':")

    def test_missing_required_attribute(self):
        _, diagnostics = validate_props("Card", {}, CardProps)
        assert [diagnostic.code for diagnostic in diagnostics] == ["missing"]


class TestEffectiveSchema:
    """Tests for permissive schema variants."""

    def test_strict_schema_returned_as_is(self):
        assert effective_schema(CardProps, permissive=False) is CardProps

    def test_permissive_variant_cached(self):
        """The permissive subclass is built once per schema."""
        first = effective_schema(CardProps, permissive=True)
        assert first is not CardProps
        assert issubclass(first, CardProps)
        assert effective_schema(CardProps, permissive=True) is first
