"""Tests for catalog definitions and registries."""

import pytest

from .lib import (
    Catalog,
    ElementDefinition,
    NodeDefinition,
    Registry,
    StyleDefinition,
    TokenDefinition,
    UnitType,
)


class TestDefinitions:
    """Tests for definition invariants."""

    @pytest.mark.unit
    def test_shorthand_flag(self):
        """Only definitions with longhands are shorthands."""
        assert StyleDefinition("gap", "<length>", longhand=("row-gap", "column-gap")).is_shorthand
        assert not StyleDefinition("color", "<color>").is_shorthand

    @pytest.mark.unit
    def test_token_key_format(self):
        """Token keys must be angle-bracketed names."""
        with pytest.raises(ValueError, match="<name>"):
            TokenDefinition("length", "<length>")

    @pytest.mark.unit
    def test_negative_unique_limit_rejected(self):
        """Unique child limits cannot be negative."""
        with pytest.raises(ValueError, match="negative"):
            ElementDefinition("table", unique_children={"caption": -1})

    @pytest.mark.unit
    def test_node_default_tag_must_be_permitted(self):
        """A restricted node definition must allow its default tag."""
        with pytest.raises(ValueError, match="default tag"):
            NodeDefinition("text", default_tag="div", tags=frozenset({"p", "span"}))

    @pytest.mark.unit
    def test_permits_tag(self):
        """Empty tag sets are unrestricted."""
        free = NodeDefinition("container", default_tag="div")
        text = NodeDefinition("text", default_tag="p", tags=frozenset({"p", "span"}))
        assert free.permits_tag("section")
        assert text.permits_tag("span")
        assert not text.permits_tag("div")


class TestRegistry:
    """Tests for the read-only registry."""

    @pytest.mark.unit
    def test_lookup_and_require(self):
        """Lookup returns None for missing keys; require fails instead."""
        registry = Registry.from_definitions(
            "style", [StyleDefinition("color", "<color>")], lambda d: d.key
        )
        assert registry.lookup("color").syntax == "<color>"
        assert registry.lookup("margin") is None
        assert registry.require("color").success
        missing = registry.require("margin")
        assert not missing.success
        assert "margin" in missing.error

    @pytest.mark.unit
    def test_duplicate_keys_rejected(self):
        """Registries refuse two definitions with one key."""
        with pytest.raises(ValueError, match="Duplicate"):
            Registry.from_definitions(
                "element",
                [ElementDefinition("div"), ElementDefinition("div")],
                lambda d: d.tag,
            )

    @pytest.mark.unit
    def test_entries_are_read_only(self):
        """The underlying mapping cannot be mutated."""
        registry = Registry("element", {"div": ElementDefinition("div")})
        with pytest.raises(TypeError):
            registry.as_mapping()["p"] = ElementDefinition("p")  # type: ignore[index]
        assert "div" in registry
        assert len(registry) == 1
        assert list(registry) == ["div"]


class TestCatalog:
    """Tests for catalog assembly."""

    @pytest.mark.unit
    def test_primitives_seeded(self):
        """Primitive tokens are present unless disabled."""
        catalog = Catalog.build()
        assert "<length>" in catalog.tokens
        assert catalog.tokens.lookup("<color>").default == "#000000"
        bare = Catalog.build(include_primitives=False)
        assert "<length>" not in bare.tokens

    @pytest.mark.unit
    def test_declared_token_overrides_primitive(self):
        """A declared token replaces the primitive with the same key."""
        catalog = Catalog.build(tokens=[TokenDefinition("<length>", "<length>", default="1px")])
        assert catalog.tokens.lookup("<length>").default == "1px"

    @pytest.mark.unit
    def test_units_of(self, catalog):
        """Units can be listed per dimension category."""
        angle_units = {unit.key for unit in catalog.units_of(UnitType.ANGLE)}
        assert {"deg", "turn"} <= angle_units
        assert catalog.units.lookup("%").type == UnitType.PERCENTAGE

    @pytest.mark.unit
    def test_catalog_is_frozen(self, catalog):
        """Catalog fields cannot be reassigned."""
        with pytest.raises(AttributeError):
            catalog.styles = catalog.tokens  # type: ignore[misc]
