"""
Unit tests for the identifier model.

Tests cover:
- SCREAMING_SNAKE_CASE derivation
- Structural equality and hashing
- Variant-only accessors and their faults
- Code constant rendering
"""
import dataclasses

import pytest

from yarp_meta.core.identifiers import (
    IdentifierKind,
    UnitIdentifier,
    WrongVariantError,
    to_shouty_snake_case,
)


class TestShoutySnakeCase:
    """Test constant name derivation."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("custom_guard", "CUSTOM_GUARD"),
            ("armor_shop", "ARMOR_SHOP"),
            ("customGuard", "CUSTOM_GUARD"),
            ("CustomGuard", "CUSTOM_GUARD"),
            ("HTTPServer", "HTTP_SERVER"),
            ("elite-footman 2", "ELITE_FOOTMAN_2"),
            ("  padded  name  ", "PADDED_NAME"),
            ("ALREADY_SHOUTY", "ALREADY_SHOUTY"),
            ("mage2Tower", "MAGE2_TOWER"),
        ],
    )
    def test_conversion(self, text, expected):
        """Test word boundaries on separators and case changes."""
        assert to_shouty_snake_case(text) == expected

    def test_empty_and_separator_only(self):
        """Test that degenerate input still converts."""
        assert to_shouty_snake_case("") == ""
        assert to_shouty_snake_case("__--  ") == ""

    def test_deterministic(self):
        """Test that repeated conversion yields the same result."""
        first = UnitIdentifier.new_custom("siegeEngine_mk2")
        second = UnitIdentifier.new_custom("siegeEngine_mk2")

        assert first.constant() == second.constant() == "SIEGE_ENGINE_MK2"


class TestUnitIdentifier:
    """Test UnitIdentifier variants."""

    def test_new_custom(self):
        """Test creating a custom identifier."""
        id = UnitIdentifier.new_custom("custom_guard")

        assert id.kind is IdentifierKind.UID
        assert id.is_uid()
        assert not id.is_rawid()
        assert id.uid() == "custom_guard"
        assert id.constant_name == "CUSTOM_GUARD"

    def test_new_stock(self):
        """Test creating a stock identifier."""
        id = UnitIdentifier.new_stock("hfoo")

        assert id.kind is IdentifierKind.RAWID
        assert id.is_rawid()
        assert not id.is_uid()
        assert id.rawid() == "hfoo"

    def test_constant(self):
        """Test code constant rendering for both variants."""
        assert UnitIdentifier.new_custom("custom_guard").constant() == "CUSTOM_GUARD"
        assert UnitIdentifier.new_stock("hfoo").constant() == "'hfoo'"

    def test_uid_on_stock_faults(self):
        """Test that uid() on a stock identifier raises."""
        with pytest.raises(WrongVariantError, match="non-UID"):
            UnitIdentifier.new_stock("hfoo").uid()

    def test_rawid_on_custom_faults(self):
        """Test that rawid() on a custom identifier raises."""
        with pytest.raises(WrongVariantError, match="non-RawID"):
            UnitIdentifier.new_custom("custom_guard").rawid()

    def test_wrong_variant_is_type_error(self):
        """Test that the fault is a TypeError."""
        with pytest.raises(TypeError):
            UnitIdentifier.new_custom("custom_guard").rawid()

    def test_structural_equality(self):
        """Test equality and hashing by variant and underlying string."""
        assert UnitIdentifier.new_custom("a") == UnitIdentifier.new_custom("a")
        assert hash(UnitIdentifier.new_custom("a")) == hash(UnitIdentifier.new_custom("a"))
        assert UnitIdentifier.new_custom("a") != UnitIdentifier.new_custom("b")
        assert UnitIdentifier.new_custom("hfoo") != UnitIdentifier.new_stock("hfoo")

    def test_usable_as_dict_key(self):
        """Test identifiers key dictionaries structurally."""
        table = {UnitIdentifier.new_stock("hfoo"): "footman"}

        assert table[UnitIdentifier.new_stock("hfoo")] == "footman"
        assert UnitIdentifier.new_custom("hfoo") not in table

    def test_immutable(self):
        """Test that identifiers cannot be modified."""
        id = UnitIdentifier.new_custom("custom_guard")

        with pytest.raises(dataclasses.FrozenInstanceError):
            id.value = "other"
