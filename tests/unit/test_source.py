"""
Unit tests for the source tree model and YAML loader.
"""
import textwrap

import pytest
import yaml

from yarp_meta.core.identifiers import UnitIdentifier
from yarp_meta.core.telemetry import TelemetryRecorder
from yarp_meta.core.transform import transform_yarp_data
from yarp_meta.core.source import (
    CustomDataUnit,
    DataUnitKind,
    SourceFormatError,
    StockDataUnit,
    YarpData,
    YarpDataShop,
    YarpDataUnit,
    load_source,
)


class TestYarpDataUnit:
    """Test node construction from dictionaries."""

    def test_stock_node(self):
        """Test that a rawid key makes a stock node."""
        node = YarpDataUnit.from_dict({"rawid": "hfoo", "model": "units/footman"})

        assert isinstance(node, StockDataUnit)
        assert node.rawid == "hfoo"
        assert node.model == "units/footman"

    def test_custom_node_defaults(self):
        """Test that custom nodes default to plain units."""
        node = YarpDataUnit.from_dict({"uid": "custom_guard", "name": "Guard"})

        assert isinstance(node, CustomDataUnit)
        assert node.uid == "custom_guard"
        assert node.kind is DataUnitKind.UNIT
        assert node.model == ""
        assert node.icon == ""
        assert node.built == []

    def test_builder_node(self):
        """Test that builders carry nested nodes."""
        node = YarpDataUnit.from_dict({
            "uid": "peasant",
            "kind": "builder",
            "built": [
                {"uid": "farm", "kind": "building"},
                {"rawid": "halt", "model": "buildings/altar"},
            ],
        })

        assert node.kind is DataUnitKind.BUILDER
        assert isinstance(node.built[0], CustomDataUnit)
        assert node.built[0].kind is DataUnitKind.BUILDING
        assert isinstance(node.built[1], StockDataUnit)

    def test_unknown_kind(self):
        """Test that unknown kinds are rejected."""
        with pytest.raises(SourceFormatError, match="unknown kind"):
            YarpDataUnit.from_dict({"uid": "x", "kind": "hero"})

    def test_built_on_non_builder(self):
        """Test that only builders may list built nodes."""
        with pytest.raises(SourceFormatError, match="not a builder"):
            YarpDataUnit.from_dict({"uid": "x", "built": [{"rawid": "hfoo"}]})

    def test_numeric_rawid_rejected(self):
        """Test that a raw code read as a number is rejected."""
        with pytest.raises(SourceFormatError, match="rawid 83"):
            YarpDataUnit.from_dict({"rawid": 83, "model": "units/footman"})

    def test_numeric_uid_rejected(self):
        """Test that a uid read as a number is rejected."""
        with pytest.raises(SourceFormatError, match="uid"):
            YarpDataUnit.from_dict({"uid": 1000.0})

    def test_non_string_field_rejected(self):
        """Test that optional text fields must be strings."""
        with pytest.raises(SourceFormatError, match="'model'"):
            YarpDataUnit.from_dict({"uid": "custom_guard", "model": 12})

    def test_missing_uid(self):
        """Test that custom nodes require a uid."""
        with pytest.raises(KeyError):
            YarpDataUnit.from_dict({"name": "Nameless"})


class TestYarpData:
    """Test root and shop construction."""

    def test_shop_from_dict(self):
        """Test shop fields and sold nodes."""
        shop = YarpDataShop.from_dict({
            "uid": "armor_shop",
            "name": "Armor Shop",
            "model": "shop.mdx",
            "scale": 1.5,
            "sold": [{"rawid": "hfoo"}],
        })

        assert shop.uid == "armor_shop"
        assert shop.scale == 1.5
        assert len(shop.sold) == 1

    def test_root_from_dict(self):
        """Test groupings and the stock model table keep source order."""
        data = YarpData.from_dict({
            "shops": {
                "human": [{"uid": "a"}, {"uid": "b"}],
                "orc": [{"uid": "c"}],
            },
            "stock_model_registry": {"hfoo": "units/footman", "ogru": "units/grunt"},
        })

        assert list(data.shops) == ["human", "orc"]
        assert [shop.uid for shop in data.shops["human"]] == ["a", "b"]
        assert list(data.stock_model_registry) == ["hfoo", "ogru"]

    def test_root_empty_sections(self):
        """Test that missing or null sections become empty."""
        data = YarpData.from_dict({"shops": None})

        assert data.shops == {}
        assert data.stock_model_registry == {}


class TestLoadSource:
    """Test loading a source tree from YAML."""

    def test_load(self, tmp_path):
        """Test loading a small source file."""
        source_file = tmp_path / "units.yml"
        source_file.write_text(yaml.safe_dump({
            "shops": {"human": [{"uid": "armor_shop", "sold": [{"rawid": "hfoo"}]}]},
            "stock_model_registry": {"hfoo": "units/footman"},
        }))

        data = load_source(source_file)

        assert data.shops["human"][0].uid == "armor_shop"
        assert data.stock_model_registry == {"hfoo": "units/footman"}

    def test_load_empty(self, tmp_path):
        """Test that an empty document yields an empty tree."""
        source_file = tmp_path / "empty.yml"
        source_file.write_text("")

        assert load_source(source_file) == YarpData()

    def test_load_missing(self, tmp_path):
        """Test that a missing file raises."""
        with pytest.raises(FileNotFoundError):
            load_source(tmp_path / "missing.yml")

    def test_load_empty_fields(self, tmp_path):
        """Test that keys present with empty values read as empty strings."""
        source_file = tmp_path / "units.yml"
        source_file.write_text(textwrap.dedent("""\
            shops:
              human:
                - uid: armor_shop
                  name:
                  model:
                  sold:
                    - uid: custom_guard
                      icon:
                    - rawid: hfoo
                      model:
            stock_model_registry:
              hkni:
        """))

        data = load_source(source_file)
        shop = data.shops["human"][0]

        assert shop.name == ""
        assert shop.model == ""
        assert shop.sold[0].icon == ""
        assert shop.sold[1].model == ""
        assert data.stock_model_registry == {"hkni": ""}

        registries = transform_yarp_data(data, recorder=TelemetryRecorder())
        assert registries.unit.get(UnitIdentifier.new_custom("armor_shop")).model == ""

    def test_numeric_raw_code_in_model_table(self, tmp_path):
        """Test that unquoted numeric raw codes are rejected, not rewritten."""
        source_file = tmp_path / "units.yml"
        source_file.write_text("stock_model_registry:\n  0123: units/footman\n")

        with pytest.raises(SourceFormatError, match="quote it"):
            load_source(source_file)

    def test_quoted_numeric_raw_code_kept(self, tmp_path):
        """Test that quoted numeric raw codes keep their exact text."""
        source_file = tmp_path / "units.yml"
        source_file.write_text('stock_model_registry:\n  "0123": units/footman\n')

        assert list(load_source(source_file).stock_model_registry) == ["0123"]

    def test_load_invalid_yaml(self, tmp_path):
        """Test that invalid YAML raises a YAML error."""
        source_file = tmp_path / "broken.yml"
        source_file.write_text("shops: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_source(source_file)
