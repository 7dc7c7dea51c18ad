"""Tests for shared schema models."""
import pytest
from pydantic import ValidationError

from schemas import (
    BidTemplate,
    FieldMapping,
    FormulaWarning,
    MappingType,
    PriceListLink,
    QtySource,
    ResolvedLineItem,
    Section,
    TemplateItem,
    VariableTable,
    WarningKind,
)


class TestVariableTable:
    def test_mapping_behaviour(self):
        table = VariableTable({"a": 1, "b": "2.5"})
        assert table["a"] == 1.0
        assert table["b"] == 2.5
        assert set(table) == {"a", "b"}
        assert len(table) == 2
        assert table.get("missing") is None

    def test_value_defaults_to_zero(self):
        table = VariableTable({"a": 1})
        assert table.value("missing") == 0.0
        assert table.value("missing", 7) == 7

    def test_unknown_key_raises(self):
        with pytest.raises(KeyError):
            VariableTable()["missing"]

    def test_non_finite_values_become_zero(self):
        table = VariableTable({"a": float("inf"), "b": float("nan")})
        assert table.to_dict() == {"a": 0.0, "b": 0.0}

    def test_immutable(self):
        table = VariableTable({"a": 1})
        with pytest.raises(TypeError):
            table["a"] = 2
        with pytest.raises(AttributeError):
            table.extra = 1


class TestTemplateModels:
    def test_alias_and_field_name(self):
        data = {"id": "t", "trade": "roof", "name": "Roof"}
        by_alias = BidTemplate.model_validate({**data, "bid_template_items": [
            {"id": "i", "section": "materials", "description": "Shingles"},
        ]})
        by_name = BidTemplate.model_validate({**data, "items": [
            {"id": "i", "section": "materials", "description": "Shingles"},
        ]})
        assert by_alias.items == by_name.items

    def test_item_defaults(self):
        item = TemplateItem(id="i", section="labor", description="Tear Off")
        assert item.section == Section.LABOR
        assert item.unit == "EA"
        assert item.sort_order == 0
        assert not item.has_formula
        assert not TemplateItem(id="i", section="labor", description="x", default_qty_formula="  ").has_formula

    def test_invalid_section(self):
        with pytest.raises(ValidationError):
            TemplateItem(id="i", section="overhead", description="x")

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            BidTemplate(id="t", trade="roof", name="Roof", waste_pct=-5)
        with pytest.raises(ValidationError):
            PriceListLink(id="p", unit_price=-1)

    def test_resolved_line_item_serializes(self):
        line_item = ResolvedLineItem(
            template_item_id="i",
            section=Section.MATERIALS,
            description="Shingles",
            unit="SQ",
            qty=11,
            qty_source=QtySource.FORMULA,
        )
        dumped = line_item.model_dump(mode="json")
        assert dumped["section"] == "materials"
        assert dumped["qty_source"] == "formula"
        assert dumped["is_taxable"] is False


class TestDiagnostics:
    def test_warning_str(self):
        warning = FormulaWarning(
            kind=WarningKind.SYNTAX, message="Unexpected end of expression", item_description="Drip Edge",
        )
        assert str(warning) == "[syntax] Drip Edge: Unexpected end of expression"

    def test_warning_str_without_item(self):
        warning = FormulaWarning(kind=WarningKind.CONFIGURATION, message="Cycle")
        assert str(warning) == "[configuration] Cycle"


class TestFieldMappingKinds:
    def test_each_kind(self):
        assert FieldMapping(target_field="a", mapping_type="direct", json_paths=["x"]).mapping_type \
            == MappingType.DIRECT
        assert FieldMapping(target_field="a", mapping_type="computed", computation_id="roof_area").computation_id \
            == "roof_area"
        assert FieldMapping(target_field="a", mapping_type="derived", derived_formula="{b}").derived_formula == "{b}"
        assert FieldMapping(target_field="a", mapping_type="manual", default_value=3).default_value == 3
