"""Tests for the code-defined waste library."""
import pytest

from schemas.enums import MaterialVariant, Section
from schemas.variables import VariableTable
from waste import (
    WasteCalcConfig,
    WasteInputs,
    calculate_waste,
    library_quantity,
    parse_library_key,
)


def by_description(items):
    return {item.description: item for item in items}


@pytest.fixture
def roof_inputs():
    return WasteInputs(area=1000, ridges=40, hips=20, valleys=30, rakes=120, eaves=150, flashing=16, step_flashing=24)


@pytest.fixture
def siding_inputs():
    return WasteInputs(
        siding_area=1200,
        outside_corners=4,
        inside_corners=2,
        openings_perimeter=52,
        sloped_trim=30,
        vertical_trim=100,
        level_frieze=40,
        openings_sills=13,
        level_starter=90,
        openings_top=20,
        block_count=3,
    )


class TestWasteInputs:
    def test_from_variables(self):
        inputs = WasteInputs.from_variables(
            VariableTable({"area": 1000, "stepFlashing": 24, "sidingArea": 800, "unrelated": 5}),
            steep_areas={"8/12": 400},
        )
        assert inputs.area == 1000
        assert inputs.step_flashing == 24
        assert inputs.siding_area == 800
        assert inputs.steep_areas == {"8/12": 400}
        assert inputs.ridges == 0

    def test_camel_case_aliases(self):
        inputs = WasteInputs.model_validate({"ridgeVentLength": 28, "gutterDownCount": 3})
        assert inputs.ridge_vent_length == 28
        assert inputs.gutter_down_count == 3


class TestWasteCalcConfig:
    def test_defaults(self):
        config = WasteCalcConfig()
        assert (config.waste_pct_roof, config.waste_pct_siding, config.waste_pct_fascia) == (10, 25, 15)
        assert config.material_variant == MaterialVariant.VINYL

    def test_with_trade_waste(self):
        config = WasteCalcConfig()
        assert config.with_trade_waste("roof", 20).waste_pct_roof == 20
        assert config.with_trade_waste("fascia_soffit", 5).waste_pct_fascia == 5
        assert config.with_trade_waste("gutters", 50) == config
        assert config.waste_pct_roof == 10


class TestRoofing:
    def test_materials(self, roof_inputs):
        items = by_description(calculate_waste(roof_inputs, WasteCalcConfig(), "roof"))
        assert items["Shingles"].qty == 11
        assert items["Shingles"].unit == "SQ"
        assert items["Shingles"].formula == "(1000 / 100) * 1.10"
        assert items["Standard Starter"].qty == 3        # 270 / 116 = 2.33
        assert items["Standard Ridge Cap"].qty == 3      # 60 * 1.15 / 30 = 2.3
        assert items["Ice & Water Shield"].qty == 3      # 180 * 1.1 / 67 = 2.96
        assert items["Synthetic Felt"].qty == 1
        assert items["Drip Edge"].qty == 32
        assert items["Flashing (L)"].qty == 3            # 16 * 1.1 / 8 = 2.2
        assert items["Step Flashing"].qty == 1
        assert items["Coil Nails"].qty == 1              # ceil(71.4) / 100

    def test_labor(self, roof_inputs):
        items = by_description(calculate_waste(roof_inputs, WasteCalcConfig(), "roof"))
        assert items["Tear Off & Install Shingles"].qty == 13   # 11 + 3/3 + 3/3
        assert items["Tear Off & Install Shingles"].section == Section.LABOR
        assert items["Install I&W Shield"].qty == 180
        assert items["Install Drip Edge"].qty == 270

    def test_materials_before_labor(self, roof_inputs):
        sections = [item.section for item in calculate_waste(roof_inputs, WasteCalcConfig(), "roof")]
        assert sections == sorted(sections, key=lambda s: s != Section.MATERIALS)

    def test_zero_drivers_omitted(self, roof_inputs):
        items = by_description(calculate_waste(roof_inputs, WasteCalcConfig(), "roof"))
        assert "Ridge Vent" not in items
        assert "Install Ridge Vent" not in items

    def test_empty_roof_lists_shingles_only(self):
        items = calculate_waste(WasteInputs(), WasteCalcConfig(), "roof")
        assert [(i.description, i.qty) for i in items] == [("Shingles", 0)]

    def test_ridge_vent(self):
        items = by_description(calculate_waste(WasteInputs(ridge_vent_length=30), WasteCalcConfig(), "roof"))
        assert items["Ridge Vent"].qty == 2
        assert items["Install Ridge Vent"].qty == 30

    def test_steep_fee(self):
        inputs = WasteInputs(area=1000, steep_areas={"8/12": 400, "10/12": 0})
        items = by_description(calculate_waste(inputs, WasteCalcConfig(), "roof"))
        assert items["Steep Fee (8/12)"].qty == 5          # 4 * 1.1 = 4.4
        assert items["Steep Fee Labor (8/12)"].qty == 5
        assert "Steep Fee (10/12)" not in items


class TestSiding:
    def test_vinyl(self, siding_inputs):
        items = by_description(calculate_waste(siding_inputs, WasteCalcConfig(), "siding"))
        assert items["Vinyl Siding"].qty == 15             # 12 * 1.25
        assert items["Outside Corner Posts"].qty == 4
        assert items["J-Channel (Openings)"].qty == 7      # 5.2 * 1.25 = 6.5
        assert items["J-Channel (Trim)"].qty == 4          # 3 * 1.25 = 3.75
        assert items["Finish Trim"].qty == 6               # 53 / 12.5 * 1.25 = 5.3
        assert items["Lineal (Openings)"].qty == 4         # 2.6 * 1.25 = 3.25
        assert items["Starter Strip"].qty == 9
        assert items["Trim Coil"].qty == 1
        assert items["Siding Nails"].qty == 3
        assert items["OSA Quad Sealant"].qty == 5
        assert items["Housewrap"].qty == 2
        assert "Hardie Siding" not in items
        assert "Touch Up Paint" not in items

    def test_vinyl_labor(self, siding_inputs):
        items = by_description(calculate_waste(siding_inputs, WasteCalcConfig(), "siding"))
        assert items["Install Siding"].qty == 15
        assert items["Remove Siding"].qty == 15
        assert items["Lineal Install"].qty == 80
        assert items["Custom Flashing"].qty == 150

    def test_hardie(self, siding_inputs):
        config = WasteCalcConfig(material_variant="hardie")
        items = by_description(calculate_waste(siding_inputs, config, "siding"))
        assert items["Hardie Siding"].qty == 15
        assert items["Outside Corner Posts"].qty == 8
        assert items["PVC Starter Board"].qty == 5         # 90 / 18
        assert items["Coil for Z-Flashing"].qty == 2       # 150 / 150 * 1.25
        assert items["8\" Trim for Blocks"].qty == 1
        assert items["Touch Up Paint"].qty == 2
        assert items["Adfast Caulk"].qty == 5
        assert items["Custom Flashing"].qty == 300
        assert "Vinyl Siding" not in items
        assert "Trim Coil" not in items


class TestExterior:
    def test_fascia_soffit(self):
        inputs = WasteInputs(rakes=120, eaves=150, soffit_sf=200, porch_soffit=64)
        items = by_description(calculate_waste(inputs, WasteCalcConfig(), "fascia_soffit"))
        assert items['Fascia 6" Pre-Bent (Rakes)'].qty == 12     # 10 * 1.15 = 11.5
        assert items['Fascia 6" Pre-Bent (Eaves)'].qty == 15     # 12.5 * 1.15 = 14.375
        assert items["Trim Coil (Custom Fascia)"].qty == 4       # 270 * 1.15 / 100
        assert items["Aluminum Soffit Q4"].qty == 15             # 1.15 * 200 / 16 = 14.375
        assert items["Porch Soffit"].qty == 5                    # 1.15 * 64 / 16 = 4.6
        assert items["F-Channel"].qty == 24                      # 270 * 1.05 / 12 = 23.625
        assert items["Trim Nails"].qty == 2
        assert items["Sealant"].qty == 2

    def test_gutters(self):
        items = by_description(calculate_waste(WasteInputs(eaves=150, gutter_down_count=4), WasteCalcConfig(), "gutters"))
        assert items["Gutter Length"].qty == 158
        assert items["Gutter Downs"].qty == 60
        assert items["Gutter Guards"].qty == 158

    def test_unknown_trade(self, roof_inputs):
        assert calculate_waste(roof_inputs, WasteCalcConfig(), "decking") == []


class TestLibraryQuantity:
    def test_lookup(self, roof_inputs):
        assert library_quantity("roof", "Drip Edge", roof_inputs, WasteCalcConfig()) == 32
        assert library_quantity("roof", "drip edge", roof_inputs, WasteCalcConfig()) == 32

    def test_item_not_produced(self, roof_inputs):
        assert library_quantity("roof", "Ridge Vent", roof_inputs, WasteCalcConfig()) == 0

    def test_unknown_trade(self, roof_inputs):
        assert library_quantity("decking", "Boards", roof_inputs, WasteCalcConfig()) is None

    def test_parse_library_key(self):
        assert parse_library_key("roof:Drip Edge") == ("roof", "Drip Edge")
        assert parse_library_key("Drip Edge", "roof") == ("roof", "Drip Edge")
        assert parse_library_key('siding:8" Trim for Blocks') == ("siding", '8" Trim for Blocks')
        assert parse_library_key("Note: see plan", "roof") == ("roof", "Note: see plan")
