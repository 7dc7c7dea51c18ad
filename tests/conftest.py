"""Shared test fixtures and configuration."""
import copy
import json

import pytest

from schemas.template import BidTemplate
from schemas.variables import VariableTable

HOVER_PAYLOAD = {
    "roof": {
        "area": {"total": 1000},
        "measurements": {
            "ridges": 40,
            "hips": 20,
            "valleys": 30,
            "rakes": 120,
            "gutters_eaves": 150,
            "flashing": 16,
            "step_flashing": 24,
        },
    },
    "facades": {
        "vinyl_siding": [
            {"area": 600, "openings": {"openings_total": 3}, "shutters": 2},
            {"area": 400, "openings": {"openings_total": 1}},
        ],
        "brick": [{"area": 200}],
    },
    "openings": {
        "windows": [
            {"width_x_height": '36" x 60"', "united_inches": '96"', "area": 15},
            {"width_x_height": '36" x 60"', "united_inches": 96, "area": 15},
        ],
        "doors": [
            {"width_x_height": '36" x 84"', "area": 21},
        ],
    },
}

ROOF_TEMPLATE = {
    "id": "tpl-roof",
    "trade": "roof",
    "name": "Standard Roof",
    "waste_pct": 10,
    "bid_template_items": [
        {
            "id": "shingles",
            "section": "materials",
            "description": "Shingles",
            "unit": "SQ",
            "default_qty_formula": "(area/100)*waste",
            "sort_order": 1,
            "price_list": {"id": "pl-shingles", "unit": "SQ", "unit_price": 120.0},
        },
        {
            "id": "tearoff",
            "section": "labor",
            "description": "Tear Off",
            "unit": "SQ",
            "default_qty_formula": "{item:Shingles}",
            "depends_on_item_id": "shingles",
            "sort_order": 2,
        },
        {
            "id": "drip",
            "section": "materials",
            "description": "Drip Edge",
            "unit": "EA",
            "default_qty_formula": "(rakes+eaves)*1.15/10",
            "sort_order": 3,
        },
        {
            "id": "dumpster",
            "section": "materials",
            "description": "Dumpster",
            "unit": "EA",
            "default_qty": 1,
            "sort_order": 4,
            "price_list": {"id": "pl-dumpster", "unit_price": 450.0, "is_taxable": False},
        },
    ],
}


@pytest.fixture
def hover_payload():
    """Nested Hover measurement payload (fresh copy per test)."""
    return copy.deepcopy(HOVER_PAYLOAD)


@pytest.fixture
def roof_variables():
    """Variable table from the end-to-end roof example."""
    return VariableTable({"area": 1000, "rakes": 120, "eaves": 150})


@pytest.fixture
def roof_template():
    return BidTemplate.model_validate(copy.deepcopy(ROOF_TEMPLATE))


@pytest.fixture
def measurements_file(tmp_path, hover_payload):
    path = tmp_path / "measurements.json"
    path.write_text(json.dumps(hover_payload))
    return path


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.json"
    path.write_text(json.dumps(ROOF_TEMPLATE))
    return path
