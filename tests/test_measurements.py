"""Tests for path access, computations and measurement extraction."""
import pytest
from pydantic import ValidationError

from measurements import (
    COMPUTATIONS,
    PathSyntaxError,
    default_mappings,
    extract,
    extract_with_report,
    load_mappings,
    measurement_variables,
    order_mappings,
    parse_mappings,
    resolve_path,
    run_computation,
    to_number,
    validate_mappings,
)
from schemas.enums import MappingType, WarningKind
from schemas.mapping import FieldMapping


def direct(target, paths, default=0.0, **kwargs):
    return FieldMapping(target_field=target, mapping_type="direct", json_paths=paths, default_value=default, **kwargs)


def derived(target, formula, default=0.0):
    return FieldMapping(target_field=target, mapping_type="derived", derived_formula=formula, default_value=default)


class TestToNumber:
    def test_numbers_and_strings(self):
        assert to_number(3) == 3.0
        assert to_number(2.5) == 2.5
        assert to_number(" 12.5 ") == 12.5

    def test_absent_values(self):
        assert to_number(None) is None
        assert to_number(True) is None
        assert to_number("n/a") is None
        assert to_number(float("nan")) is None
        assert to_number(float("inf")) is None
        assert to_number({"a": 1}) is None
        assert to_number([1]) is None


class TestResolvePath:
    def test_plain_keys(self, hover_payload):
        assert resolve_path(hover_payload, "roof.measurements.ridges") == 40

    def test_missing(self, hover_payload):
        assert resolve_path(hover_payload, "roof.measurements.nope") is None
        assert resolve_path(hover_payload, "roof.measurements.ridges.deeper") is None

    def test_non_numeric_leaf(self, hover_payload):
        assert resolve_path(hover_payload, "roof.measurements") is None

    def test_index(self, hover_payload):
        assert resolve_path(hover_payload, "openings.windows[1].area") == 15
        assert resolve_path(hover_payload, "openings.doors[-1].area") == 21
        assert resolve_path(hover_payload, "openings.doors[5].area") is None

    def test_numeric_key_indexes_sequence(self, hover_payload):
        assert resolve_path(hover_payload, "facades.vinyl_siding.1.area") == 400

    def test_sum(self, hover_payload):
        assert resolve_path(hover_payload, "facades.vinyl_siding[*].area") == 1000
        assert resolve_path(hover_payload, "facades.*[*].area") == 1200

    def test_sum_with_nothing_found(self, hover_payload):
        assert resolve_path(hover_payload, "facades.brick[*].shutters") is None

    def test_first(self, hover_payload):
        assert resolve_path(hover_payload, "facades.vinyl_siding[?].shutters") == 2

    @pytest.mark.parametrize("path", ["", "a..b", "a[x]", "a[1"])
    def test_malformed(self, path):
        with pytest.raises(PathSyntaxError):
            resolve_path({}, path)


class TestComputations:
    def test_registry_is_closed(self):
        with pytest.raises(TypeError):
            COMPUTATIONS["evil"] = None

    def test_roof_area(self, hover_payload):
        assert run_computation("roof_area", hover_payload) == 1000

    def test_roof_area_from_facets(self):
        raw = {"roof": {"facets": [{"area": 300}, {"area": "200"}, {"area": None}]}}
        assert run_computation("roof_area", raw) == 500

    def test_facades(self, hover_payload):
        assert run_computation("facade_total_area", hover_payload) == 1200
        assert run_computation("facade_openings_total", hover_payload) == 4
        assert run_computation("facade_shutters", hover_payload) == 2

    def test_openings(self, hover_payload):
        # windows: 2 * (36 + 60) / 12 = 16 each; door: 2 * (36 + 84) / 12 = 20
        assert run_computation("openings_perimeter", hover_payload) == pytest.approx(52)
        assert run_computation("openings_area", hover_payload) == 51
        assert run_computation("window_count", hover_payload) == 2
        assert run_computation("door_count", hover_payload) == 1
        assert run_computation("window_united_inches", hover_payload) == 192

    def test_nothing_found(self):
        assert run_computation("roof_area", {}) is None
        assert run_computation("openings_perimeter", {"openings": "bad"}) is None
        assert run_computation("facade_total_area", None) is None

    def test_unknown(self, hover_payload):
        assert run_computation("nope", hover_payload) is None


class TestFieldMapping:
    def test_pipe_separated_paths(self):
        mapping = direct("x", "a.b | a.c|")
        assert mapping.json_paths == ["a.b", "a.c"]

    def test_null_default(self):
        mapping = FieldMapping(target_field="x", mapping_type="manual", default_value=None)
        assert mapping.default_value == 0

    @pytest.mark.parametrize("record", [
        {"target_field": "x", "mapping_type": "direct"},
        {"target_field": "x", "mapping_type": "computed"},
        {"target_field": "x", "mapping_type": "derived", "derived_formula": "  "},
        {"target_field": "x", "mapping_type": "manual", "derived_formula": "{a}"},
        {"target_field": "x", "mapping_type": "direct", "json_paths": "a", "computation_id": "roof_area"},
        {"target_field": "", "mapping_type": "manual"},
        {"target_field": "x", "mapping_type": "guess"},
    ])
    def test_inconsistent_records_rejected(self, record):
        with pytest.raises(ValidationError):
            FieldMapping.model_validate(record)


class TestExtract:
    def test_fallback_chain(self):
        mappings = [direct("x", "a.b|a.c", default=5)]
        assert extract({"a": {"c": 7}}, mappings)["x"] == 7
        assert extract({"a": {"b": 3, "c": 7}}, mappings)["x"] == 3
        assert extract({}, mappings)["x"] == 5

    def test_zero_is_present(self):
        mappings = [direct("x", "a.b|a.c", default=5)]
        assert extract({"a": {"b": 0, "c": 7}}, mappings)["x"] == 0

    def test_non_numeric_falls_through(self):
        mappings = [direct("x", "a.b|a.c", default=5)]
        assert extract({"a": {"b": "n/a", "c": "3"}}, mappings)["x"] == 3

    def test_default_mappings(self, hover_payload):
        variables = extract(hover_payload)
        assert variables["area"] == 1000
        assert variables["ridges"] == 40
        assert variables["eaves"] == 150
        assert variables["stepFlashing"] == 24
        assert variables["sidingArea"] == 1200
        assert variables["openingsPerimeter"] == pytest.approx(52)
        assert variables["openingsSills"] == pytest.approx(13)
        assert variables["ridgeVentLength"] == 0

    def test_no_measurements(self):
        variables = extract(None)
        assert variables["area"] == 0
        assert len(variables) == len(default_mappings())

    def test_inactive_mappings_skipped(self):
        mappings = [direct("x", "a", active=False), direct("y", "a")]
        variables = extract({"a": 1}, mappings)
        assert "x" not in variables
        assert variables["y"] == 1

    def test_derived_uses_earlier_values(self):
        mappings = [direct("a", "a"), derived("b", "{a} * 2"), derived("c", "b + 1")]
        variables = extract({"a": 4}, mappings)
        assert variables["b"] == 8
        assert variables["c"] == 9

    def test_derived_unresolved_warns(self):
        report = extract_with_report({}, [derived("b", "{nope} + 1")])
        assert report.variables["b"] == 1
        assert [w.kind for w in report.warnings] == [WarningKind.UNRESOLVED_REFERENCE]

    def test_derived_syntax_error_uses_default(self):
        report = extract_with_report({}, [derived("b", "{a} +", default=4)])
        assert report.variables["b"] == 4
        assert report.warnings[0].kind == WarningKind.SYNTAX
        assert report.sources["b"].used_default

    def test_derived_cycle_uses_defaults(self):
        mappings = [derived("x", "{y} + 1", default=2), derived("y", "{x} + 1", default=3)]
        report = extract_with_report({}, mappings)
        assert report.variables["x"] == 2
        assert report.variables["y"] == 3
        assert {w.kind for w in report.warnings} == {WarningKind.CONFIGURATION}
        assert sorted(report.defaulted) == ["x", "y"]

    def test_malformed_path_warns_and_continues(self):
        report = extract_with_report({"a": {"c": 2}}, [direct("x", "a[x]|a.c")])
        assert report.variables["x"] == 2
        assert report.warnings[0].kind == WarningKind.CONFIGURATION

    def test_sources(self, hover_payload):
        report = extract_with_report(hover_payload)
        assert report.sources["eaves"].detail == "roof.measurements.gutters_eaves"
        assert report.sources["area"].mapping_type == MappingType.COMPUTED
        assert report.sources["ridgeVentLength"].used_default

    def test_table_is_read_only(self, hover_payload):
        variables = extract(hover_payload)
        with pytest.raises(TypeError):
            variables["area"] = 5
        assert variables.value("missing") == 0


class TestMappingConfig:
    def test_default_mappings_are_fresh(self):
        first = default_mappings()
        first.clear()
        assert default_mappings()

    def test_default_mappings_are_valid(self):
        assert validate_mappings(default_mappings()) == []

    def test_parse_mappings_wrapper(self):
        mappings = parse_mappings({"mappings": [{"target_field": "x", "mapping_type": "manual"}]})
        assert [m.target_field for m in mappings] == ["x"]

    def test_load_mappings_yaml(self, tmp_path):
        path = tmp_path / "mappings.yaml"
        path.write_text(
            "- target_field: ridges\n"
            "  mapping_type: direct\n"
            "  json_paths: roof.ridges|roof.ridge_length\n"
            "  default_value: 0\n"
        )
        mappings = load_mappings(path)
        assert mappings[0].json_paths == ["roof.ridges", "roof.ridge_length"]

    def test_measurement_variables(self):
        roof = measurement_variables("roof")
        assert "area" in [v.key for v in roof["roof"]]
        assert measurement_variables("nope") == {"nope": []}
        assert "siding" in measurement_variables()


class TestValidateMappings:
    def test_unknown_computation(self):
        mappings = [FieldMapping(target_field="x", mapping_type="computed", computation_id="nope")]
        issues = validate_mappings(mappings)
        assert len(issues) == 1
        assert issues[0].kind == WarningKind.CONFIGURATION

    def test_bad_path(self):
        issues = validate_mappings([direct("x", "a[x]")])
        assert issues[0].references == ["a[x]"]

    def test_duplicate_target(self):
        issues = validate_mappings([direct("x", "a"), direct("x", "b")])
        assert "Duplicate" in issues[0].message

    def test_syntax_error(self):
        issues = validate_mappings([derived("x", "{a} +")])
        assert issues[0].kind == WarningKind.SYNTAX

    def test_unknown_reference(self):
        issues = validate_mappings([derived("x", "{nope} * 2")])
        assert issues[0].kind == WarningKind.UNRESOLVED_REFERENCE
        assert issues[0].references == ["nope"]

    def test_reference_configured_later(self):
        issues = validate_mappings([derived("b", "{a} * 2"), direct("a", "a")])
        assert len(issues) == 1
        assert issues[0].references == ["a"]

    def test_cycle(self):
        issues = validate_mappings([derived("x", "{y}"), derived("y", "{x}")])
        assert {i.target_field for i in issues} == {"x", "y"}
        assert all(i.kind == WarningKind.CONFIGURATION for i in issues)

    def test_self_reference(self):
        issues = validate_mappings([derived("x", "{x} + 1")])
        assert len(issues) == 1
        assert issues[0].kind == WarningKind.CONFIGURATION


class TestOrderMappings:
    def test_derived_after_dependencies(self):
        mappings = [derived("c", "{b} + 1"), derived("b", "{a} * 2"), direct("a", "a")]
        ordered = [m.target_field for m in order_mappings(mappings)]
        assert ordered == ["a", "b", "c"]
        assert extract({"a": 2}, order_mappings(mappings))["c"] == 5

    def test_cycle_members_last(self):
        mappings = [derived("x", "{y}"), derived("y", "{x}"), direct("a", "a")]
        assert [m.target_field for m in order_mappings(mappings)] == ["a", "x", "y"]
