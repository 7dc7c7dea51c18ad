"""Consistency checks and ordering for field mapping lists.

Derived mappings read variables produced earlier in the list, so the list
order matters and reference cycles must be caught before extraction.
"""
from typing import Dict, List, Sequence, Set

from formula import FormulaSyntaxError, referenced_names, validate_formula
from schemas.diagnostics import MappingIssue
from schemas.enums import MappingType, WarningKind
from schemas.mapping import FieldMapping

from .computations import COMPUTATIONS
from .paths import PathSyntaxError, parse_path


def _active(mappings: Sequence[FieldMapping]) -> List[FieldMapping]:
    return [m for m in mappings if m.active]


def derived_references(mappings: Sequence[FieldMapping]) -> Dict[str, List[str]]:
    """target_field -> names referenced by its derived formula."""
    refs: Dict[str, List[str]] = {}
    for mapping in _active(mappings):
        if mapping.mapping_type != MappingType.DERIVED:
            continue
        try:
            refs[mapping.target_field] = referenced_names(mapping.derived_formula)
        except FormulaSyntaxError:
            refs[mapping.target_field] = []
    return refs


def derived_cycle_members(mappings: Sequence[FieldMapping]) -> Set[str]:
    """Targets of derived mappings that reach themselves through other derived mappings."""
    graph = derived_references(mappings)
    members: Set[str] = set()

    for start in graph:
        stack = list(graph[start])
        seen: Set[str] = set()
        while stack:
            name = stack.pop()
            if name == start:
                members.add(start)
                break
            if name in seen or name not in graph:
                continue
            seen.add(name)
            stack.extend(graph[name])

    return members


def order_mappings(mappings: Sequence[FieldMapping]) -> List[FieldMapping]:
    """Order mappings so every derived mapping follows what it references.

    Non-derived mappings keep their configured order and come first; derived
    mappings follow in dependency order. Mappings on a cycle go last.
    """
    active = _active(mappings)
    plain = [m for m in active if m.mapping_type != MappingType.DERIVED]
    derived = {m.target_field: m for m in active if m.mapping_type == MappingType.DERIVED}
    refs = derived_references(active)
    cyclic = derived_cycle_members(active)

    ordered: List[FieldMapping] = []
    placed: Set[str] = set()

    def visit(target: str) -> None:
        if target in placed or target in cyclic:
            return
        placed.add(target)
        for name in refs.get(target, []):
            if name in derived:
                visit(name)
        ordered.append(derived[target])

    for target in derived:
        visit(target)

    return plain + ordered + [derived[t] for t in derived if t in cyclic]


def validate_mappings(mappings: Sequence[FieldMapping]) -> List[MappingIssue]:
    """Report configuration problems in a mapping list.

    Checks duplicate targets, malformed paths, unknown computations, invalid
    or self-referencing derived formulas, and references to variables that are
    unknown or only produced later in the list.
    """
    issues: List[MappingIssue] = []
    active = _active(mappings)
    position = {}
    for index, mapping in enumerate(active):
        if mapping.target_field in position:
            issues.append(MappingIssue(
                target_field=mapping.target_field,
                kind=WarningKind.CONFIGURATION,
                message="Duplicate target field; the later mapping overwrites the earlier one",
            ))
        position[mapping.target_field] = index

    cyclic = derived_cycle_members(active)

    for index, mapping in enumerate(active):
        target = mapping.target_field

        if mapping.mapping_type == MappingType.DIRECT:
            for path in mapping.json_paths:
                try:
                    parse_path(path)
                except PathSyntaxError as e:
                    issues.append(MappingIssue(
                        target_field=target, kind=WarningKind.CONFIGURATION, message=str(e), references=[path],
                    ))

        elif mapping.mapping_type == MappingType.COMPUTED:
            if mapping.computation_id not in COMPUTATIONS:
                issues.append(MappingIssue(
                    target_field=target,
                    kind=WarningKind.CONFIGURATION,
                    message=f"Unknown computation '{mapping.computation_id}'",
                    references=[mapping.computation_id],
                ))

        elif mapping.mapping_type == MappingType.DERIVED:
            result = validate_formula(mapping.derived_formula)
            if not result.valid:
                issues.append(MappingIssue(
                    target_field=target, kind=WarningKind.SYNTAX, message=result.error,
                ))
                continue

            if target in cyclic:
                issues.append(MappingIssue(
                    target_field=target,
                    kind=WarningKind.CONFIGURATION,
                    message="Derived formula references itself (directly or through other derived mappings)",
                    references=result.variables,
                ))

            unknown = [v for v in result.variables if v not in position]
            if unknown:
                issues.append(MappingIssue(
                    target_field=target,
                    kind=WarningKind.UNRESOLVED_REFERENCE,
                    message=f"References unknown variable(s): {', '.join(unknown)}",
                    references=unknown,
                ))

            later = [v for v in result.variables if v in position and position[v] > index and v != target]
            if later and target not in cyclic:
                issues.append(MappingIssue(
                    target_field=target,
                    kind=WarningKind.CONFIGURATION,
                    message=f"References variable(s) configured after it: {', '.join(later)}",
                    references=later,
                ))

    return issues
