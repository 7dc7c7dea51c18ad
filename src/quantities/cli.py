"""CLI for the bid quantity engine."""
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from formula import evaluate_expression, validate_formula
from measurements import default_mappings, extract_with_report, load_mappings, validate_mappings
from schemas.enums import MaterialVariant, Trade
from schemas.mapping import FieldMapping
from templates import apply_template, load_template, validate_template
from waste import WasteInputs, calculate_waste

from .config import load_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

console = Console()

VARIANTS = [v.value for v in MaterialVariant]
TRADES = [t.value for t in Trade]


def _load_measurements(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _mappings(path: Optional[Path]) -> List[FieldMapping]:
    return load_mappings(path) if path else default_mappings()


def _parse_assignments(assignments: Tuple[str, ...]) -> Dict[str, float]:
    """Parse ``name=value`` pairs from --var options."""
    values: Dict[str, float] = {}
    for assignment in assignments:
        name, sep, raw = assignment.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected name=value, got {assignment!r}", param_hint="--var")
        try:
            values[name.strip()] = float(raw)
        except ValueError:
            raise click.BadParameter(f"Not a number: {raw!r}", param_hint="--var")
    return values


def _print_warnings(warnings) -> None:
    if not warnings:
        return
    console.print(f"\n[yellow]Warnings ({len(warnings)}):[/yellow]")
    for warning in warnings:
        console.print(f"  - {warning}", markup=False)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Engine settings YAML (default: bundled settings.yaml)"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, settings_path, verbose):
    """Formula-driven bid quantity engine."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.obj = load_settings(settings_path)


@cli.command()
@click.argument("expression")
@click.option("--var", "assignments", multiple=True, help="Variable as name=value (repeatable)")
@click.pass_obj
def evaluate(settings, expression, assignments):
    """Evaluate EXPRESSION; undefined variables count as 0."""
    variables = _parse_assignments(assignments)
    result = evaluate_expression(expression, variables, max_depth=settings.max_formula_depth)
    click.echo(f"{result.value:g}")
    if result.error:
        click.echo(f"Error: {result.error}", err=True)
    if result.unresolved:
        click.echo(f"Unresolved: {', '.join(result.unresolved)}", err=True)


@cli.command()
@click.argument("expression")
@click.option("--known", multiple=True, help="Variable name the formula may use (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_obj
def validate(settings, expression, known, as_json):
    """Validate EXPRESSION without evaluating it against real data."""
    result = validate_formula(expression, known or None, max_depth=settings.max_formula_depth)
    if as_json:
        _echo_json(result.to_dict())
    elif result.valid:
        click.echo("Valid")
        if result.variables:
            click.echo(f"Variables: {', '.join(result.variables)}")
    else:
        click.echo(f"Invalid: {result.error}")
    if not result.valid:
        sys.exit(1)


@cli.command()
@click.argument("measurements_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--mappings",
    "mappings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Field mappings YAML/JSON (default: bundled mappings)"
)
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
def extract(measurements_path, mappings_path, as_json):
    """Extract the variable table from a Hover measurements JSON file."""
    report = extract_with_report(_load_measurements(measurements_path), _mappings(mappings_path))

    if as_json:
        _echo_json({
            "variables": report.variables.to_dict(),
            "sources": {name: src.to_dict() for name, src in report.sources.items()},
            "warnings": [w.model_dump(mode="json") for w in report.warnings],
        })
        return

    table = Table(title=f"Measurement Variables ({measurements_path.name})")
    table.add_column("Variable", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Kind")
    table.add_column("Source")
    for name, value in report.variables.items():
        src = report.sources[name]
        source = "default" if src.used_default else (src.detail or "")
        table.add_row(name, f"{value:g}", src.mapping_type.value, source)
    console.print(table)
    _print_warnings(report.warnings)


@cli.command()
@click.argument("template_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("measurements_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--mappings",
    "mappings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Field mappings YAML/JSON (default: bundled mappings)"
)
@click.option("--waste-pct", type=float, default=None, help="Waste percentage (default: template waste_pct)")
@click.option("--margin-pct", type=float, default=None, help="Margin percentage for every line")
@click.option("--variant", type=click.Choice(VARIANTS), default=None, help="Material variant")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_obj
def apply(settings, template_path, measurements_path, mappings_path, waste_pct, margin_pct, variant, as_json):
    """Apply a bid template to Hover measurements."""
    template = load_template(template_path)
    report = extract_with_report(_load_measurements(measurements_path), _mappings(mappings_path))

    application = apply_template(
        template,
        report.variables,
        waste_pct=waste_pct,
        margin_pct=margin_pct if margin_pct is not None else settings.default_margin_pct,
        material_variant=variant or settings.material_variant.value,
        max_depth=settings.max_formula_depth,
    )
    warnings = report.warnings + application.warnings
    logger.info(f"Resolved {len(application)} line items from template {template.name!r}")

    if as_json:
        _echo_json({
            "line_items": [li.model_dump(mode="json") for li in application],
            "warnings": [w.model_dump(mode="json") for w in warnings],
            "broken_dependencies": [list(edge) for edge in application.broken_dependencies],
        })
        return

    table = Table(title=f"{template.name} ({template.trade})")
    table.add_column("Section")
    table.add_column("Description", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Unit")
    table.add_column("Source")
    table.add_column("Formula")
    for li in application:
        table.add_row(li.section.value, li.description, f"{li.qty:g}", li.unit, li.qty_source.value,
                      li.qty_formula or "")
    console.print(table)
    _print_warnings(warnings)


@cli.command()
@click.argument("trade", type=click.Choice(TRADES))
@click.argument("measurements_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--mappings",
    "mappings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Field mappings YAML/JSON (default: bundled mappings)"
)
@click.option("--variant", type=click.Choice(VARIANTS), default=None, help="Material variant")
@click.option("--waste-pct", type=float, default=None, help="Waste percentage for TRADE")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_obj
def waste(settings, trade, measurements_path, mappings_path, variant, waste_pct, as_json):
    """Run the code-defined waste library for TRADE."""
    variables = extract_with_report(_load_measurements(measurements_path), _mappings(mappings_path)).variables
    config = settings.waste_config(variant)
    if waste_pct is not None:
        config = config.with_trade_waste(trade, waste_pct)

    items = calculate_waste(WasteInputs.from_variables(variables), config, trade)

    if as_json:
        _echo_json([item.model_dump(mode="json") for item in items])
        return

    table = Table(title=f"Waste Calculator ({trade}, {config.material_variant.value})")
    table.add_column("Section")
    table.add_column("Description", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Unit")
    table.add_column("Formula")
    for item in items:
        table.add_row(item.section.value, item.description, f"{item.qty:g}", item.unit, item.formula)
    console.print(table)


@cli.command("check-template")
@click.argument("template_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--mappings",
    "mappings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Mappings whose target fields are the known variables"
)
def check_template(template_path, mappings_path):
    """Validate a bid template; exit code 1 when problems are found."""
    template = load_template(template_path)
    known = [m.target_field for m in _mappings(mappings_path) if m.active]
    warnings = validate_template(template, known)

    if not warnings:
        click.echo(f"{template.name}: OK ({len(template.items)} items)")
        return
    click.echo(f"{template.name}: {len(warnings)} problem(s)")
    for warning in warnings:
        click.echo(f"  - {warning}")
    sys.exit(1)


@cli.command("check-mappings")
@click.argument("mappings_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check_mappings(mappings_path):
    """Validate a field mapping file; exit code 1 when problems are found."""
    mappings = load_mappings(mappings_path)
    issues = validate_mappings(mappings)

    if not issues:
        click.echo(f"OK ({len(mappings)} mappings)")
        return
    click.echo(f"{len(issues)} problem(s)")
    for issue in issues:
        click.echo(f"  - [{issue.kind.value}] {issue.target_field}: {issue.message}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
