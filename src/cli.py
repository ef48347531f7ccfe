"""Command-line interface for the composite construction calculators.

Usage::

    construction-mixte list
    construction-mixte template <name>
    construction-mixte calc <name> <input_yaml> [--json]
    construction-mixte report <name> <input_yaml> -o note.pdf
    construction-mixte tables [table]
    construction-mixte encode-emails <email>...
    construction-mixte check-email <email>
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from src.auth.allow_list import decode_allow_list, encode_allow_list, is_authorized
from src.codes.ec4 import get_code
from src.core.registry import CHAPTERS, calculators_for, get_calculator
from src.reports.pdf_generator import PDFReportGenerator, flatten_fields
from src.ui.runner import format_validation_errors
from src.utils.settings import configure_logging, load_settings


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="construction-mixte")
def main():
    """Composite construction (EN 1994-1-1) course calculators."""
    configure_logging()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _calculator(name: str):
    try:
        return get_calculator(name)
    except KeyError as exc:
        click.secho(str(exc.args[0]), fg="red", err=True)
        raise SystemExit(1) from exc


def _read_inputs(input_file: str) -> dict:
    try:
        with open(input_file, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        click.secho(f"YAML syntax error:\n  {exc}", fg="red", err=True)
        raise SystemExit(1) from exc
    if not isinstance(data, dict):
        click.secho("Input file does not contain a valid YAML mapping.", fg="red", err=True)
        raise SystemExit(1)
    return data


def _validate(calculator, data: dict):
    try:
        return calculator.validate(data)
    except ValidationError as exc:
        click.secho(f"Invalid inputs for {calculator.name}:", fg="red", err=True)
        for err in format_validation_errors(exc):
            click.secho(f"  - {err}", fg="red", err=True)
        raise SystemExit(1) from exc


_STATUS_COLORS = {"pass": "green", "fail": "red", "warning": "yellow", "not_checked": "blue"}


# ---------------------------------------------------------------------------
# list / template
# ---------------------------------------------------------------------------

@main.command("list")
def list_calculators() -> None:
    """List the calculators of each chapter."""
    for chapter, title in CHAPTERS.items():
        click.secho(title, bold=True)
        for calc in calculators_for(chapter):
            click.echo(f"  {calc.name:<22} {calc.title}")


@main.command()
@click.argument("name")
def template(name: str) -> None:
    """Print a sample input YAML for calculator NAME."""
    calculator = _calculator(name)
    click.echo(f"# {calculator.title}")
    click.echo(yaml.safe_dump(calculator.example, allow_unicode=True, sort_keys=False), nl=False)


# ---------------------------------------------------------------------------
# calc / report
# ---------------------------------------------------------------------------

@main.command()
@click.argument("name")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
def calc(name: str, input_file: str, as_json: bool) -> None:
    """Run calculator NAME on the inputs of INPUT_FILE."""
    calculator = _calculator(name)
    inputs = _validate(calculator, _read_inputs(input_file))
    output = calculator.run(inputs)

    if as_json:
        click.echo(output.model_dump_json(indent=2))
        return

    click.secho(f"{calculator.title} ({calculator.name})", bold=True)
    status = getattr(output, "status", None)
    if status is not None:
        click.secho(f"  {output.badge}", fg=_STATUS_COLORS[status.value])
    for warning in getattr(output, "warnings", []):
        click.secho(f"  ! {warning}", fg="yellow")

    click.echo("")
    rows = flatten_fields(output.model_dump(exclude={"status", "badge", "warnings",
                                                     "calculation_steps"}))
    for field, value in rows:
        click.echo(f"  {field:<28} {value}")

    steps = getattr(output, "calculation_steps", [])
    if steps:
        click.echo("\nCalculation steps:")
        for step in steps:
            click.echo(f"  {step.step_number:>2}. {step.description}")
            click.echo(f"      {step.formula} {step.substitution} = {step.result:g} {step.unit}".rstrip())


@main.command()
@click.argument("name")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False),
              help="PDF file to write.")
@click.option("--reader", default="", help="Identity printed in the page footer.")
def report(name: str, input_file: str, output: str, reader: str) -> None:
    """Write the PDF calculation note of calculator NAME."""
    calculator = _calculator(name)
    inputs = _validate(calculator, _read_inputs(input_file))
    result = calculator.run(inputs)
    pdf = PDFReportGenerator().generate_report(calculator, inputs, result, reader)

    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(pdf)
    click.secho(f"Calculation note written to {out_path}", fg="green")


# ---------------------------------------------------------------------------
# tables
# ---------------------------------------------------------------------------

@main.command()
@click.argument("table", required=False)
def tables(table: str | None) -> None:
    """List the reference tables, or the entries of TABLE."""
    code = get_code()
    if table is None:
        for name in code.TABLES:
            click.echo(f"{name:<18} {', '.join(code.table_keys(name))}")
        return
    try:
        keys = code.table_keys(table)
    except KeyError as exc:
        click.secho(f"{exc.args[0]}. Available: {', '.join(code.TABLES)}", fg="red", err=True)
        raise SystemExit(1) from exc
    for key in keys:
        click.echo(f"{key}: {code.table_entry(table, key)}")


# ---------------------------------------------------------------------------
# allow-list maintenance
# ---------------------------------------------------------------------------

@main.command("encode-emails")
@click.argument("emails", nargs=-1, required=True)
def encode_emails(emails: tuple[str, ...]) -> None:
    """Print the encoded allow-list for EMAILS (use @domain for a domain)."""
    click.echo(encode_allow_list(emails))


@main.command("check-email")
@click.argument("email")
def check_email(email: str) -> None:
    """Tell whether EMAIL may open a session with the configured list."""
    allow_list = decode_allow_list(load_settings().access.authorized_emails_encoded)
    if is_authorized(email, allow_list):
        click.secho(f"{email}: authorized", fg="green")
    else:
        click.secho(f"{email}: refused", fg="red")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
