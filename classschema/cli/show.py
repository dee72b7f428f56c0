"""CLI show command implementation.

This module implements the `classschema show` command, rendering the schema
of one managed class as rich tables, plain text or JSON.
"""

import json
import sys
import traceback
from typing import Any

from rich.console import Console
from rich.table import Table
import rich_click as click

from ..core.exceptions import ReflectionError
from ..core.schema import ClassSchema
from ..core.service import ReflectionService

# Create console for rich formatting - auto-detects if we're in interactive environment
console = Console()


def _should_use_rich_formatting(force_colors: bool = False) -> bool:
    """Determine if we should use rich formatting based on environment."""
    return force_colors or console.is_terminal


def _classification(data: dict[str, Any]) -> list[str]:
    labels = [
        ("entity", "entity"),
        ("value_object", "value object"),
        ("aggregate_root", "aggregate root"),
        ("singleton", "singleton"),
        ("controller", "controller"),
    ]
    return [label for key, label in labels if data[key]] or ["plain class"]


def _property_traits(prop: dict[str, Any]) -> str:
    traits = [prop["visibility"]]
    for key in ("static", "lazy", "transient", "inject"):
        if prop[key]:
            traits.append(key)
    if prop["cascade"]:
        traits.append(f"cascade={prop['cascade']}")
    return ", ".join(traits)


def _parameter_summary(parameter: dict[str, Any]) -> str:
    summary = f"{parameter['name']}: {parameter['type'] or '?'}"
    if parameter["optional"]:
        summary += " = " + repr(parameter["default_value"])
    if parameter["dependency"]:
        summary += " [inject]"
    if parameter["validators"]:
        names = ", ".join(validator["name"] for validator in parameter["validators"])
        summary += f" [validate: {names}]"
    if parameter["ignore_validation"]:
        summary += " [ignore validation]"
    return summary


def _method_traits(method: dict[str, Any]) -> str:
    traits = [method["visibility"]]
    for key in ("static", "abstract", "constructor", "action", "inject_method"):
        if method[key]:
            traits.append(key.replace("_", " "))
    return ", ".join(traits)


def _output_rich_format(data: dict[str, Any]) -> None:
    console.print(f"🧬 [bold cyan]{data['class_name']}[/bold cyan]")
    console.print()

    info_table = Table(show_header=False, box=None, padding=(0, 1))
    info_table.add_row(
        "[bold]Classification:[/bold]",
        f"[magenta]{', '.join(_classification(data))}[/magenta]",
    )
    info_table.add_row(
        "[bold]Constructor:[/bold]", "yes" if data["has_constructor"] else "no"
    )
    info_table.add_row(
        "[bold]Inject methods:[/bold]",
        ", ".join(data["inject_methods"]) or "[dim]none[/dim]",
    )
    console.print(info_table)
    console.print()

    properties_table = Table(title="Properties", title_justify="left")
    properties_table.add_column("Name", style="bold yellow")
    properties_table.add_column("Type", style="cyan")
    properties_table.add_column("Element type", style="cyan")
    properties_table.add_column("Traits")
    properties_table.add_column("Validators", style="green")
    for prop in data["properties"]:
        properties_table.add_row(
            prop["name"],
            prop["type"] or "[dim]-[/dim]",
            prop["element_type"] or "[dim]-[/dim]",
            _property_traits(prop),
            ", ".join(validator["name"] for validator in prop["validators"]),
        )
    console.print(properties_table)
    console.print()

    methods_table = Table(title="Methods", title_justify="left")
    methods_table.add_column("Name", style="bold yellow")
    methods_table.add_column("Traits")
    methods_table.add_column("Parameters", style="cyan")
    for method in data["methods"]:
        methods_table.add_row(
            method["name"],
            _method_traits(method),
            "\n".join(_parameter_summary(p) for p in method["parameters"]),
        )
    console.print(methods_table)


def _output_plain_format(data: dict[str, Any]) -> None:
    click.echo(f"Class: {data['class_name']}")
    click.echo(f"Classification: {', '.join(_classification(data))}")
    click.echo(f"Constructor: {'yes' if data['has_constructor'] else 'no'}")
    click.echo(f"Inject methods: {', '.join(data['inject_methods']) or 'none'}")
    click.echo()

    click.echo("Properties:")
    for prop in data["properties"]:
        type_name = prop["type"] or "?"
        if prop["element_type"]:
            type_name += f" of {prop['element_type']}"
        click.echo(f"  {prop['name']}: {type_name} ({_property_traits(prop)})")
        for validator in prop["validators"]:
            click.echo(f"    validate: {validator['name']}")
    click.echo()

    click.echo("Methods:")
    for method in data["methods"]:
        click.echo(f"  {method['name']}() ({_method_traits(method)})")
        for parameter in method["parameters"]:
            click.echo(f"    {_parameter_summary(parameter)}")


def _output_error(error: Exception, output_json: bool, error_type: str) -> None:
    if output_json:
        error_output = {
            "status": "error",
            "error_type": error_type,
            "message": str(error),
        }
        click.echo(json.dumps(error_output, indent=2))
    else:
        click.echo(f"❌ {error}")


@click.command("show")
@click.argument("class_name", metavar="CLASS")
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="📋 **Output JSON** instead of tables",
)
@click.option(
    "--force-colors",
    is_flag=True,
    help="🎨 **Force colored output** - useful for testing rich formatting",
    hidden=True,  # Hide from main help but available for testing
)
def show_command(class_name: str, output_json: bool, force_colors: bool) -> None:
    """🔍 **Show the schema of a class**

    Builds the schema of CLASS (``package.module.ClassName``) and prints its
    classification, properties and methods.

    **Examples:**

    ```bash
    classschema show blog.domain.model.Post          # Tables
    classschema show blog.domain.model:Post --json   # JSON output
    ```

    **Exit Codes:**
    - `0`: Schema built ✅
    - `1`: The class is unknown or its declaration is invalid ❌
    - `4`: Internal error 💥
    """
    try:
        schema: ClassSchema = ReflectionService().get_class_schema(class_name)
        data = schema.to_dict()
    except ReflectionError as e:
        _output_error(e, output_json, type(e).__name__)
        sys.exit(1)
    except Exception as e:
        _output_error(e, output_json, "internal_error")
        if not output_json:
            click.echo("\nFull traceback:")
            click.echo(traceback.format_exc())
        sys.exit(4)

    if output_json:
        click.echo(json.dumps(data, indent=2))
    elif _should_use_rich_formatting(force_colors):
        _output_rich_format(data)
    else:
        _output_plain_format(data)
