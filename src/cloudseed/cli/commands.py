"""Command implementations for CLI."""

import base64
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from ruamel.yaml.error import YAMLError

from cloudseed.cli.runtime import Runtime
from cloudseed.config import read_yaml
from cloudseed.errors import AlreadyExistsError, ParseError
from cloudseed.models.template import DeploymentDescription, GeneratedTemplate
from cloudseed.templates.bundle import SCRIPT_SUFFIX
from cloudseed.templates.executor import TemplateExecutor
from cloudseed.templates.injector import script_destination


console = Console()


def load_description(description_file: Path) -> DeploymentDescription:
    """Read a deployment description from a YAML or JSON file."""
    try:
        data = read_yaml(description_file)
    except YAMLError as e:
        raise ParseError(f"failed to parse {description_file}: {e}") from e

    try:
        return DeploymentDescription.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"invalid deployment description {description_file}: {e}") from e


def _ensure_template(runtime: Runtime, description: DeploymentDescription) -> GeneratedTemplate:
    store = runtime.store
    try:
        return store.create(description)
    except AlreadyExistsError:
        return store.get(description.id)


def _print_description(template: GeneratedTemplate):
    desc = template.description
    console.print(f"[bold cyan]{escape(desc.name)}[/bold cyan] ({desc.id})")
    if desc.description:
        console.print(desc.description, markup=False)

    if desc.parameters:
        table = Table(title="Parameters")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        for name, text in desc.parameters.items():
            table.add_row(name, escape(text))
        console.print(table)


def generate_template(runtime: Runtime, description_file: Path):
    """Generate a template and show its description and content."""
    template = _ensure_template(runtime, load_description(description_file))

    _print_description(template)
    console.print()
    console.print(Syntax(template.content, "yaml", theme="ansi_dark"))


def render_user_data(
    runtime: Runtime,
    description_file: Path,
    parameters: str = "{}",
    decode: bool = False,
):
    """Generate a template, execute it and print the user data."""
    description = load_description(description_file)
    _ensure_template(runtime, description)

    executor = TemplateExecutor(
        runtime.store,
        description.id,
        parameters,
        scripts=runtime.scripts,
    )
    payload = executor.execute()

    if decode:
        typer.echo(base64.b64decode(payload).decode("utf-8"), nl=False)
    else:
        typer.echo(payload)


def list_meta_templates(runtime: Runtime):
    """List the meta-template files."""
    table = Table(title="Meta-templates")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")

    store = runtime.store
    for name in store.list_meta_template_files():
        table.add_row(name, str(len(store.get_meta_template_content(name))))

    console.print(table)


def show_meta_template(runtime: Runtime, name: str):
    """Print the source of one meta-template."""
    typer.echo(runtime.store.get_meta_template_content(name), nl=False)


def list_scripts(runtime: Runtime, show_content: Optional[str] = None):
    """List the scripts injected into rendered user data."""
    scripts = runtime.scripts
    if show_content:
        typer.echo(scripts.read(show_content), nl=False)
        return

    selected = scripts.select(SCRIPT_SUFFIX)
    if not selected:
        console.print("[yellow]No scripts will be injected[/yellow]")
        return

    table = Table(title=f"Scripts ({scripts.source})")
    table.add_column("Name", style="cyan")
    table.add_column("Destination", style="magenta")
    for name, _ in selected:
        table.add_row(name, script_destination(name))

    console.print(table)
