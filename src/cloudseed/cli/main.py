"""Main CLI implementation using Typer."""

from pathlib import Path
from typing import Optional, Callable, Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from ruamel.yaml.error import YAMLError

from cloudseed.cli.commands import (
    generate_template,
    render_user_data,
    list_meta_templates,
    show_meta_template,
    list_scripts,
)
from cloudseed.cli.runtime import configure, get_runtime
from cloudseed.config import load_config
from cloudseed.errors import CloudseedError
from cloudseed.models.config import CloudseedConfig
from cloudseed.utils.logging import setup_logging


# Create Typer app
app = typer.Typer(
    name="cloudseed",
    help="cloudseed - cloud-init user-data generation from deployment descriptions",
    add_completion=False,
)

# Errors go to stderr so stdout only carries payloads
console = Console(stderr=True)


def _run_cli_command(handler: Callable[..., Any], **kwargs: Any):
    """Helper to run a CLI command against the runtime with error handling."""
    try:
        handler(get_runtime(), **kwargs)
    except (CloudseedError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


@app.callback()
def main_callback(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (YAML)"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="Override the configured log level"
    ),
):
    """Load configuration and set up logging."""
    try:
        settings = load_config(config)
        if log_level:
            settings = CloudseedConfig(**{**settings.model_dump(), "log_level": log_level})
    except (OSError, ValueError, ValidationError, YAMLError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    setup_logging(settings.log_level)
    configure(settings)


@app.command("generate")
def generate_command(
    description_file: Path = typer.Argument(..., help="Deployment description (YAML or JSON)"),
):
    """Generate a template from a deployment description."""
    _run_cli_command(generate_template, description_file=description_file)


@app.command("render")
def render_command(
    description_file: Path = typer.Argument(..., help="Deployment description (YAML or JSON)"),
    params: Optional[str] = typer.Option(
        None, "--params", "-p", help="Rendering parameters as a JSON object"
    ),
    params_file: Optional[Path] = typer.Option(
        None, "--params-file", "-f", help="File holding the rendering parameters"
    ),
    decode: bool = typer.Option(
        False, "--decode", "-d", help="Print the decoded document instead of base64"
    ),
):
    """Render base64 user data for a deployment description."""
    if params and params_file:
        console.print("[red]Error:[/red] Use either --params or --params-file")
        raise typer.Exit(1)

    if params_file:
        try:
            params = params_file.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1) from e

    _run_cli_command(
        render_user_data,
        description_file=description_file,
        parameters=params or "{}",
        decode=decode,
    )


# Meta-template subcommands
meta_app = typer.Typer(help="Meta-template commands")
app.add_typer(meta_app, name="meta")


@meta_app.command("list")
def meta_list_command():
    """List meta-templates."""
    _run_cli_command(list_meta_templates)


@meta_app.command("show")
def meta_show_command(
    name: str = typer.Argument(..., help="Meta-template file name"),
):
    """Show the source of a meta-template."""
    _run_cli_command(show_meta_template, name=name)


# Script subcommands
scripts_app = typer.Typer(help="Injected script commands")
app.add_typer(scripts_app, name="scripts")


@scripts_app.command("list")
def scripts_list_command():
    """List scripts injected into user data."""
    _run_cli_command(list_scripts)


@scripts_app.command("show")
def scripts_show_command(
    name: str = typer.Argument(..., help="Script file name"),
):
    """Show the source of an injected script."""
    _run_cli_command(list_scripts, show_content=name)


def main():
    """Main entry point for CLI."""
    app()
