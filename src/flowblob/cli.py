# src/flowblob/cli.py
"""flowblob Command Line Interface.

Runs the azure_blob activity outside a workflow runtime:

    flowblob metadata
    flowblob plugins
    flowblob upload --settings settings.yaml --file abc.txt --data "hello"
    flowblob list --settings settings.yaml

Log lines go to stderr; command output (JSON) goes to stdout.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import ValidationError

from flowblob import __version__
from flowblob.contracts import ActivityError, BlobDescriptor, EvalResult
from flowblob.core.config import FlowblobSettings, load_settings
from flowblob.plugins.azure.blob_activity import AzureBlobActivity
from flowblob.plugins.config_base import PluginConfigError
from flowblob.plugins.context import InMemoryActivityContext

__all__ = ["app"]

app = typer.Typer(
    name="flowblob",
    help="flowblob: Azure Blob Storage activity (upload / list).",
    no_args_is_help=True,
)


@dataclass(frozen=True)
class _LogFlags:
    verbose: bool
    json_logs: bool


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"flowblob version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load AZURE_* and FLOWBLOB_* variables from a .env file.

    Without env_file, python-dotenv searches upwards from the working
    directory. Variables already set in the environment are kept.

    Raises:
        typer.Exit: If env_file is given but missing.
    """
    from dotenv import find_dotenv, load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    found = find_dotenv(usecwd=True)
    if not found:
        return False
    return load_dotenv(found, override=False)


def _configure_logging(flags: _LogFlags, settings: FlowblobSettings | None = None) -> None:
    """Apply logging config; CLI flags win over the settings file."""
    from flowblob.core.logging import configure_logging

    level = "INFO"
    json_output = flags.json_logs
    if settings is not None:
        level = settings.logging.level
        json_output = json_output or settings.logging.json_output
    if flags.verbose:
        level = "DEBUG"
    configure_logging(json_output=json_output, level=level, stream=sys.stderr)


def _format_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error panel on stderr."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    console.print(Panel(content, title=f"[red bold]{title}[/]", border_style="red"))


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Print the flowblob version.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Do not read a .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Read this .env file instead of searching for one.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log at DEBUG level.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Write log lines to stderr as JSON.",
    ),
) -> None:
    """flowblob: Azure Blob Storage activity (upload / list)."""
    flags = _LogFlags(verbose=verbose, json_logs=json_logs)
    ctx.obj = flags
    _configure_logging(flags)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --no-dotenv is set; ignoring --env-file.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _load_settings_or_exit(settings: str) -> FlowblobSettings:
    settings_path = Path(settings).expanduser()
    try:
        return load_settings(settings_path)
    except FileNotFoundError:
        _format_error(
            title="File Not Found",
            message=f"Settings file does not exist: {settings}",
            hint="Pass the path to a YAML file with an activity block.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        details = [f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors()]
        _format_error(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name}",
            details=details,
            hint="Expected top-level keys: activity, logging.",
        )
        raise typer.Exit(1) from None


def _run_activity(
    ctx: typer.Context,
    settings: str,
    method: str,
    inputs: dict[str, Any],
) -> InMemoryActivityContext:
    """Evaluate the activity once; exit 1 on any reported error."""
    loaded = _load_settings_or_exit(settings)
    _configure_logging(ctx.obj, loaded)

    activity = AzureBlobActivity()
    # The host context only answers for declared names; a typo would be dropped silently
    unknown = sorted(set(loaded.activity) - set(activity.metadata().setting_names))
    if unknown:
        _report_activity_error(
            method,
            PluginConfigError(f"Unknown activity setting(s): {', '.join(unknown)}", fields=tuple(unknown)),
        )

    activity_ctx = InMemoryActivityContext(
        settings={**loaded.activity, "method": method},
        inputs=inputs,
        metadata=activity.metadata(),
    )
    outcome: EvalResult = activity.evaluate(activity_ctx)

    if outcome.error is not None:
        _report_activity_error(method, outcome.error)

    return activity_ctx


def _report_activity_error(method: str, error: Exception) -> NoReturn:
    """Show the error panel matching the failure kind and exit 1."""
    if isinstance(error, PluginConfigError):
        _format_error(
            title="Invalid Activity Settings",
            message=str(error),
            details=list(error.fields) or None,
            hint="Settings are read from the 'activity' block of the settings file "
            "or from FLOWBLOB_ACTIVITY__<NAME> environment variables.",
        )
    elif isinstance(error, ActivityError):
        _format_error(
            title=f"{method.capitalize()} Failed",
            message=str(error),
            details=[f"operation: {error.operation}"],
        )
    else:
        _format_error(title="Activity Failed", message=str(error))
    raise typer.Exit(1)


@app.command()
def upload(
    ctx: typer.Context,
    settings: str = typer.Option(..., "--settings", "-s", help="Path to settings YAML file."),
    file: str = typer.Option(..., "--file", "-f", help="Local path to write and upload (also the blob name)."),
    data: str = typer.Option(..., "--data", "-d", help="Content written to the file before upload."),
) -> None:
    """Write DATA to FILE and upload it as a block blob."""
    _run_activity(ctx, settings, "upload", {"file": file, "data": data})
    typer.echo(json.dumps({"uploaded": file}))


@app.command("list")
def list_command(
    ctx: typer.Context,
    settings: str = typer.Option(..., "--settings", "-s", help="Path to settings YAML file."),
) -> None:
    """List the blobs in the configured container as JSON."""
    activity_ctx = _run_activity(ctx, settings, "list", {})
    blobs: dict[str, BlobDescriptor] = activity_ctx.outputs["result"]
    typer.echo(json.dumps({name: descriptor.to_dict() for name, descriptor in blobs.items()}, indent=2))


@app.command()
def metadata() -> None:
    """Print the activity's declared settings/input/output schema."""
    typer.echo(AzureBlobActivity.declared_metadata.to_json())


@app.command()
def plugins() -> None:
    """List registered activities."""
    from flowblob.plugins.manager import PluginManager

    manager = PluginManager()
    manager.register_builtin_plugins()
    for spec in manager.get_specs():
        typer.echo(f"{spec.name} ({spec.version}): {spec.description}")
        typer.echo(f"  required settings: {', '.join(spec.required_settings)}")


if __name__ == "__main__":
    app()
