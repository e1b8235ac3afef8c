"""Command-line entry point (Typer).

Every command builds one `ConversationService` from `ConversationSettings`,
runs a single coroutine and renders the result with Rich. Service failures
are printed and turned into exit code 1.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.conversation import ConversationService
from adapters.json_exporter import export_model_json
from cli import doctor
from cli.ui_components import (
    build_intents_table,
    build_message_panel,
    build_workspace_panel,
    build_workspaces_table,
)
from core.config import ConversationSettings
from core.domain.language import Language
from core.domain.models import CreateWorkspace
from core.domain.runtime import Context, MessageRequest
from core.errors import ConversationError, DecodeError
from core.json_value import JSONValue

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Client for the conversation (dialog) service.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def build_service(settings: ConversationSettings) -> ConversationService:
    return ConversationService.from_settings(settings)


def _configure_logging(level: str) -> None:
    root = logging.getLogger()
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    root.setLevel(level.upper())


def _call(operation: Callable[[ConversationService], Awaitable[T]]) -> T:
    settings = ConversationSettings()

    async def runner() -> T:
        async with build_service(settings) as service:
            return await operation(service)

    try:
        return asyncio.run(runner())
    except ConversationError as exc:
        _console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = ConversationSettings()
    _configure_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def message(
    workspace_id: str = typer.Argument(..., help="Workspace to talk to."),
    text: str = typer.Argument(..., help="User input."),
    context_file: Path | None = typer.Option(
        None, "--context-file", help="JSON file with the context of the previous turn."
    ),
    save_context: Path | None = typer.Option(
        None, "--save-context", help="Write the returned context here for the next turn."
    ),
) -> None:
    """Send one message and print the dialog output."""

    context = None
    if context_file is not None:
        try:
            context = Context(JSONValue.parse(context_file.read_bytes()))
        except DecodeError as exc:
            raise typer.BadParameter(str(exc), param_hint="--context-file") from exc
    request = MessageRequest.from_text(text, context=context)

    response = _call(lambda service: service.message(workspace_id, request))
    _console.print(build_message_panel(response))
    if save_context is not None:
        export_model_json(model=response.context, output_path=save_context)


@app.command()
def workspaces(
    page_limit: int | None = typer.Option(None, "--page-limit", min=1, help="Page size."),
    sort: str | None = typer.Option(None, "--sort", help="Sort field, e.g. `name` or `-updated`."),
) -> None:
    """List the workspaces visible to the configured credentials."""

    collection = _call(lambda service: service.list_workspaces(page_limit=page_limit, sort=sort))
    _console.print(build_workspaces_table(collection.workspaces))
    if collection.pagination.next_url:
        _console.print(f"[dim]More results: {collection.pagination.next_url}[/dim]")


@app.command()
def workspace(
    workspace_id: str = typer.Argument(...),
    export: bool = typer.Option(False, "--export", help="Include intents, entities and dialog nodes."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the workspace JSON here."),
) -> None:
    """Show one workspace, optionally exporting it to a JSON file."""

    result = _call(lambda service: service.get_workspace(workspace_id, export=export))
    _console.print(build_workspace_panel(result))
    if output is not None:
        path = export_model_json(model=result, output_path=output)
        _console.print(f"[green]Saved:[/green] {path}")


@app.command()
def intents(workspace_id: str = typer.Argument(...)) -> None:
    """List the intents of a workspace (with example counts)."""

    collection = _call(lambda service: service.list_intents(workspace_id, export=True))
    _console.print(build_intents_table(collection.intents))


@app.command(name="create-workspace")
def create_workspace(
    name: str = typer.Argument(...),
    language: Language = typer.Option(Language.default(), "--language", "-l"),
    description: str | None = typer.Option(None, "--description", "-d"),
) -> None:
    """Create an empty workspace."""

    body = CreateWorkspace(name=name, language=language.value, description=description)
    result = _call(lambda service: service.create_workspace(body))
    _console.print(f"[green]Created[/green] {result.name} ({result.workspace_id})")


@app.command(name="delete-workspace")
def delete_workspace(
    workspace_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Delete a workspace and everything in it."""

    if not yes:
        typer.confirm(f"Delete workspace {workspace_id}?", abort=True)
    _call(lambda service: service.delete_workspace(workspace_id))
    _console.print(f"[green]Deleted[/green] {workspace_id}")


def run() -> None:
    app()
