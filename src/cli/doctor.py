"""Doctor command for configuration and connectivity diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.conversation import ConversationService
from cli.ui_components import print_banner
from core.config import ConversationSettings
from core.errors import ConversationError

app = typer.Typer(no_args_is_help=True, help="Configuration and connectivity checks.")

_console = Console()


async def _check_service(service: ConversationService) -> tuple[bool, str]:
    try:
        async with service:
            collection = await service.list_workspaces(page_limit=1)
        return True, f"{len(collection.workspaces)} workspace(s) on first page"
    except ConversationError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = ConversationSettings()
    print_banner(_console)

    table = Table(title="Conversation client doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Service URL", "OK", settings.service_url)
    table.add_row("API version", "OK", settings.version)
    if settings.has_credentials:
        table.add_row("Credentials", "OK", f"user {settings.username}")
    else:
        table.add_row("Credentials", "MISSING", "Run `conversation doctor configure`")

    ok_service = False
    if settings.has_credentials:
        ok_service, detail = asyncio.run(_check_service(ConversationService.from_settings(settings)))
        table.add_row("Service", "OK" if ok_service else "FAIL", detail)

    _console.print(table)

    if not ok_service:
        raise typer.Exit(code=1)


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = ConversationSettings()

    service_url = typer.prompt("Service URL", default=settings.service_url, show_default=True).strip()
    version = typer.prompt("API version (YYYY-MM-DD)", default=settings.version, show_default=True).strip()
    username = typer.prompt("Username", default=settings.username or "", show_default=bool(settings.username)).strip()
    password = typer.prompt("Password", hide_input=True, confirmation_prompt=False).strip()

    if not username or not password:
        raise typer.BadParameter("username and password are required")

    env_path = ConversationSettings.save_user_values(
        {
            "CONVERSATION_SERVICE_URL": service_url,
            "CONVERSATION_VERSION": version,
            "CONVERSATION_USERNAME": username,
            "CONVERSATION_PASSWORD": password,
        }
    )

    _console.print(f"[green]Saved configuration to:[/green] {env_path}")
