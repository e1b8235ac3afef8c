"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Lets several commands reuse the same tables and panels.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.language import language_label
from core.domain.models import IntentExportResponse, WorkspaceExportResponse, WorkspaceResponse
from core.domain.runtime import MessageResponse


def print_banner(console: Console) -> None:
    """Print the welcome banner (interactive commands only)."""

    title = Text("Conversation client", style="bold cyan")
    subtitle = Text("Workspaces • Intents • Dialog", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_workspaces_table(workspaces: Sequence[WorkspaceResponse]) -> Table:
    table = Table(title="Workspaces")
    table.add_column("Workspace ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Language", style="green")
    table.add_column("Updated", style="dim")
    for workspace in workspaces:
        table.add_row(
            workspace.workspace_id,
            workspace.name,
            language_label(workspace.language),
            workspace.updated,
        )
    return table


def build_intents_table(intents: Sequence[IntentExportResponse]) -> Table:
    table = Table(title="Intents")
    table.add_column("Intent", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Examples", style="green", justify="right")
    for intent in intents:
        examples = "-" if intent.examples is None else str(len(intent.examples))
        table.add_row(intent.intent, intent.description, examples)
    return table


def build_workspace_panel(workspace: WorkspaceExportResponse) -> Panel:
    body = Text()
    body.append(f"{workspace.name}\n", style="bold")
    if workspace.description:
        body.append(f"{workspace.description}\n")
    body.append(f"\nID: {workspace.workspace_id}")
    body.append(f"\nLanguage: {language_label(workspace.language)}")
    body.append(f"\nStatus: {workspace.status}")
    body.append(f"\nCreated: {workspace.created}  Updated: {workspace.updated}", style="dim")
    counts = {
        "intents": workspace.intents,
        "entities": workspace.entities,
        "counterexamples": workspace.counterexamples,
        "dialog nodes": workspace.dialog_nodes,
    }
    exported = [f"{len(items)} {name}" for name, items in counts.items() if items is not None]
    if exported:
        body.append("\n\n" + ", ".join(exported))
    return Panel(body, title=Text("Workspace", style="bold yellow"), border_style="yellow")


def build_message_panel(response: MessageResponse) -> Panel:
    """Panel with the dialog output, the top intent and the detected entities."""

    body = Text()
    for line in response.output.text:
        body.append(line + "\n")
    top = response.top_intent
    if top is not None:
        body.append(f"\n#{top.intent} ({top.confidence:.2f})", style="cyan")
    for entity in response.entities:
        body.append(f"\n@{entity.entity}:{entity.value}", style="green")
    if response.context.conversation_id:
        body.append(f"\n\nconversation_id: {response.context.conversation_id}", style="dim")
    return Panel(body, title=Text("Assistant", style="bold yellow"), border_style="yellow")
