"""Workspace artifact models (Pydantic v2).

Why these live in the domain:
- They describe *what* the service stores (workspaces, intents, entities,
  dialog nodes), not *how* it is fetched.
- Every field declares its wire contract through its annotation and alias,
  which `core.codec.JSONModel` turns into decode/encode calls.

Note:
- `Create*` / `Update*` models are request bodies; every optional field left
  as `None` is omitted from the JSON, which the service treats as "keep".
"""

from __future__ import annotations

from pydantic import Field

from core.codec import JSONModel, PassThroughObject
from core.json_value import JSONValue


class PaginationResponse(JSONModel):
    """Pagination block attached to every collection response."""

    refresh_url: str = Field(..., description="URL that repeats the current page request.")
    next_url: str | None = Field(default=None, description="URL of the next page, if any.")
    total: int | None = Field(default=None, description="Total items (only with `include_count`).")
    matched: int | None = None


# ---------------------------------------------------------------------------
# Examples / counterexamples
# ---------------------------------------------------------------------------


class ExampleResponse(JSONModel):
    text: str
    created: str
    updated: str


class CreateExample(JSONModel):
    text: str = Field(..., min_length=1, description="Text of the user input example.")


class UpdateExample(JSONModel):
    text: str | None = None


class ExampleCollectionResponse(JSONModel):
    examples: list[ExampleResponse]
    pagination: PaginationResponse


class CounterexampleCollectionResponse(JSONModel):
    counterexamples: list[ExampleResponse]
    pagination: PaginationResponse


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------


class IntentResponse(JSONModel):
    intent: str = Field(..., description="Name of the intent.")
    description: str
    created: str = Field(..., description="Creation timestamp.")
    updated: str = Field(..., description="Last update timestamp.")


class IntentExportResponse(JSONModel):
    """An intent, plus its examples when fetched with `export=true`."""

    intent: str
    description: str
    created: str
    updated: str
    examples: list[ExampleResponse] | None = None


class CreateIntent(JSONModel):
    intent: str = Field(..., min_length=1)
    description: str | None = None
    examples: list[CreateExample] | None = None


class UpdateIntent(JSONModel):
    intent: str | None = None
    description: str | None = None
    examples: list[CreateExample] | None = None


class IntentCollectionResponse(JSONModel):
    intents: list[IntentExportResponse]
    pagination: PaginationResponse


# ---------------------------------------------------------------------------
# Entity values
# ---------------------------------------------------------------------------


class ValueResponse(JSONModel):
    value: str
    metadata: JSONValue = Field(..., description="Free-form metadata, kept as raw JSON.")
    created: str
    updated: str


class ValueExportResponse(JSONModel):
    value: str
    metadata: JSONValue | None = None
    created: str
    updated: str
    synonyms: list[str] | None = None


class CreateValue(JSONModel):
    value: str = Field(..., min_length=1)
    metadata: JSONValue | None = None
    synonyms: list[str] | None = None


class UpdateValue(JSONModel):
    value: str | None = None
    metadata: JSONValue | None = None
    synonyms: list[str] | None = None


class ValueCollectionResponse(JSONModel):
    values: list[ValueExportResponse]
    pagination: PaginationResponse


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class EntityResponse(JSONModel):
    entity: str
    description: str | None = None
    type: str | None = None
    source: str | None = None
    open_list: bool | None = None
    created: str
    updated: str


class EntityExportResponse(JSONModel):
    entity: str
    description: str | None = None
    type: str | None = None
    source: str | None = None
    open_list: bool | None = None
    created: str
    updated: str
    values: list[ValueExportResponse] | None = None


class CreateEntity(JSONModel):
    entity: str = Field(..., min_length=1)
    description: str | None = None
    source: str | None = None
    open_list: bool | None = None
    type: str | None = None
    values: list[CreateValue] | None = None


class UpdateEntity(JSONModel):
    entity: str | None = None
    description: str | None = None
    source: str | None = None
    open_list: bool | None = None
    type: str | None = None
    values: list[CreateValue] | None = None


class EntityCollectionResponse(JSONModel):
    entities: list[EntityExportResponse]
    pagination: PaginationResponse


# ---------------------------------------------------------------------------
# Dialog nodes
# ---------------------------------------------------------------------------


class DialogNodeOutput(PassThroughObject):
    """Output block of a dialog node; its shape is owned by the dialog author."""


class DialogNodeGoTo(JSONModel):
    """Jump target executed after a dialog node fires."""

    dialog_node: str | None = None
    selector: str | None = Field(
        default=None,
        description="Where to resume: `condition`, `client` or `user_input`.",
    )
    return_: bool | None = Field(default=None, alias="return")


class DialogNodeResponse(JSONModel):
    dialog_node: str
    description: str | None = None
    conditions: str | None = None
    parent: str | None = None
    previous_sibling: str | None = None
    output: DialogNodeOutput | None = None
    context: JSONValue | None = None
    metadata: JSONValue | None = None
    go_to: DialogNodeGoTo | None = None
    created: str
    updated: str | None = None


class CreateDialogNode(JSONModel):
    dialog_node: str = Field(..., min_length=1)
    description: str | None = None
    conditions: str | None = None
    parent: str | None = None
    previous_sibling: str | None = None
    output: DialogNodeOutput | None = None
    context: JSONValue | None = None
    metadata: JSONValue | None = None
    go_to: DialogNodeGoTo | None = None


class UpdateDialogNode(JSONModel):
    dialog_node: str | None = None
    description: str | None = None
    conditions: str | None = None
    parent: str | None = None
    previous_sibling: str | None = None
    output: DialogNodeOutput | None = None
    context: JSONValue | None = None
    metadata: JSONValue | None = None
    go_to: DialogNodeGoTo | None = None


class DialogNodeCollectionResponse(JSONModel):
    dialog_nodes: list[DialogNodeResponse]
    pagination: PaginationResponse


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


class WorkspaceResponse(JSONModel):
    """A workspace: the container for every artifact that drives a dialog."""

    name: str
    description: str | None = None
    language: str
    metadata: JSONValue
    created: str
    updated: str
    workspace_id: str


class WorkspaceExportResponse(JSONModel):
    """A workspace with its status, and its content when fetched with `export=true`."""

    name: str
    description: str | None = None
    language: str
    metadata: JSONValue
    created: str
    updated: str
    workspace_id: str
    status: str = Field(
        ...,
        description="`Non Existent`, `Training`, `Failed`, `Available` or `Unavailable`.",
    )
    intents: list[IntentExportResponse] | None = None
    entities: list[EntityExportResponse] | None = None
    counterexamples: list[ExampleResponse] | None = None
    dialog_nodes: list[DialogNodeResponse] | None = None


class CreateWorkspace(JSONModel):
    name: str | None = None
    description: str | None = None
    language: str | None = None
    intents: list[CreateIntent] | None = None
    entities: list[CreateEntity] | None = None
    dialog_nodes: list[CreateDialogNode] | None = None
    counterexamples: list[CreateExample] | None = None
    metadata: JSONValue | None = None


class UpdateWorkspace(JSONModel):
    """Replacement content: included elements fully replace the existing ones."""

    name: str | None = None
    description: str | None = None
    language: str | None = None
    intents: list[CreateIntent] | None = None
    entities: list[CreateEntity] | None = None
    dialog_nodes: list[CreateDialogNode] | None = None
    counterexamples: list[CreateExample] | None = None
    metadata: JSONValue | None = None


class WorkspaceCollectionResponse(JSONModel):
    workspaces: list[WorkspaceResponse]
    pagination: PaginationResponse
