"""Conversation service endpoints.

Each method only knows its HTTP method, its URL, its query parameters and the
model it expects back; encoding, error mapping and decoding are delegated to
`core.dispatcher.Dispatcher`.

Conventions:
- `version` is attached to every call.
- List calls accept `page_limit`, `include_count`, `sort` and `cursor`; each
  one is omitted when `None`.
- Path segments are percent-encoded (example texts may contain `/` or `?`).
- The service updates resources with POST.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Mapping, TypeVar
from urllib.parse import quote

from adapters.http_client import HttpxTransport
from core.config import ConversationSettings
from core.credentials import BasicAuthCredentials, Credentials
from core.dispatcher import Dispatcher
from core.domain.models import (
    CounterexampleCollectionResponse,
    CreateDialogNode,
    CreateEntity,
    CreateExample,
    CreateIntent,
    CreateValue,
    CreateWorkspace,
    DialogNodeCollectionResponse,
    DialogNodeResponse,
    EntityCollectionResponse,
    EntityExportResponse,
    EntityResponse,
    ExampleCollectionResponse,
    ExampleResponse,
    IntentCollectionResponse,
    IntentExportResponse,
    IntentResponse,
    UpdateDialogNode,
    UpdateEntity,
    UpdateExample,
    UpdateIntent,
    UpdateValue,
    UpdateWorkspace,
    ValueCollectionResponse,
    ValueExportResponse,
    ValueResponse,
    WorkspaceCollectionResponse,
    WorkspaceExportResponse,
    WorkspaceResponse,
)
from core.domain.runtime import MessageRequest, MessageResponse
from core.error_mapper import map_service_error
from core.errors import ConfigurationError
from core.interfaces.transport import Transport
from core.request import HTTPMethod, RequestDescriptor

T = TypeVar("T")

logger = logging.getLogger(__name__)

Query = list[tuple[str, str]]


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _paging(
    page_limit: int | None = None,
    include_count: bool | None = None,
    sort: str | None = None,
    cursor: str | None = None,
) -> Query:
    query: Query = []
    if page_limit is not None:
        query.append(("page_limit", str(page_limit)))
    if include_count is not None:
        query.append(("include_count", _flag(include_count)))
    if sort is not None:
        query.append(("sort", sort))
    if cursor is not None:
        query.append(("cursor", cursor))
    return query


def _export(export: bool | None) -> Query:
    return [] if export is None else [("export", _flag(export))]


class ConversationService:
    """Async client for the conversation service (API v1)."""

    def __init__(
        self,
        version: str,
        *,
        username: str | None = None,
        password: str | None = None,
        credentials: Credentials | None = None,
        service_url: str | None = None,
        default_headers: Mapping[str, str] | None = None,
        transport: Transport | None = None,
        settings: ConversationSettings | None = None,
    ) -> None:
        settings = settings or ConversationSettings()
        if bool(username) != bool(password):
            raise ConfigurationError("username and password must be given together")
        if credentials is None and username and password:
            credentials = BasicAuthCredentials(username, password)
        self.version = version
        self.service_url = (service_url or settings.service_url).rstrip("/")
        self.default_headers: dict[str, str] = dict(default_headers or {})
        self._credentials = credentials

        if transport is None:
            transport = HttpxTransport(settings=settings)
        self._dispatcher = Dispatcher(transport, error_mapper=map_service_error)
        logger.debug("Conversation client for %s (version %s)", self.service_url, version)

    @classmethod
    def from_settings(
        cls,
        settings: ConversationSettings | None = None,
        *,
        transport: Transport | None = None,
    ) -> "ConversationService":
        settings = settings or ConversationSettings()
        if not settings.has_credentials:
            raise ConfigurationError(
                "CONVERSATION_USERNAME and CONVERSATION_PASSWORD must be set "
                "(environment, .env, or `doctor configure`)."
            )
        return cls(
            settings.version,
            username=settings.username,
            password=settings.password,
            service_url=settings.service_url,
            transport=transport,
            settings=settings,
        )

    # ------------------------------------------------------------------ lifecycle
    async def aclose(self) -> None:
        await self._dispatcher.transport.aclose()

    async def __aenter__(self) -> "ConversationService":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ plumbing
    def _url(self, *segments: str) -> str:
        return f"{self.service_url}/v1/" + "/".join(quote(segment, safe="") for segment in segments)

    def _request(
        self,
        method: HTTPMethod,
        *segments: str,
        query: Query | None = None,
        body: Any | None = None,
    ) -> RequestDescriptor:
        encoded = Dispatcher.encode_body(body)
        return RequestDescriptor.build(
            method,
            self._url(*segments),
            credentials=self._credentials,
            headers={"Accept": "application/json", **self.default_headers},
            query=[("version", self.version), *(query or [])],
            content_type="application/json" if encoded is not None else None,
            body=encoded,
        )

    async def _get(self, type_: type[T], *segments: str, query: Query | None = None) -> T:
        return await self._dispatcher.expect_object(
            self._request(HTTPMethod.GET, *segments, query=query), type_
        )

    async def _post(self, type_: type[T], *segments: str, body: Any | None = None) -> T:
        return await self._dispatcher.expect_object(
            self._request(HTTPMethod.POST, *segments, body=body), type_
        )

    async def _delete(self, *segments: str) -> None:
        await self._dispatcher.expect_void(self._request(HTTPMethod.DELETE, *segments))

    # ------------------------------------------------------------------ message
    async def message(
        self,
        workspace_id: str,
        request: MessageRequest | None = None,
    ) -> MessageResponse:
        """Send one user turn. Pass `request=None` to start a new conversation."""

        return await self._post(
            MessageResponse, "workspaces", workspace_id, "message", body=request or MessageRequest()
        )

    # ------------------------------------------------------------------ workspaces
    async def list_workspaces(
        self,
        *,
        page_limit: int | None = None,
        include_count: bool | None = None,
        sort: str | None = None,
        cursor: str | None = None,
    ) -> WorkspaceCollectionResponse:
        return await self._get(
            WorkspaceCollectionResponse,
            "workspaces",
            query=_paging(page_limit, include_count, sort, cursor),
        )

    async def create_workspace(self, body: CreateWorkspace | None = None) -> WorkspaceResponse:
        return await self._post(WorkspaceResponse, "workspaces", body=body or CreateWorkspace())

    async def get_workspace(
        self, workspace_id: str, *, export: bool | None = None
    ) -> WorkspaceExportResponse:
        return await self._get(
            WorkspaceExportResponse, "workspaces", workspace_id, query=_export(export)
        )

    async def update_workspace(
        self, workspace_id: str, body: UpdateWorkspace | None = None
    ) -> WorkspaceResponse:
        return await self._post(
            WorkspaceResponse, "workspaces", workspace_id, body=body or UpdateWorkspace()
        )

    async def delete_workspace(self, workspace_id: str) -> None:
        await self._delete("workspaces", workspace_id)

    # ------------------------------------------------------------------ intents
    async def list_intents(
        self,
        workspace_id: str,
        *,
        export: bool | None = None,
        page_limit: int | None = None,
        include_count: bool | None = None,
        sort: str | None = None,
        cursor: str | None = None,
    ) -> IntentCollectionResponse:
        return await self._get(
            IntentCollectionResponse,
            "workspaces",
            workspace_id,
            "intents",
            query=_export(export) + _paging(page_limit, include_count, sort, cursor),
        )

    async def create_intent(
        self,
        workspace_id: str,
        intent: str,
        description: str | None = None,
        examples: list[CreateExample] | None = None,
    ) -> IntentResponse:
        body = CreateIntent(intent=intent, description=description, examples=examples)
        return await self._post(IntentResponse, "workspaces", workspace_id, "intents", body=body)

    async def get_intent(
        self, workspace_id: str, intent: str, *, export: bool | None = None
    ) -> IntentExportResponse:
        return await self._get(
            IntentExportResponse, "workspaces", workspace_id, "intents", intent, query=_export(export)
        )

    async def update_intent(
        self, workspace_id: str, intent: str, body: UpdateIntent
    ) -> IntentResponse:
        return await self._post(
            IntentResponse, "workspaces", workspace_id, "intents", intent, body=body
        )

    async def delete_intent(self, workspace_id: str, intent: str) -> None:
        await self._delete("workspaces", workspace_id, "intents", intent)

    # ------------------------------------------------------------------ examples
    async def list_examples(
        self,
        workspace_id: str,
        intent: str,
        *,
        page_limit: int | None = None,
        include_count: bool | None = None,
        sort: str | None = None,
        cursor: str | None = None,
    ) -> ExampleCollectionResponse:
        return await self._get(
            ExampleCollectionResponse,
            "workspaces",
            workspace_id,
            "intents",
            intent,
            "examples",
            query=_paging(page_limit, include_count, sort, cursor),
        )

    async def create_example(self, workspace_id: str, intent: str, text: str) -> ExampleResponse:
        return await self._post(
            ExampleResponse,
            "workspaces",
            workspace_id,
            "intents",
            intent,
            "examples",
            body=CreateExample(text=text),
        )

    async def get_example(self, workspace_id: str, intent: str, text: str) -> ExampleResponse:
        return await self._get(
            ExampleResponse, "workspaces", workspace_id, "intents", intent, "examples", text
        )

    async def update_example(
        self, workspace_id: str, intent: str, text: str, body: UpdateExample
    ) -> ExampleResponse:
        return await self._post(
            ExampleResponse,
            "workspaces",
            workspace_id,
            "intents",
            intent,
            "examples",
            text,
            body=body,
        )

    async def delete_example(self, workspace_id: str, intent: str, text: str) -> None:
        await self._delete("workspaces", workspace_id, "intents", intent, "examples", text)

    # ------------------------------------------------------------------ counterexamples
    async def list_counterexamples(
        self,
        workspace_id: str,
        *,
        page_limit: int | None = None,
        include_count: bool | None = None,
        sort: str | None = None,
        cursor: str | None = None,
    ) -> CounterexampleCollectionResponse:
        return await self._get(
            CounterexampleCollectionResponse,
            "workspaces",
            workspace_id,
            "counterexamples",
            query=_paging(page_limit, include_count, sort, cursor),
        )

    async def create_counterexample(self, workspace_id: str, text: str) -> ExampleResponse:
        return await self._post(
            ExampleResponse,
            "workspaces",
            workspace_id,
            "counterexamples",
            body=CreateExample(text=text),
        )

    async def get_counterexample(self, workspace_id: str, text: str) -> ExampleResponse:
        return await self._get(ExampleResponse, "workspaces", workspace_id, "counterexamples", text)

    async def update_counterexample(
        self, workspace_id: str, text: str, body: UpdateExample
    ) -> ExampleResponse:
        return await self._post(
            ExampleResponse, "workspaces", workspace_id, "counterexamples", text, body=body
        )

    async def delete_counterexample(self, workspace_id: str, text: str) -> None:
        await self._delete("workspaces", workspace_id, "counterexamples", text)

    # ------------------------------------------------------------------ entities
    async def list_entities(
        self,
        workspace_id: str,
        *,
        export: bool | None = None,
        page_limit: int | None = None,
        include_count: bool | None = None,
        sort: str | None = None,
        cursor: str | None = None,
    ) -> EntityCollectionResponse:
        return await self._get(
            EntityCollectionResponse,
            "workspaces",
            workspace_id,
            "entities",
            query=_export(export) + _paging(page_limit, include_count, sort, cursor),
        )

    async def create_entity(self, workspace_id: str, body: CreateEntity) -> EntityResponse:
        return await self._post(EntityResponse, "workspaces", workspace_id, "entities", body=body)

    async def get_entity(
        self, workspace_id: str, entity: str, *, export: bool | None = None
    ) -> EntityExportResponse:
        return await self._get(
            EntityExportResponse, "workspaces", workspace_id, "entities", entity, query=_export(export)
        )

    async def update_entity(
        self, workspace_id: str, entity: str, body: UpdateEntity
    ) -> EntityResponse:
        return await self._post(
            EntityResponse, "workspaces", workspace_id, "entities", entity, body=body
        )

    async def delete_entity(self, workspace_id: str, entity: str) -> None:
        await self._delete("workspaces", workspace_id, "entities", entity)

    # ------------------------------------------------------------------ values
    async def list_values(
        self,
        workspace_id: str,
        entity: str,
        *,
        export: bool | None = None,
        page_limit: int | None = None,
        include_count: bool | None = None,
        sort: str | None = None,
        cursor: str | None = None,
    ) -> ValueCollectionResponse:
        return await self._get(
            ValueCollectionResponse,
            "workspaces",
            workspace_id,
            "entities",
            entity,
            "values",
            query=_export(export) + _paging(page_limit, include_count, sort, cursor),
        )

    async def create_value(self, workspace_id: str, entity: str, body: CreateValue) -> ValueResponse:
        return await self._post(
            ValueResponse, "workspaces", workspace_id, "entities", entity, "values", body=body
        )

    async def get_value(
        self, workspace_id: str, entity: str, value: str, *, export: bool | None = None
    ) -> ValueExportResponse:
        return await self._get(
            ValueExportResponse,
            "workspaces",
            workspace_id,
            "entities",
            entity,
            "values",
            value,
            query=_export(export),
        )

    async def update_value(
        self, workspace_id: str, entity: str, value: str, body: UpdateValue
    ) -> ValueResponse:
        return await self._post(
            ValueResponse,
            "workspaces",
            workspace_id,
            "entities",
            entity,
            "values",
            value,
            body=body,
        )

    async def delete_value(self, workspace_id: str, entity: str, value: str) -> None:
        await self._delete("workspaces", workspace_id, "entities", entity, "values", value)

    # ------------------------------------------------------------------ dialog nodes
    async def list_dialog_nodes(
        self,
        workspace_id: str,
        *,
        page_limit: int | None = None,
        include_count: bool | None = None,
        sort: str | None = None,
        cursor: str | None = None,
    ) -> DialogNodeCollectionResponse:
        return await self._get(
            DialogNodeCollectionResponse,
            "workspaces",
            workspace_id,
            "dialog_nodes",
            query=_paging(page_limit, include_count, sort, cursor),
        )

    async def create_dialog_node(
        self, workspace_id: str, body: CreateDialogNode
    ) -> DialogNodeResponse:
        return await self._post(
            DialogNodeResponse, "workspaces", workspace_id, "dialog_nodes", body=body
        )

    async def get_dialog_node(self, workspace_id: str, dialog_node: str) -> DialogNodeResponse:
        return await self._get(
            DialogNodeResponse, "workspaces", workspace_id, "dialog_nodes", dialog_node
        )

    async def update_dialog_node(
        self, workspace_id: str, dialog_node: str, body: UpdateDialogNode
    ) -> DialogNodeResponse:
        return await self._post(
            DialogNodeResponse, "workspaces", workspace_id, "dialog_nodes", dialog_node, body=body
        )

    async def delete_dialog_node(self, workspace_id: str, dialog_node: str) -> None:
        await self._delete("workspaces", workspace_id, "dialog_nodes", dialog_node)
