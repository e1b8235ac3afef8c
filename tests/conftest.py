from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

SRC = Path(__file__).resolve().parent.parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from adapters.conversation import ConversationService  # noqa: E402
from adapters.http_client import HttpxTransport  # noqa: E402
from core.config import ConversationSettings  # noqa: E402
from core.request import RawResponse, RequestDescriptor  # noqa: E402

SERVICE_URL = "https://conversation.example.test/api"
VERSION = "2017-05-26"


class FakeTransport:
    """Replays queued responses (or raises queued exceptions) and records requests."""

    def __init__(self, *responses: RawResponse | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[RequestDescriptor] = []
        self.closed = False

    async def perform(self, request: RequestDescriptor) -> RawResponse:
        self.requests.append(request)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> ConversationSettings:
    for name in ("USERNAME", "PASSWORD", "SERVICE_URL", "VERSION", "LOG_LEVEL"):
        monkeypatch.delenv(f"CONVERSATION_{name}", raising=False)
    return ConversationSettings(
        _env_file=None,
        service_url=SERVICE_URL,
        username="user",
        password="pass",
        version=VERSION,
    )


@pytest.fixture
def make_transport() -> type[FakeTransport]:
    return FakeTransport


@pytest.fixture
def mock_service(settings: ConversationSettings) -> Callable[..., tuple[ConversationService, list[httpx.Request]]]:
    """Build a service whose HTTP traffic is answered by `handler` (httpx.MockTransport)."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]):
        seen: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        service = ConversationService(
            VERSION,
            username="user",
            password="pass",
            service_url=SERVICE_URL,
            transport=HttpxTransport(client),
            settings=settings,
        )
        return service, seen

    return factory


@pytest.fixture
def payloads() -> dict[str, Any]:
    """Representative service payloads."""

    timestamp = "2017-05-26T10:00:00.000Z"
    return {
        "intent": {
            "intent": "pizza_order",
            "description": "Order a pizza",
            "created": timestamp,
            "updated": timestamp,
        },
        "workspace": {
            "name": "Pizza bot",
            "description": "Orders pizzas",
            "language": "en",
            "metadata": {"owner": "kitchen"},
            "created": timestamp,
            "updated": timestamp,
            "workspace_id": "ws1",
        },
        "message": {
            "input": {"text": "I want a large pizza"},
            "context": {
                "conversation_id": "conv-1",
                "pizza_size": "large",
                "system": {
                    "dialog_stack": [{"dialog_node": "root"}],
                    "dialog_turn_counter": 1,
                    "dialog_request_counter": 1,
                    "branch_exited": True,
                },
            },
            "entities": [
                {"entity": "size", "location": [9, 14], "value": "large", "confidence": 1}
            ],
            "intents": [
                {"intent": "pizza_order", "confidence": 0.98},
                {"intent": "greeting", "confidence": 0.01},
            ],
            "output": {
                "log_messages": [],
                "text": ["What toppings would you like?"],
                "nodes_visited": ["root", "order"],
            },
        },
        "pagination": {"refresh_url": "/v1/workspaces?version=2017-05-26"},
    }
