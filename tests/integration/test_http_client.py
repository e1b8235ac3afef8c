from __future__ import annotations

import asyncio

import httpx

from adapters.http_client import HttpxTransport, build_async_client
from core.credentials import BearerTokenCredentials
from core.request import RequestDescriptor


def test_client_defaults_come_from_settings(settings):
    client = build_async_client(settings)

    assert client.headers["User-Agent"] == settings.user_agent
    assert client.headers["Accept"] == "application/json"
    assert client.timeout.read == settings.http_timeout_seconds
    asyncio.run(client.aclose())


def test_perform_maps_descriptor_to_httpx(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, headers={"X-Request-Id": "r1"}, content=b'{"ok": true}')

    client = build_async_client(settings, transport=httpx.MockTransport(handler))
    transport = HttpxTransport(client)
    descriptor = RequestDescriptor.build(
        "PUT",
        "https://x.test/v1/things",
        credentials=BearerTokenCredentials("tok"),
        query=[("tag", "a"), ("tag", "b")],
        content_type="application/json",
        body=b"{}",
    )

    response = asyncio.run(transport.perform(descriptor))

    assert seen[0].method == "PUT"
    assert seen[0].url.params.get_list("tag") == ["a", "b"]
    assert seen[0].headers["Authorization"] == "Bearer tok"
    assert seen[0].content == b"{}"
    assert response.status_code == 201
    assert response.headers["x-request-id"] == "r1"
    assert response.body == b'{"ok": true}'


def test_borrowed_client_is_not_closed(settings):
    client = build_async_client(settings, transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    asyncio.run(HttpxTransport(client).aclose())

    assert not client.is_closed
