from __future__ import annotations

import dataclasses

import pytest

from core.credentials import BasicAuthCredentials, BearerTokenCredentials, Credentials
from core.errors import TransportError
from core.request import HTTPMethod, RawResponse, RequestDescriptor


def test_headers_last_write_wins():
    request = RequestDescriptor.build(
        "GET", "https://x.test", headers=[("X-Trace", "1"), ("Accept", "text/plain"), ("X-Trace", "2")]
    )

    assert dict(request.headers) == {"X-Trace": "2", "Accept": "text/plain"}


def test_query_keeps_duplicates_in_order():
    request = RequestDescriptor.build(
        HTTPMethod.GET,
        "https://x.test",
        query=[("version", "2017-05-26"), ("tag", "a"), ("tag", "b")],
    )

    assert request.query == (("version", "2017-05-26"), ("tag", "a"), ("tag", "b"))


def test_descriptor_is_immutable():
    request = RequestDescriptor.build("POST", "https://x.test", headers={"A": "1"})

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.url = "https://other.test"
    with pytest.raises(TypeError):
        request.headers["A"] = "2"


def test_wire_headers_add_content_type_and_credentials():
    request = RequestDescriptor.build(
        "POST",
        "https://x.test",
        credentials=BasicAuthCredentials("user", "pass"),
        headers={"Accept": "application/json"},
        content_type="application/json",
        body=b"{}",
    )

    assert request.wire_headers() == {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Authorization": "Basic dXNlcjpwYXNz",
    }


def test_content_type_is_dropped_without_body():
    request = RequestDescriptor.build("GET", "https://x.test", content_type="application/json")

    assert "Content-Type" not in request.wire_headers()


def test_credentials_schemes():
    bearer = BearerTokenCredentials("abc")

    assert bearer.auth_headers() == {"Authorization": "Bearer abc"}
    assert isinstance(bearer, Credentials)
    assert "pass" not in repr(BasicAuthCredentials("user", "pass"))


def test_raw_response_status_check():
    RawResponse(204).raise_for_status()

    with pytest.raises(TransportError) as info:
        RawResponse(502, body=b"bad gateway").raise_for_status()
    assert info.value.status_code == 502
