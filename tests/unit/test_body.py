# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest
from fakes import FakeTransport, respond

from requiem.errors import ErrorKind, RequiemError
from requiem.http.client import create_request, request, request_with_buffer, request_with_json, send_request

URL = "http://api.test/data"


class RecordingChannel:
    def __init__(self):
        self.status_code = None
        self.headers = {}
        self.chunks = []

    def set_header(self, name, value):
        self.headers[name] = value

    async def write(self, chunk):
        self.chunks.append(chunk)


@pytest.mark.asyncio
async def test_buffer_collects_every_chunk_and_closes():
    sink = []
    transport = FakeTransport({URL: respond(200, {"Content-Type": "text/plain"}, [b"hel", b"lo ", b"world"], sink=sink)})
    result = await request_with_buffer(URL, transport=transport)
    assert result.body == b"hello world"
    assert result.status_code == 200
    assert result.headers["content-type"] == "text/plain"
    assert result.requested_url == URL
    assert sink[0].closed is True


@pytest.mark.asyncio
async def test_json_body_is_parsed():
    transport = FakeTransport({URL: respond(500, chunks=[b'{"hello": ', b'"world"}'])})
    result = await request_with_json(URL, transport=transport)
    assert result.body == {"hello": "world"}
    assert result.status_code == 500


@pytest.mark.asyncio
async def test_non_json_body_keeps_response_attached():
    transport = FakeTransport({URL: respond(200, chunks=[b"hello world"])})
    with pytest.raises(RequiemError) as exc_info:
        await request_with_json(URL, transport=transport)
    err = exc_info.value
    assert err.kind is ErrorKind.INVALID_JSON_BODY
    assert err.message.startswith("Failed to parse body as JSON: Expecting value")
    assert err.request is None
    assert err.response.status_code == 200
    assert err.response.body == b"hello world"


@pytest.mark.asyncio
async def test_invalid_utf8_is_invalid_json_body():
    transport = FakeTransport({URL: respond(200, chunks=[b"\xff\xfe"])})
    with pytest.raises(RequiemError) as exc_info:
        await request_with_json(URL, transport=transport)
    assert exc_info.value.code == "InvalidJsonBody"


@pytest.mark.asyncio
async def test_status_errors_win_over_body_parsing():
    transport = FakeTransport({URL: respond(500, chunks=[b"oops"])})
    with pytest.raises(RequiemError) as exc_info:
        await request_with_json({"url": URL, "throw_on_error_response": True}, transport=transport)
    assert exc_info.value.kind is ErrorKind.INVALID_STATUS_CODE


@pytest.mark.asyncio
async def test_json_payload_sets_content_type_and_body():
    transport = FakeTransport({URL: respond(200)})
    await request({"url": URL, "method": "POST", "body_json": {"hello": "world"}}, transport=transport)
    sent = transport.opened[0]
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.body == json.dumps({"hello": "world"}).encode("utf-8")


@pytest.mark.asyncio
async def test_json_payload_replaces_caller_content_type():
    transport = FakeTransport({URL: respond(200)})
    await request(
        {"url": URL, "method": "POST", "headers": {"content-type": "text/plain"}, "body_json": [1, 2]},
        transport=transport,
    )
    assert transport.opened[0].headers == {"Content-Type": "application/json"}


@pytest.mark.asyncio
async def test_raw_payload_is_written_verbatim():
    transport = FakeTransport({URL: respond(200)})
    payload = json.dumps({"post": "data"}).encode("utf-8")
    await request(
        {"url": URL, "method": "POST", "headers": {"Content-Type": "application/json"}, "body": payload},
        transport=transport,
    )
    sent = transport.opened[0]
    assert sent.body == payload
    assert sent.headers == {"Content-Type": "application/json"}


@pytest.mark.asyncio
async def test_unserializable_json_payload_fails_before_sending():
    transport = FakeTransport({URL: respond(200)})
    options = {"url": URL, "method": "POST", "body_json": {"when": object()}}
    outbound = create_request(options, transport=transport)
    with pytest.raises(TypeError):
        await send_request(outbound, options)
    assert transport.opened[0].ended is False


@pytest.mark.asyncio
async def test_streaming_response_is_not_buffered():
    transport = FakeTransport({URL: respond(200, chunks=[b"a", b"b"])})
    response = await request(URL, transport=transport)
    assert not hasattr(response, "body")
    assert [chunk async for chunk in response.aiter_bytes()] == [b"a", b"b"]


@pytest.mark.asyncio
async def test_reverse_emit_copies_status_headers_and_body():
    transport = FakeTransport({URL: respond(201, {"Content-Type": "application/xml", "X-Hello": "World"}, [b"<a/>"])})
    response = await request(URL, transport=transport)
    channel = RecordingChannel()
    assert await response.reverse_emit(channel) is channel
    assert channel.status_code == 201
    assert channel.headers == {"content-type": "application/xml", "x-hello": "World"}
    assert b"".join(channel.chunks) == b"<a/>"


@pytest.mark.asyncio
async def test_response_headers_keep_repeated_fields():
    transport = FakeTransport({URL: respond(200, [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")], [b""])})
    response = await request(URL, transport=transport)
    assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]
    assert response.headers["Set-Cookie"] == "a=1, b=2"


@pytest.mark.asyncio
async def test_none_json_payload_is_sent_as_null():
    transport = FakeTransport({URL: respond(200)})
    await request({"url": URL, "method": "POST", "body_json": None}, transport=transport)
    sent = transport.opened[0]
    assert sent.body == b"null"
    assert sent.headers["Content-Type"] == "application/json"
