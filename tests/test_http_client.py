"""HttpxTransport: wire encoding and cooperative cancellation."""

import asyncio

import httpx
import pytest

from adapters.http_client import HttpxTransport, build_async_client
from core.config import AppSettings
from core.domain.models import BodyMode, HttpMethod
from core.domain.requests import Blob, MultipartBody, OutboundRequest, UploadFile
from core.services.cancellation import CancellationToken, RequestAborted
from core.services.headers import build_headers


def _transport(handler) -> HttpxTransport:
    return HttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _outbound(body=None, mode=BodyMode.JSON, method=HttpMethod.POST) -> OutboundRequest:
    return OutboundRequest(method=method, url="http://api.test/upload", headers=build_headers(mode), body=body)


@pytest.mark.asyncio
async def test_text_body_is_sent_as_content():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    transport = _transport(handler)
    await transport.send(_outbound('{"a": 1}'), CancellationToken())

    assert seen[0].method == "POST"
    assert seen[0].content == b'{"a": 1}'
    assert seen[0].headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_multipart_body_gets_boundary_and_parts():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    body = MultipartBody()
    body.append("profile[name]", "Ana")
    body.append("doc", UploadFile(b"%PDF-1.4", filename="file"))
    body.append("raw", Blob(b"\x00\x01"))

    transport = _transport(handler)
    await transport.send(_outbound(body, mode=BodyMode.FORM), CancellationToken())

    request = seen[0]
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'name="profile[name]"' in request.content
    assert b"Ana" in request.content
    assert b'name="doc"; filename="file"' in request.content
    assert b"%PDF-1.4" in request.content
    assert b'name="raw"' in request.content


@pytest.mark.asyncio
async def test_multipart_without_files_is_still_multipart():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    body = MultipartBody()
    body.append("username", "ana@example.com")

    await _transport(handler).send(_outbound(body, mode=BodyMode.FORM), CancellationToken())
    assert seen[0].headers["content-type"].startswith("multipart/form-data")


@pytest.mark.asyncio
async def test_empty_multipart_body_sends_closing_boundary():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    await _transport(handler).send(_outbound(MultipartBody(), mode=BodyMode.FORM), CancellationToken())

    content_type = seen[0].headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    boundary = content_type.split("boundary=", 1)[1]
    assert seen[0].content == f"--{boundary}--\r\n".encode()
    assert seen[0].headers["content-length"] == str(len(seen[0].content))


@pytest.mark.asyncio
async def test_already_cancelled_token_skips_the_network():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    token = CancellationToken()
    token.cancel("too late")

    with pytest.raises(RequestAborted) as exc_info:
        await _transport(handler).send(_outbound(), token)
    assert exc_info.value.reason == "too late"
    assert calls == []


@pytest.mark.asyncio
async def test_token_firing_mid_flight_aborts_request():
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(5)
        return httpx.Response(200)

    token = CancellationToken()
    transport = _transport(handler)
    task = asyncio.ensure_future(transport.send(_outbound(), token))
    await started.wait()
    token.cancel("stop")

    with pytest.raises(RequestAborted):
        await asyncio.wait_for(task, timeout=1)


@pytest.mark.asyncio
async def test_build_async_client_uses_settings_user_agent():
    settings = AppSettings(_env_file=None, user_agent="tests/1.0")
    async with build_async_client(settings, extra_headers={"X-App": "ui"}) as client:
        assert client.headers["User-Agent"] == "tests/1.0"
        assert client.headers["X-App"] == "ui"


@pytest.mark.asyncio
async def test_injected_client_is_not_closed_by_transport():
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    transport = HttpxTransport(http)
    await transport.aclose()
    assert not http.is_closed
    await http.aclose()
