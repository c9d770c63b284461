# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for CorsPolicyMiddleware on Starlette."""

from __future__ import annotations

import logging
from http import HTTPMethod

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, StreamingResponse
from starlette.routing import Route, WebSocketRoute
from starlette.testclient import TestClient
from starlette.websockets import WebSocket

from crossorigin.core.config import Config
from crossorigin.cors.policy import CorsPolicy
from crossorigin.web.adapters.starlette import AsgiExchange, CorsPolicyMiddleware, create_app
from crossorigin.web.ports.exchange import HttpExchange

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

CALLS: list[str] = []


async def _hello(request: Request) -> JSONResponse:
    CALLS.append(request.method)
    return JSONResponse({"msg": "hello"}, headers={"X-App": "1"})


async def _stream(request: Request) -> StreamingResponse:
    async def chunks():
        yield b"a"
        yield b"b"

    return StreamingResponse(chunks(), media_type="text/plain")


async def _echo(websocket: WebSocket) -> None:
    await websocket.accept()
    await websocket.send_text("pong")
    await websocket.close()


ROUTES = [
    Route("/hello", _hello, methods=["GET", "POST", "OPTIONS"]),
    Route("/stream", _stream),
    WebSocketRoute("/ws", _echo),
]

MULTI = (
    CorsPolicy.new()
    .allow_origin("http://a.com")
    .allow_origin("http://b.com")
    .allow_method(HTTPMethod.GET)
    .allow_method(HTTPMethod.POST)
)


def _client(policy: CorsPolicy | None) -> TestClient:
    return TestClient(create_app(routes=ROUTES, cors=policy))


@pytest.fixture(autouse=True)
def _reset_calls():
    CALLS.clear()
    yield
    CALLS.clear()


@pytest.fixture
def restore_crossorigin_logger():
    yield
    logger = logging.getLogger("crossorigin")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestAsgiExchange:
    def test_implements_http_exchange(self):
        assert isinstance(AsgiExchange(), HttpExchange)

    def test_header_lookup_is_case_insensitive(self):
        scope = {"type": "http", "method": "GET", "headers": [(b"origin", b"http://a.com")]}
        assert AsgiExchange().header(scope, "Origin") == "http://a.com"

    def test_set_header_on_message_without_headers(self):
        message = {"type": "http.response.start", "status": 200}
        AsgiExchange().set_header(message, "Vary", "Origin")
        assert message["headers"] == [(b"vary", b"Origin")]

    def test_set_header_replaces_existing_value(self):
        message = {"type": "http.response.start", "status": 200, "headers": [(b"vary", b"Accept")]}
        AsgiExchange().set_header(message, "Vary", "Origin")
        assert message["headers"] == [(b"vary", b"Origin")]


class TestPreflight:
    def test_preflight_scenario(self):
        resp = _client(MULTI).options("/hello", headers={"Origin": "http://a.com"})

        assert resp.status_code == 204
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "http://a.com"
        assert resp.headers["vary"] == "Origin"
        assert resp.headers["access-control-allow-methods"] == "GET,POST"
        assert "access-control-expose-headers" not in resp.headers
        assert "access-control-max-age" not in resp.headers
        assert "access-control-allow-credentials" not in resp.headers

    def test_preflight_never_reaches_route(self):
        resp = _client(CorsPolicy.new()).options("/hello")

        assert resp.status_code == 204
        assert resp.content == b""
        assert CALLS == []

    def test_preflight_on_unknown_path_still_204(self):
        resp = _client(MULTI).options("/missing", headers={"Origin": "http://b.com"})

        assert resp.status_code == 204
        assert resp.headers["access-control-allow-origin"] == "http://b.com"


class TestActualRequests:
    def test_empty_policy_leaves_response_unchanged(self):
        resp = _client(CorsPolicy.new()).get("/hello", headers={"Origin": "http://a.com"})

        assert resp.status_code == 200
        assert resp.json() == {"msg": "hello"}
        assert resp.headers["x-app"] == "1"
        assert not [name for name in resp.headers if name.startswith("access-control-")]
        assert "vary" not in resp.headers

    def test_no_middleware_when_policy_absent(self):
        app = create_app(routes=ROUTES)
        assert not any(m.cls is CorsPolicyMiddleware for m in app.user_middleware)

    def test_wildcard_without_origin_header(self):
        resp = _client(CorsPolicy.new().allow_all_origins()).get("/hello")
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_single_origin_echoes_configured_origin(self):
        policy = CorsPolicy.new().allow_origin("http://a.com")
        resp = _client(policy).get("/hello", headers={"Origin": "http://other.com"})

        assert resp.headers["access-control-allow-origin"] == "http://a.com"
        assert "vary" not in resp.headers

    def test_multi_origin_member(self):
        resp = _client(MULTI).post("/hello", headers={"Origin": "http://b.com"})

        assert resp.status_code == 200
        assert CALLS == ["POST"]
        assert resp.headers["access-control-allow-origin"] == "http://b.com"
        assert resp.headers["vary"] == "Origin"

    def test_multi_origin_non_member(self):
        resp = _client(MULTI).get("/hello", headers={"Origin": "http://evil.com"})

        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers
        assert "vary" not in resp.headers

    def test_credentials_literal_true(self):
        resp = _client(CorsPolicy.new().allow_credentials()).get("/hello")
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_streaming_response_keeps_body(self):
        policy = CorsPolicy.new().allow_all_origins().expose_header("X-Trace").max_age(120)
        resp = _client(policy).get("/stream")

        assert resp.text == "ab"
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-expose-headers"] == "X-Trace"
        assert resp.headers["access-control-max-age"] == "120"


class TestNonHttpScopes:
    def test_websocket_passes_through(self):
        client = _client(CorsPolicy.new().allow_all_origins())
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_text() == "pong"


class TestMiddlewareDirectly:
    def test_add_middleware_with_policy(self):
        policy = CorsPolicy.new().allow_all_origins()
        app = Starlette(
            routes=[Route("/plain", lambda request: PlainTextResponse("ok"))],
            middleware=[Middleware(CorsPolicyMiddleware, policy=policy)],
        )
        resp = TestClient(app).get("/plain")

        assert resp.text == "ok"
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_default_policy_is_empty(self):
        middleware = CorsPolicyMiddleware(app=lambda scope, receive, send: None)
        assert middleware.policy.is_empty


class TestLoggingOutput:
    def test_preflight_and_denied_origin_print_nothing_by_default(self, capsys, caplog):
        client = _client(MULTI)
        client.options("/hello", headers={"Origin": "http://z.com"})
        client.get("/hello", headers={"Origin": "http://z.com"})

        assert capsys.readouterr().out == ""
        assert not [r for r in caplog.records if r.name.startswith("crossorigin")]

    def test_debug_events_when_enabled(self, caplog):
        caplog.set_level(logging.DEBUG, logger="crossorigin")
        client = _client(MULTI)
        client.options("/hello", headers={"Origin": "http://z.com"})
        client.get("/hello", headers={"Origin": "http://z.com"})

        events = [r.getMessage() for r in caplog.records if r.name == "crossorigin.cors"]
        assert "cors_preflight" in events
        assert "cors_request_origin_denied" in events


class TestCreateAppFromConfig:
    @pytest.mark.usefixtures("restore_crossorigin_logger")
    def test_policy_and_logging_come_from_config(self):
        config = Config(
            {
                "crossorigin": {
                    "cors": {"allowed_origins": ["http://a.com"], "allowed_methods": ["GET"]},
                    "logging": {"level": {"root": "ERROR"}},
                }
            }
        )
        app = create_app(routes=ROUTES, config=config)

        [entry] = app.user_middleware
        assert entry.cls is CorsPolicyMiddleware
        assert logging.getLogger("crossorigin").level == logging.ERROR

        resp = TestClient(app).options("/hello", headers={"Origin": "http://other.com"})
        assert resp.status_code == 204
        assert resp.headers["access-control-allow-origin"] == "http://a.com"
        assert resp.headers["access-control-allow-methods"] == "GET"

    @pytest.mark.usefixtures("restore_crossorigin_logger")
    def test_explicit_policy_wins_over_config(self):
        config = Config({"crossorigin": {"cors": {"allowed_origins": ["http://a.com"]}}})
        app = create_app(routes=ROUTES, cors=CorsPolicy.new().allow_all_origins(), config=config)

        resp = TestClient(app).get("/hello", headers={"Origin": "http://x.com"})
        assert resp.headers["access-control-allow-origin"] == "*"
