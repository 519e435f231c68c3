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
"""ManagedSessionMiddleware — pure ASGI middleware running a ManagedSessionFilter."""

from __future__ import annotations

from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from cookiesession.filter import ManagedSessionFilter


class ManagedSessionMiddleware:
    """Runs a :class:`ManagedSessionFilter` around the downstream ASGI app.

    The downstream response is buffered so the session cookie can be
    appended after the handler finishes. Non-HTTP scopes and paths the
    filter skips pass straight through.

    Usage::

        app = Starlette(
            routes=routes,
            middleware=[Middleware(ManagedSessionMiddleware, session_filter=session_filter)],
        )
    """

    def __init__(self, app: ASGIApp, session_filter: ManagedSessionFilter) -> None:
        self.app = app
        self._filter = session_filter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive, send)
        if self._filter.should_not_filter(request):
            await self.app(scope, receive, send)
            return

        async def _call_app(req: Any) -> Response:
            """Terminal: run downstream ASGI app and capture its response."""
            status_code = 200
            raw_headers: list[tuple[bytes, bytes]] = []
            body_parts: list[bytes] = []

            async def _intercept(message: Any) -> None:
                nonlocal status_code, raw_headers
                if message["type"] == "http.response.start":
                    status_code = message["status"]
                    raw_headers = list(message.get("headers", []))
                elif message["type"] == "http.response.body":
                    body = message.get("body", b"")
                    if body:
                        body_parts.append(body)

            await self.app(scope, receive, _intercept)

            response = Response(content=b"".join(body_parts), status_code=status_code)
            response.raw_headers[:] = raw_headers
            return response

        response: Response = await self._filter.do_filter(request, _call_app)
        await response(scope, receive, send)
