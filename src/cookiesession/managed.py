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
"""Managed sessions — commit or destroy the session cookie automatically.

A managed session removes the need to commit or destroy sessions by hand in
request handlers. The session data is fingerprinted when it is loaded and
again when the request is finalized:

* unchanged data emits nothing, unless ``rolling`` is enabled and the client
  already presented a session cookie, in which case the cookie is refreshed;
* emptied data emits a cookie-clearing directive;
* any other change emits a fresh commit directive.

Usage::

    result = await create_managed_session(request, cookie, storage, rolling=True)
    result.session.set("user_id", 42)
    ...
    await result.finalize_session(response)
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from cookiesession.cookie import Cookie
from cookiesession.ports.outbound import SessionStorage
from cookiesession.session import Session

logger = structlog.get_logger("cookiesession.managed")

FinalizeSessionFn = Callable[[Any], Awaitable[None]]


def fingerprint(data: dict[str, Any]) -> str:
    """Serialize *data* for change detection.

    Key insertion order is significant: the same pairs inserted in a
    different order produce a different fingerprint. Data JSON cannot
    represent (non-string keys, cycles) falls back to its ``repr``.
    """
    try:
        return json.dumps(data, separators=(",", ":"), default=repr)
    except (TypeError, ValueError):
        return repr(data)


class ManagedSession:
    """Session handle that forwards every accessor to the live session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def __repr__(self) -> str:
        return f"ManagedSession({self._session!r})"

    @property
    def id(self) -> str:
        return self._session.id

    @property
    def data(self) -> dict[str, Any]:
        return self._session.data

    def has(self, name: str) -> bool:
        return self._session.has(name)

    def get(self, name: str) -> Any | None:
        return self._session.get(name)

    def set(self, name: str, value: Any) -> None:
        self._session.set(name, value)

    def flash(self, name: str, value: Any) -> None:
        self._session.flash(name, value)

    def unset(self, name: str) -> None:
        self._session.unset(name)

    def destroy(self) -> None:
        """Remove every key, so finalizing emits a cookie-clearing directive."""
        for name in list(self._session.data):
            self._session.unset(name)


@dataclass(frozen=True)
class ManagedSessionResult:
    session: ManagedSession
    finalize_session: FinalizeSessionFn


async def create_managed_session(
    request: Any,
    cookie: Cookie,
    session_storage: SessionStorage,
    rolling: bool = False,
) -> ManagedSessionResult:
    """Load the request's session and return it with its finalizer.

    Args:
        request: Inbound request; only its ``Cookie`` header is read.
        cookie: The cookie the storage uses, consulted to tell whether the
            client presented a session cookie at all.
        session_storage: Loads, commits and destroys the session.
        rolling: Refresh the cookie of an existing session on every request.

    ``finalize_session`` must be awaited exactly once, after the last
    mutation. Each call appends its directive again.
    """
    cookie_header: str | None = request.headers.get("Cookie")
    parsed = await cookie.parse(cookie_header)
    # Empty containers still count: a cookie whose payload is {} was presented.
    is_existing_session = bool(parsed) or isinstance(parsed, (dict, list))
    session = await session_storage.get_session(cookie_header)
    before = fingerprint(session.data)

    async def finalize_session(response: Any) -> None:
        after = fingerprint(session.data)
        if before == after and not (rolling and is_existing_session):
            logger.debug("session_noop", cookie=cookie.name)
            return

        if not session.data:
            response.headers.append("Set-Cookie", await session_storage.destroy_session(session))
            logger.debug("session_destroyed", cookie=cookie.name)
        else:
            response.headers.append("Set-Cookie", await session_storage.commit_session(session))
            logger.debug("session_committed", cookie=cookie.name, rolled=before == after)

    return ManagedSessionResult(session=ManagedSession(session), finalize_session=finalize_session)
