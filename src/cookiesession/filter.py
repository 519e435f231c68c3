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
"""ManagedSessionFilter — loads a managed session and finalizes it per request."""

from __future__ import annotations

from collections.abc import Callable, Coroutine, Sequence
from fnmatch import fnmatch
from typing import Any

from cookiesession.cookie import Cookie
from cookiesession.managed import create_managed_session
from cookiesession.ports.outbound import SessionStorage

CallNext = Callable[..., Coroutine[Any, Any, Any]]


class ManagedSessionFilter:
    """Attaches a managed session to ``request.state.session``.

    The session is finalized against the handler's response, appending at
    most one ``Set-Cookie`` header. If the handler raises, the session is
    not finalized and no cookie is emitted.

    Attributes:
        url_patterns: Glob patterns that this filter applies to.
            If empty (default), the filter applies to *all* paths.
        exclude_patterns: Glob patterns to exclude even if ``url_patterns``
            matches.  Checked *after* ``url_patterns``.
    """

    def __init__(
        self,
        cookie: Cookie,
        session_storage: SessionStorage,
        rolling: bool = False,
        url_patterns: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
    ) -> None:
        self._cookie = cookie
        self._session_storage = session_storage
        self._rolling = rolling
        self.url_patterns = list(url_patterns)
        self.exclude_patterns = list(exclude_patterns)

    @property
    def rolling(self) -> bool:
        return self._rolling

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` if the request path does not match this filter's patterns."""
        path: str = request.url.path

        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True

        return bool(
            self.exclude_patterns and any(fnmatch(path, p) for p in self.exclude_patterns)
        )

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        managed = await create_managed_session(
            request,
            cookie=self._cookie,
            session_storage=self._session_storage,
            rolling=self._rolling,
        )
        request.state.session = managed.session

        response = await call_next(request)
        await managed.finalize_session(response)
        return response
