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
"""Id-based session storage: the cookie carries an id, data lives server-side."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from cookiesession.adapters._warnings import warn_once_about_unsigned_cookie
from cookiesession.adapters.cookie import EPOCH
from cookiesession.cookie import Cookie, create_cookie
from cookiesession.ports.outbound import SessionIdStorageStrategy
from cookiesession.session import Session, create_session


class IdSessionStorage:
    """Session storage delegating persistence to a :class:`SessionIdStorageStrategy`."""

    def __init__(self, cookie: Cookie | None, strategy: SessionIdStorageStrategy) -> None:
        self._cookie = cookie if cookie is not None else create_cookie("__session")
        self._strategy = strategy
        warn_once_about_unsigned_cookie(self._cookie)

    @property
    def cookie(self) -> Cookie:
        return self._cookie

    async def get_session(self, cookie_header: str | None) -> Session:
        session_id = await self._cookie.parse(cookie_header) if cookie_header else None
        if not isinstance(session_id, str) or not session_id:
            return create_session()
        data = await self._strategy.read_data(session_id)
        return create_session(data, session_id)

    async def commit_session(self, session: Session, **cookie_options: Any) -> str:
        expires = self._resolve_expiry(cookie_options)
        session_id = session.id
        if session_id:
            await self._strategy.update_data(session_id, session.data, expires)
        else:
            session_id = await self._strategy.create_data(session.data, expires)
        return await self._cookie.serialize(session_id, **cookie_options)

    async def destroy_session(self, session: Session, **cookie_options: Any) -> str:
        if session.id:
            await self._strategy.delete_data(session.id)
        return await self._cookie.serialize("", **{**cookie_options, "max_age": None, "expires": EPOCH})

    def _resolve_expiry(self, cookie_options: dict[str, Any]) -> datetime | None:
        if cookie_options.get("max_age") is not None:
            return datetime.now(UTC) + timedelta(seconds=cookie_options["max_age"])
        if cookie_options.get("expires") is not None:
            return cookie_options["expires"]
        return self._cookie.expires


def create_session_storage(cookie: Cookie | None, strategy: SessionIdStorageStrategy) -> IdSessionStorage:
    return IdSessionStorage(cookie, strategy)
