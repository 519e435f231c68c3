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
"""Cookie-backed session storage: the whole session travels in the cookie."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from cookiesession.adapters._warnings import warn_once_about_unsigned_cookie
from cookiesession.cookie import Cookie, create_cookie
from cookiesession.exceptions import CookieTooLargeException
from cookiesession.session import Session, create_session

MAX_COOKIE_LENGTH = 4096

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class CookieSessionStorage:
    """Stores session data in the cookie itself.

    No server-side state is kept, so sessions are limited to what fits in
    a single cookie (``MAX_COOKIE_LENGTH`` characters).
    """

    def __init__(self, cookie: Cookie | None = None) -> None:
        self._cookie = cookie if cookie is not None else create_cookie("__session")
        warn_once_about_unsigned_cookie(self._cookie)

    @property
    def cookie(self) -> Cookie:
        return self._cookie

    async def get_session(self, cookie_header: str | None) -> Session:
        data = await self._cookie.parse(cookie_header) if cookie_header else None
        return create_session(data if isinstance(data, dict) else None)

    async def commit_session(self, session: Session, **cookie_options: Any) -> str:
        serialized = await self._cookie.serialize(session.data, **cookie_options)
        if len(serialized) > MAX_COOKIE_LENGTH:
            raise CookieTooLargeException(
                f"Cookie length will exceed browser maximum. Length: {len(serialized)}",
                code="COOKIE_TOO_LARGE",
                context={"cookie": self._cookie.name, "length": len(serialized)},
            )
        return serialized

    async def destroy_session(self, session: Session, **cookie_options: Any) -> str:
        return await self._cookie.serialize("", **{**cookie_options, "max_age": None, "expires": EPOCH})


def create_cookie_session_storage(cookie: Cookie | None = None) -> CookieSessionStorage:
    return CookieSessionStorage(cookie)
