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
"""Session storage protocols."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from cookiesession.session import Session


@runtime_checkable
class SessionStorage(Protocol):
    """Loads sessions from a ``Cookie`` header and renders ``Set-Cookie`` directives.

    All storages (cookie-backed, in-memory, Redis, etc.) implement this protocol.
    """

    async def get_session(self, cookie_header: str | None) -> Session: ...

    async def commit_session(self, session: Session, **cookie_options: Any) -> str: ...

    async def destroy_session(self, session: Session, **cookie_options: Any) -> str: ...


@runtime_checkable
class SessionIdStorageStrategy(Protocol):
    """Server-side persistence for sessions whose cookie only carries an id."""

    async def create_data(self, data: dict[str, Any], expires: datetime | None) -> str: ...

    async def read_data(self, session_id: str) -> dict[str, Any] | None: ...

    async def update_data(self, session_id: str, data: dict[str, Any], expires: datetime | None) -> None: ...

    async def delete_data(self, session_id: str) -> None: ...
