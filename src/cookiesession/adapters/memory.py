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
"""In-memory session persistence with expiry."""

from __future__ import annotations

import asyncio
import secrets
from datetime import UTC, datetime
from typing import Any

from cookiesession.adapters.storage import IdSessionStorage
from cookiesession.cookie import Cookie


class InMemorySessionStrategy:
    """In-memory session records guarded by an asyncio.Lock.

    Suitable for development, testing, and single-process applications.
    Expired records are dropped when they are next read.
    """

    def __init__(self) -> None:
        self._store: dict[str, tuple[dict[str, Any], datetime | None]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._store)

    async def create_data(self, data: dict[str, Any], expires: datetime | None) -> str:
        """Store *data* under a fresh random id and return the id."""
        async with self._lock:
            while True:
                session_id = secrets.token_hex(8)
                if session_id not in self._store:
                    break
            self._store[session_id] = (dict(data), expires)
            return session_id

    async def read_data(self, session_id: str) -> dict[str, Any] | None:
        """Return session data, or ``None`` if missing or expired."""
        async with self._lock:
            entry = self._store.get(session_id)
            if entry is None:
                return None

            data, expires = entry
            if expires is not None and expires < datetime.now(UTC):
                del self._store[session_id]
                return None

            return dict(data)

    async def update_data(self, session_id: str, data: dict[str, Any], expires: datetime | None) -> None:
        async with self._lock:
            self._store[session_id] = (dict(data), expires)

    async def delete_data(self, session_id: str) -> None:
        async with self._lock:
            self._store.pop(session_id, None)


def create_memory_session_storage(cookie: Cookie | None = None) -> IdSessionStorage:
    return IdSessionStorage(cookie, InMemorySessionStrategy())
