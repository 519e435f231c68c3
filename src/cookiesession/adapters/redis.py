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
"""Redis-backed session persistence."""

from __future__ import annotations

import json
import logging
import secrets
from datetime import datetime
from typing import Any, cast

_logger = logging.getLogger(__name__)

_KEY_PREFIX = "cookiesession:session:"


class RedisSessionStrategy:
    """Session records stored in ``redis.asyncio``.

    Values are JSON-serialized before storage and expire at the session's
    cookie expiry. Keys are prefixed with ``cookiesession:session:`` by default.
    """

    def __init__(self, client: Any, key_prefix: str = _KEY_PREFIX) -> None:
        self._client = client
        self._key_prefix = key_prefix

    def _key(self, session_id: str) -> str:
        return f"{self._key_prefix}{session_id}"

    async def create_data(self, data: dict[str, Any], expires: datetime | None) -> str:
        raw = json.dumps(data).encode()
        while True:
            session_id = secrets.token_hex(8)
            created = await self._client.set(self._key(session_id), raw, nx=True, exat=_epoch_seconds(expires))
            if created:
                return session_id

    async def read_data(self, session_id: str) -> dict[str, Any] | None:
        """Retrieve and deserialize session data."""
        raw = await self._client.get(self._key(session_id))
        if raw is None:
            return None
        try:
            return cast(dict[str, Any], json.loads(raw))
        except (json.JSONDecodeError, TypeError):
            _logger.warning("Failed to deserialize session '%s'", session_id)
            return None

    async def update_data(self, session_id: str, data: dict[str, Any], expires: datetime | None) -> None:
        await self._client.set(self._key(session_id), json.dumps(data).encode(), exat=_epoch_seconds(expires))

    async def delete_data(self, session_id: str) -> None:
        await self._client.delete(self._key(session_id))


def _epoch_seconds(expires: datetime | None) -> int | None:
    return int(expires.timestamp()) if expires is not None else None
