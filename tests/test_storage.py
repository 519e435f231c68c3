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
"""Tests for the cookie-backed, id-based and in-memory session storages."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from cookiesession.adapters import _warnings
from cookiesession.adapters.cookie import CookieSessionStorage, create_cookie_session_storage
from cookiesession.adapters.memory import InMemorySessionStrategy, create_memory_session_storage
from cookiesession.adapters.storage import IdSessionStorage, create_session_storage
from cookiesession.cookie import create_cookie
from cookiesession.exceptions import CookieTooLargeException, SessionStorageException
from cookiesession.ports.outbound import SessionIdStorageStrategy, SessionStorage

DESTROYED = "__session=; Path=/; Expires=Thu, 01 Jan 1970 00:00:00 GMT; SameSite=Lax"


def _cookie(**options):
    return create_cookie("__session", secrets=["s3cret"], **options)


class TestProtocolConformance:
    def test_storages_implement_session_storage(self) -> None:
        assert isinstance(CookieSessionStorage(_cookie()), SessionStorage)
        assert isinstance(create_memory_session_storage(_cookie()), SessionStorage)

    def test_memory_strategy_implements_id_strategy(self) -> None:
        assert isinstance(InMemorySessionStrategy(), SessionIdStorageStrategy)


class TestCookieSessionStorage:
    @pytest.mark.asyncio
    async def test_new_session_is_empty(self) -> None:
        storage = create_cookie_session_storage(_cookie())
        session = await storage.get_session(None)
        assert session.data == {}
        assert session.id == ""

    @pytest.mark.asyncio
    async def test_commit_then_load(self) -> None:
        storage = CookieSessionStorage(_cookie(max_age=600))
        session = await storage.get_session(None)
        session.set("user", "ada")

        directive = await storage.commit_session(session)
        loaded = await storage.get_session(directive.split(";")[0])

        assert loaded.data == {"user": "ada"}

    @pytest.mark.asyncio
    async def test_commit_with_overrides(self) -> None:
        storage = CookieSessionStorage(_cookie(max_age=600))
        session = await storage.get_session(None)
        session.set("user", "ada")

        directive = await storage.commit_session(session, max_age=30, http_only=True)

        assert "Max-Age=30" in directive
        assert "HttpOnly" in directive

    @pytest.mark.asyncio
    async def test_destroy(self) -> None:
        storage = CookieSessionStorage(_cookie(max_age=600))
        session = await storage.get_session(None)
        assert await storage.destroy_session(session) == DESTROYED

    @pytest.mark.asyncio
    async def test_commit_too_large(self) -> None:
        storage = CookieSessionStorage(_cookie())
        session = await storage.get_session(None)
        session.set("blob", "x" * 4096)

        with pytest.raises(CookieTooLargeException) as exc_info:
            await storage.commit_session(session)

        assert isinstance(exc_info.value, SessionStorageException)
        assert exc_info.value.code == "COOKIE_TOO_LARGE"
        assert exc_info.value.context["length"] > 4096

    @pytest.mark.asyncio
    async def test_non_mapping_payload_loads_empty_session(self) -> None:
        cookie = _cookie()
        storage = CookieSessionStorage(cookie)
        header = (await cookie.serialize("just a string")).split(";")[0]

        session = await storage.get_session(header)

        assert session.data == {}

    def test_default_cookie(self) -> None:
        assert CookieSessionStorage().cookie.name == "__session"


class TestUnsignedCookieWarning:
    def test_warns_once_per_cookie_name(self) -> None:
        _warnings._warned_unsigned.discard("unsigned_sid")
        with patch.object(_warnings, "logger") as logger:
            CookieSessionStorage(create_cookie("unsigned_sid"))
            CookieSessionStorage(create_cookie("unsigned_sid"))

        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["cookie"] == "unsigned_sid"

    def test_signed_cookie_does_not_warn(self) -> None:
        with patch.object(_warnings, "logger") as logger:
            CookieSessionStorage(create_cookie("signed_sid", secrets=["k"]))

        logger.warning.assert_not_called()


class TestIdSessionStorage:
    @pytest.mark.asyncio
    async def test_commit_creates_record_and_serializes_id(self) -> None:
        strategy = InMemorySessionStrategy()
        cookie = _cookie(max_age=600)
        storage = create_session_storage(cookie, strategy)
        session = await storage.get_session(None)
        session.set("user", "ada")

        directive = await storage.commit_session(session)
        session_id = await cookie.parse(directive)

        assert isinstance(session_id, str)
        assert await strategy.read_data(session_id) == {"user": "ada"}

    @pytest.mark.asyncio
    async def test_commit_updates_existing_record(self) -> None:
        strategy = InMemorySessionStrategy()
        cookie = _cookie(max_age=600)
        storage = IdSessionStorage(cookie, strategy)
        first = await storage.get_session(None)
        first.set("n", 1)
        header = (await storage.commit_session(first)).split(";")[0]

        loaded = await storage.get_session(header)
        loaded.set("n", 2)
        await storage.commit_session(loaded)

        assert len(strategy) == 1
        assert await strategy.read_data(loaded.id) == {"n": 2}

    @pytest.mark.asyncio
    async def test_destroy_deletes_record(self) -> None:
        strategy = InMemorySessionStrategy()
        storage = IdSessionStorage(_cookie(max_age=600), strategy)
        session = await storage.get_session(None)
        session.set("n", 1)
        header = (await storage.commit_session(session)).split(";")[0]
        loaded = await storage.get_session(header)

        directive = await storage.destroy_session(loaded)

        assert directive == DESTROYED
        assert len(strategy) == 0

    @pytest.mark.asyncio
    async def test_unknown_id_loads_empty_session(self) -> None:
        cookie = _cookie()
        storage = IdSessionStorage(cookie, InMemorySessionStrategy())
        header = (await cookie.serialize("deadbeef")).split(";")[0]

        session = await storage.get_session(header)

        assert session.id == "deadbeef"
        assert session.data == {}

    @pytest.mark.asyncio
    async def test_expiry_prefers_max_age_override(self) -> None:
        strategy = InMemorySessionStrategy()
        storage = IdSessionStorage(_cookie(), strategy)
        session = await storage.get_session(None)
        session.set("n", 1)

        with patch.object(strategy, "create_data", wraps=strategy.create_data) as create_data:
            await storage.commit_session(session, max_age=60)

        expires = create_data.call_args.args[1]
        assert timedelta(seconds=50) < expires - datetime.now(UTC) <= timedelta(seconds=60)


class TestInMemorySessionStrategy:
    @pytest.mark.asyncio
    async def test_read_missing(self) -> None:
        assert await InMemorySessionStrategy().read_data("missing") is None

    @pytest.mark.asyncio
    async def test_expired_records_are_dropped(self) -> None:
        strategy = InMemorySessionStrategy()
        session_id = await strategy.create_data({"n": 1}, datetime.now(UTC) - timedelta(seconds=1))

        assert await strategy.read_data(session_id) is None
        assert len(strategy) == 0

    @pytest.mark.asyncio
    async def test_records_without_expiry_persist(self) -> None:
        strategy = InMemorySessionStrategy()
        session_id = await strategy.create_data({"n": 1}, None)

        assert await strategy.read_data(session_id) == {"n": 1}

    @pytest.mark.asyncio
    async def test_ids_are_unique_hex(self) -> None:
        strategy = InMemorySessionStrategy()
        ids = {await strategy.create_data({}, None) for _ in range(20)}
        assert len(ids) == 20
        assert all(len(i) == 16 for i in ids)

    @pytest.mark.asyncio
    async def test_delete_missing_is_ignored(self) -> None:
        await InMemorySessionStrategy().delete_data("missing")
