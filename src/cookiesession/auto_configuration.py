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
"""Build cookies, storages and the session filter from configuration."""

from __future__ import annotations

import importlib

import structlog

from cookiesession.adapters.cookie import CookieSessionStorage
from cookiesession.adapters.memory import create_memory_session_storage
from cookiesession.config import Config, SessionProperties
from cookiesession.cookie import Cookie
from cookiesession.filter import ManagedSessionFilter
from cookiesession.logging import configure_logging
from cookiesession.ports.outbound import SessionStorage

logger = structlog.get_logger("cookiesession.auto_configuration")


def is_available(module_name: str) -> bool:
    """Check if a Python package is importable."""
    try:
        importlib.import_module(module_name)
        return True
    except ImportError:
        return False


def cookie_from_properties(properties: SessionProperties) -> Cookie:
    cookie = properties.cookie
    return Cookie(
        cookie.name,
        secrets=cookie.secrets,
        max_age=cookie.max_age,
        path=cookie.path,
        domain=cookie.domain,
        secure=cookie.secure,
        http_only=cookie.http_only,
        same_site=cookie.same_site,
    )


def session_storage_from_properties(properties: SessionProperties, cookie: Cookie) -> SessionStorage:
    """Select the storage named by ``cookiesession.store``.

    ``redis`` falls back to the in-memory store when ``redis.asyncio`` is
    not installed.
    """
    if properties.store == "redis":
        if is_available("redis.asyncio"):
            import redis.asyncio as aioredis

            from cookiesession.adapters.redis import RedisSessionStrategy
            from cookiesession.adapters.storage import IdSessionStorage

            client = aioredis.from_url(properties.redis.url)  # type: ignore[no-untyped-call,unused-ignore]
            return IdSessionStorage(cookie, RedisSessionStrategy(client, key_prefix=properties.redis.key_prefix))
        logger.warning("redis_unavailable", fallback="memory")
        return create_memory_session_storage(cookie)

    if properties.store == "memory":
        return create_memory_session_storage(cookie)

    return CookieSessionStorage(cookie)


def session_filter_from_config(config: Config) -> ManagedSessionFilter | None:
    """Return a configured filter, or ``None`` when sessions are disabled.

    Logging is configured from the same config first, so the filter's commit,
    destroy and no-op decisions follow ``cookiesession.logging.level``.
    """
    configure_logging(config)
    properties = config.bind(SessionProperties)
    if not properties.enabled:
        return None
    cookie = cookie_from_properties(properties)
    storage = session_storage_from_properties(properties, cookie)
    logger.info("managed_sessions_enabled", store=properties.store, rolling=properties.rolling, cookie=cookie.name)
    return ManagedSessionFilter(cookie=cookie, session_storage=storage, rolling=properties.rolling)
