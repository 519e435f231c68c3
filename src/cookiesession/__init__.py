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
"""cookiesession — managed, cookie-backed HTTP sessions.

Wraps a session loaded from a storage backend and, once the request has been
handled, commits it, destroys it, or leaves the response untouched depending
on how its data changed.

Import concrete storage types from the adapter package::

    from cookiesession.adapters.cookie import CookieSessionStorage
    from cookiesession.adapters.memory import create_memory_session_storage
"""

from cookiesession.cookie import Cookie, create_cookie, is_cookie
from cookiesession.filter import ManagedSessionFilter
from cookiesession.managed import ManagedSession, ManagedSessionResult, create_managed_session
from cookiesession.middleware import ManagedSessionMiddleware
from cookiesession.ports.outbound import SessionIdStorageStrategy, SessionStorage
from cookiesession.session import Session, create_session, is_session

__all__ = [
    "Cookie",
    "ManagedSession",
    "ManagedSessionFilter",
    "ManagedSessionMiddleware",
    "ManagedSessionResult",
    "Session",
    "SessionIdStorageStrategy",
    "SessionStorage",
    "create_cookie",
    "create_managed_session",
    "create_session",
    "is_cookie",
    "is_session",
]
