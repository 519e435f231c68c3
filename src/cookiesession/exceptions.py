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
"""Exception hierarchy for cookiesession.

The managed-session finalizer defines no failures of its own; these are
raised by the bundled collaborators (cookie codec and storage backends) and
propagate unchanged through ``create_managed_session`` and
``finalize_session``.

Categories:
- InvalidCookieOptionException: Bad cookie configuration
- SessionStorageException: Failures while persisting or serializing sessions
"""

from __future__ import annotations


class CookieSessionException(Exception):
    """Base exception for all cookiesession errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "COOKIE_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class InvalidCookieOptionException(CookieSessionException):
    """A cookie was configured with an unsupported attribute value."""


class SessionStorageException(CookieSessionException):
    """A storage backend failed to read, write or serialize a session."""


class CookieTooLargeException(SessionStorageException):
    """The serialized session cookie exceeds the browser maximum."""
