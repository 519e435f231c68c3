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
"""Tests for the exception hierarchy."""

from cookiesession.exceptions import (
    CookieSessionException,
    CookieTooLargeException,
    InvalidCookieOptionException,
    SessionStorageException,
)


class TestExceptions:
    def test_hierarchy(self):
        assert issubclass(InvalidCookieOptionException, CookieSessionException)
        assert issubclass(SessionStorageException, CookieSessionException)
        assert issubclass(CookieTooLargeException, SessionStorageException)

    def test_code_and_context(self):
        exc = CookieTooLargeException("too big", code="COOKIE_TOO_LARGE", context={"length": 5000})
        assert str(exc) == "too big"
        assert exc.code == "COOKIE_TOO_LARGE"
        assert exc.context == {"length": 5000}

    def test_context_defaults_to_empty_dict(self):
        exc = CookieSessionException("boom")
        assert exc.code is None
        assert exc.context == {}
