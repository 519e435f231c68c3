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
"""One-time warnings shared by the storage adapters."""

from __future__ import annotations

import structlog

from cookiesession.cookie import Cookie

logger = structlog.get_logger("cookiesession.storage")

_warned_unsigned: set[str] = set()


def warn_once_about_unsigned_cookie(cookie: Cookie) -> None:
    if cookie.is_signed or cookie.name in _warned_unsigned:
        return
    _warned_unsigned.add(cookie.name)
    logger.warning(
        "session_cookie_not_signed",
        cookie=cookie.name,
        hint="session cookies should be signed to prevent client-side tampering",
    )
