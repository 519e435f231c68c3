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
"""Cookie — named, optionally signed cookie codec.

Values are encoded as base64 of their compact JSON form and, when secrets
are configured, signed with the first secret. Any configured secret is
accepted on parse so secrets can be rotated by prepending a new one.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
import re
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime
from typing import Any
from urllib.parse import quote, unquote

from starlette.requests import cookie_parser

from cookiesession.crypto import sign, unsign
from cookiesession.exceptions import InvalidCookieOptionException

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

# Characters left untouched by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "!'()*-._~"

_SAME_SITE_VALUES = {"lax": "Lax", "strict": "Strict", "none": "None"}
_PRIORITY_VALUES = {"low": "Low", "medium": "Medium", "high": "High"}


def encode_data(value: Any) -> str:
    raw = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_data(value: str) -> Any:
    """Decode a base64 JSON payload, returning ``{}`` when it is unreadable."""
    try:
        raw = base64.b64decode(value + "=" * (-len(value) % 4))
        return json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return {}


def _format_expires(expires: datetime) -> str:
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=UTC)
    return format_datetime(expires.astimezone(UTC), usegmt=True)


class Cookie:
    """A named HTTP cookie with default attributes.

    Attribute keyword arguments given to :meth:`serialize` override the
    defaults for that call; passing ``None`` removes the attribute.
    """

    def __init__(
        self,
        name: str,
        *,
        secrets: Sequence[str] = (),
        max_age: int | None = None,
        expires: datetime | None = None,
        path: str | None = "/",
        domain: str | None = None,
        secure: bool = False,
        http_only: bool = False,
        same_site: str | bool | None = "lax",
        partitioned: bool = False,
        priority: str | None = None,
    ) -> None:
        if not _TOKEN_RE.match(name):
            raise InvalidCookieOptionException(f"Invalid cookie name: {name!r}", code="COOKIE_NAME")
        self._name = name
        self._secrets = list(secrets)
        self._options: dict[str, Any] = {
            "max_age": max_age,
            "expires": expires,
            "path": path,
            "domain": domain,
            "secure": secure,
            "http_only": http_only,
            "same_site": same_site,
            "partitioned": partitioned,
            "priority": priority,
        }

    def __repr__(self) -> str:
        return f"Cookie(name={self._name!r}, signed={self.is_signed})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_signed(self) -> bool:
        return len(self._secrets) > 0

    @property
    def expires(self) -> datetime | None:
        """Expiry of a cookie serialized now; ``max_age`` wins over ``expires``."""
        max_age = self._options["max_age"]
        if max_age is not None:
            return datetime.now(UTC) + timedelta(seconds=max_age)
        return self._options["expires"]

    async def parse(self, cookie_header: str | None) -> Any | None:
        """Read this cookie's value from a ``Cookie`` header.

        Returns:
            ``None`` if the header is missing, does not contain the cookie, or
            no secret verifies its signature; ``""`` for an empty value;
            otherwise the decoded value.
        """
        if not cookie_header:
            return None
        value = self._first_value(cookie_header)
        if value is None:
            return None
        if "%" in value:
            value = unquote(value)
        if value == "":
            return ""
        return self._decode_value(value)

    def _first_value(self, cookie_header: str) -> str | None:
        """Return the first value sent under this name."""
        for chunk in cookie_header.split(";"):
            cookies = cookie_parser(chunk)
            if self._name in cookies:
                return cookies[self._name]
        return None

    async def serialize(self, value: Any, **overrides: Any) -> str:
        """Render a ``Set-Cookie`` header value for *value*."""
        unknown = set(overrides) - set(self._options)
        if unknown:
            raise InvalidCookieOptionException(
                f"Unknown cookie option(s): {', '.join(sorted(unknown))}", code="COOKIE_OPTION"
            )
        options = {**self._options, **overrides}
        encoded = "" if value == "" else self._encode_value(value)
        return self._render(quote(encoded, safe=_URI_COMPONENT_SAFE), options)

    def _encode_value(self, value: Any) -> str:
        encoded = encode_data(value)
        if self._secrets:
            encoded = sign(encoded, self._secrets[0])
        return encoded

    def _decode_value(self, value: str) -> Any | None:
        if not self._secrets:
            return decode_data(value)
        for secret in self._secrets:
            unsigned = unsign(value, secret)
            if unsigned is not None:
                return decode_data(unsigned)
        return None

    def _render(self, encoded: str, options: dict[str, Any]) -> str:
        parts = [f"{self._name}={encoded}"]

        if options["max_age"] is not None:
            parts.append(f"Max-Age={math.floor(options['max_age'])}")
        if options["domain"]:
            parts.append(f"Domain={options['domain']}")
        if options["path"]:
            parts.append(f"Path={options['path']}")
        if options["expires"] is not None:
            parts.append(f"Expires={_format_expires(options['expires'])}")
        if options["http_only"]:
            parts.append("HttpOnly")
        if options["secure"]:
            parts.append("Secure")
        if options["partitioned"]:
            parts.append("Partitioned")
        if options["priority"]:
            priority = _PRIORITY_VALUES.get(str(options["priority"]).lower())
            if priority is None:
                raise InvalidCookieOptionException(
                    f"Invalid cookie priority: {options['priority']!r}", code="COOKIE_PRIORITY"
                )
            parts.append(f"Priority={priority}")
        same_site = options["same_site"]
        if same_site:
            if same_site is True:
                parts.append("SameSite=Strict")
            else:
                label = _SAME_SITE_VALUES.get(str(same_site).lower())
                if label is None:
                    raise InvalidCookieOptionException(
                        f"Invalid cookie SameSite value: {same_site!r}", code="COOKIE_SAMESITE"
                    )
                parts.append(f"SameSite={label}")

        return "; ".join(parts)


def create_cookie(name: str, **options: Any) -> Cookie:
    return Cookie(name, **options)


def is_cookie(obj: object) -> bool:
    return isinstance(obj, Cookie)
