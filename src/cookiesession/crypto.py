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
"""HMAC-SHA256 cookie signing.

A signed value has the form ``<value>.<signature>`` where the signature is
the standard-alphabet base64 HMAC digest with its ``=`` padding stripped.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac


def _digest(value: str, secret: str) -> bytes:
    return hmac.new(secret.encode(), value.encode(), hashlib.sha256).digest()


def sign(value: str, secret: str) -> str:
    """Append an HMAC-SHA256 signature of *value* keyed by *secret*."""
    signature = base64.b64encode(_digest(value, secret)).decode("ascii").rstrip("=")
    return f"{value}.{signature}"


def unsign(signed: str, secret: str) -> str | None:
    """Verify *signed* against *secret*.

    Returns:
        The original value, or ``None`` if the signature is missing,
        malformed or does not match.
    """
    index = signed.rfind(".")
    if index == -1:
        return None
    value, encoded = signed[:index], signed[index + 1 :]
    try:
        signature = base64.b64decode(encoded + "=" * (-len(encoded) % 4), validate=True)
    except (binascii.Error, ValueError):
        return None
    if not hmac.compare_digest(signature, _digest(value, secret)):
        return None
    return value
