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
"""Session — key/value session data with one-shot flash entries."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


def _flash_key(name: str) -> str:
    return f"__flash_{name}__"


class Session:
    """Wraps a session data dictionary with convenience accessors.

    Keys keep their insertion order. Flash values are stored under
    ``__flash_<name>__`` and removed the first time they are read.

    Attributes:
        id: The storage identifier; empty for cookie-backed sessions.
    """

    def __init__(self, initial_data: dict[str, Any] | None = None, session_id: str = "") -> None:
        self._id = session_id
        self._data: dict[str, Any] = dict(initial_data) if initial_data else {}

    def __repr__(self) -> str:
        return f"Session(id={self._id!r}, keys={list(self._data)!r})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def data(self) -> dict[str, Any]:
        """A copy of the raw session data, flash entries included."""
        return dict(self._data)

    def has(self, name: str) -> bool:
        return name in self._data or _flash_key(name) in self._data

    def get(self, name: str) -> Any | None:
        """Return the value for *name*, consuming it if it was flashed."""
        if name in self._data:
            return self._data[name]
        return self._data.pop(_flash_key(name), None)

    def set(self, name: str, value: Any) -> None:
        self._data[name] = value

    def flash(self, name: str, value: Any) -> None:
        """Set a value that is removed after its first read."""
        self._data[_flash_key(name)] = value

    def unset(self, name: str) -> None:
        self._data.pop(name, None)


def create_session(initial_data: dict[str, Any] | None = None, session_id: str = "") -> Session:
    return Session(initial_data, session_id)


@runtime_checkable
class SessionLike(Protocol):
    """Structural contract shared by :class:`Session` and managed sessions."""

    @property
    def id(self) -> str: ...

    @property
    def data(self) -> dict[str, Any]: ...

    def has(self, name: str) -> bool: ...

    def get(self, name: str) -> Any | None: ...

    def set(self, name: str, value: Any) -> None: ...

    def flash(self, name: str, value: Any) -> None: ...

    def unset(self, name: str) -> None: ...


def is_session(obj: object) -> bool:
    """Return ``True`` if *obj* behaves like a session."""
    return isinstance(obj, SessionLike) and isinstance(obj.id, str)
