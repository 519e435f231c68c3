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
"""Tests for Session — accessors, flash values and is_session."""

from types import SimpleNamespace

from cookiesession.session import Session, create_session, is_session


class TestSession:
    def test_defaults(self):
        session = create_session()
        assert session.id == ""
        assert session.data == {}

    def test_initial_data_is_copied(self):
        initial = {"a": 1}
        session = Session(initial, "abc")
        session.set("b", 2)
        assert initial == {"a": 1}
        assert session.id == "abc"

    def test_data_returns_a_copy(self):
        session = create_session({"a": 1})
        session.data["a"] = 2
        assert session.get("a") == 1

    def test_set_get_unset(self):
        session = create_session()
        session.set("user", "ada")
        assert session.has("user")
        assert session.get("user") == "ada"
        session.unset("user")
        assert not session.has("user")
        assert session.get("user") is None

    def test_unset_missing_key_is_ignored(self):
        session = create_session()
        session.unset("missing")
        assert session.data == {}

    def test_flash_is_read_once(self):
        session = create_session()
        session.flash("notice", "saved")
        assert session.data == {"__flash_notice__": "saved"}
        assert session.get("notice") == "saved"
        assert session.get("notice") is None
        assert session.data == {}

    def test_plain_value_wins_over_flash(self):
        session = create_session()
        session.flash("notice", "flashed")
        session.set("notice", "plain")
        assert session.get("notice") == "plain"
        assert session.has("notice")

    def test_insertion_order_is_kept(self):
        session = create_session({"b": 1})
        session.set("a", 2)
        assert list(session.data) == ["b", "a"]


class TestIsSession:
    def test_session(self):
        assert is_session(create_session())

    def test_plain_objects(self):
        assert not is_session({"id": "", "data": {}})
        assert not is_session(SimpleNamespace(id="x", data={}))
