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

"""Tests for the internal design-by-contract helpers."""

from __future__ import annotations

import pytest

from plfile import dbc
from plfile.dbc import (
    dbc_active,
    dbc_enabled,
    disable_dbc,
    enable_dbc,
    ensure,
    invariant,
    require,
)


def test_require_allows_valid_inputs() -> None:
    @require(lambda value: value > 0)
    def square(value: int) -> int:
        return value * value

    assert square(4) == 16


def test_require_rejects_invalid_inputs() -> None:
    @require(lambda value: (value > 0, "value must be positive"))
    def cube(value: int) -> int:
        return value**3

    with pytest.raises(AssertionError) as exc:
        cube(-1)

    assert "value must be positive" in str(exc.value)
    assert "cube" in str(exc.value)


def test_ensure_validates_return_values() -> None:
    @ensure(lambda value, result: result >= value)
    def increment(value: int) -> int:
        return value + 1

    assert increment(1) == 2


def test_ensure_rejects_bad_results() -> None:
    @ensure(lambda value, result: result > value)
    def broken(value: int) -> int:
        return value

    with pytest.raises(AssertionError, match="ensure contract"):
        broken(3)


def test_predicate_exceptions_become_assertions() -> None:
    def explode(value: int) -> bool:
        raise RuntimeError("boom")

    @require(explode)
    def target(value: int) -> int:
        return value

    with pytest.raises(AssertionError, match="raised RuntimeError: boom"):
        target(1)


def test_predicate_returning_none_fails() -> None:
    @require(lambda value: None)
    def target(value: int) -> int:
        return value

    with pytest.raises(AssertionError):
        target(1)


def test_empty_tuple_is_rejected() -> None:
    @require(lambda value: ())
    def target(value: int) -> int:
        return value

    with pytest.raises(TypeError):
        target(1)


@pytest.mark.parametrize("factory", [require, ensure, invariant])
def test_decorators_need_predicates(factory: object) -> None:
    with pytest.raises(ValueError):
        factory()  # type: ignore[operator]


@invariant(lambda self: (self.count >= 0, "count must stay non-negative"))
class _Counter:
    def __init__(self, count: int = 0) -> None:
        self.count = count

    def add(self, amount: int) -> int:
        self.count += amount
        return self.count

    def _force(self, amount: int) -> None:
        self.count = amount


class TestInvariant:
    def test_checked_after_init(self) -> None:
        with pytest.raises(AssertionError, match="non-negative"):
            _Counter(-1)

    def test_checked_after_public_method(self) -> None:
        counter = _Counter()
        assert counter.add(2) == 2
        with pytest.raises(AssertionError):
            counter.add(-5)

    def test_private_methods_are_not_wrapped(self) -> None:
        counter = _Counter()
        counter._force(-1)  # pyright: ignore[reportPrivateUsage]
        assert counter.count == -1

    def test_skipped_when_inactive(self) -> None:
        with dbc_enabled(active=False):
            counter = _Counter(-1)
            assert counter.add(-1) == -2


class TestToggles:
    @pytest.fixture
    def unforced(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(dbc, "_forced_state", None)

    @pytest.mark.usefixtures("unforced")
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1", True),
            ("true", True),
            ("yes", True),
            ("0", False),
            ("false", False),
            ("Off", False),
            ("", False),
        ],
    )
    def test_environment_flag(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        monkeypatch.setenv("PLFILE_DBC", value)
        assert dbc_active() is expected

    @pytest.mark.usefixtures("unforced")
    def test_unset_environment_is_inactive(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("PLFILE_DBC", raising=False)
        assert dbc_active() is False

    @pytest.mark.usefixtures("unforced")
    def test_enable_and_disable_override_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PLFILE_DBC", "0")
        enable_dbc()
        assert dbc_active() is True
        monkeypatch.setenv("PLFILE_DBC", "1")
        disable_dbc()
        assert dbc_active() is False

    def test_context_manager_restores_previous_state(self) -> None:
        assert dbc_active() is True
        with dbc_enabled(active=False):
            assert dbc_active() is False
            with dbc_enabled():
                assert dbc_active() is True
            assert dbc_active() is False
        assert dbc_active() is True
