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

"""Design by contract utilities for :mod:`plfile`.

Contracts are off unless the ``PLFILE_DBC`` environment variable is truthy or
enforcement is forced through :func:`enable_dbc` / :func:`dbc_enabled`. A
predicate returns ``True``/``False`` or a ``(bool, detail)`` tuple; failures
raise ``AssertionError``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from functools import wraps
from typing import ParamSpec, TypeVar, cast

P = ParamSpec("P")
R = TypeVar("R")
T = TypeVar("T", bound=object)

type ContractResult = bool | tuple[bool, *tuple[object, ...]] | None
ContractCallable = Callable[..., ContractResult | object]

_ENV_FLAG = "PLFILE_DBC"
_forced_state: bool | None = None


def _coerce_flag(value: str | None) -> bool:
    if value is None:
        return False
    lowered = value.strip().lower()
    return lowered not in {"", "0", "false", "off", "no"}


def dbc_active() -> bool:
    """Return ``True`` when DbC checks should run."""

    if _forced_state is not None:
        return _forced_state
    return _coerce_flag(os.getenv(_ENV_FLAG))


def enable_dbc() -> None:
    """Force DbC enforcement on."""

    global _forced_state
    _forced_state = True


def disable_dbc() -> None:
    """Force DbC enforcement off."""

    global _forced_state
    _forced_state = False


@contextmanager
def dbc_enabled(*, active: bool = True) -> Iterator[None]:
    """Temporarily set the DbC flag inside a ``with`` block."""

    global _forced_state
    previous = _forced_state
    _forced_state = active
    try:
        yield
    finally:
        _forced_state = previous


def _qualname(target: object) -> str:
    return getattr(target, "__qualname__", repr(target))


def _normalize_contract_result(
    result: ContractResult | object,
) -> tuple[bool, str | None]:
    if isinstance(result, tuple):
        sequence_result = cast(Sequence[object], result)
        if not sequence_result:
            msg = "Contract callables must not return empty tuples"
            raise TypeError(msg)
        outcome = bool(sequence_result[0])
        message = None if len(sequence_result) == 1 else str(sequence_result[1])
        return outcome, message
    if result is None:
        return False, None
    return bool(result), None


def _evaluate_contract(
    *,
    kind: str,
    func: Callable[..., object],
    predicate: ContractCallable,
    args: tuple[object, ...],
    kwargs: Mapping[str, object],
) -> None:
    try:
        result = predicate(*args, **kwargs)
    except AssertionError:
        raise
    except Exception as exc:
        msg = (
            f"{kind} contract for {_qualname(func)} raised {type(exc).__name__}: {exc}"
        )
        raise AssertionError(msg) from exc
    outcome, detail = _normalize_contract_result(result)
    if outcome:
        return
    predicate_name = getattr(predicate, "__name__", repr(predicate))
    msg = (
        f"{kind} contract for {_qualname(func)} failed via {predicate_name}."
        f" Args={args!r} Kwargs={kwargs!r}"
    )
    if detail:
        msg = f"{msg} Details: {detail}"
    raise AssertionError(msg)


def require(
    *predicates: ContractCallable,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Validate preconditions before invoking the wrapped callable."""

    if not predicates:
        msg = "@require expects at least one predicate"
        raise ValueError(msg)

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
            if dbc_active():
                for predicate in predicates:
                    _evaluate_contract(
                        kind="require",
                        func=func,
                        predicate=predicate,
                        args=tuple(args),
                        kwargs=dict(kwargs),
                    )
            return func(*args, **kwargs)

        return wrapped

    return decorator


def ensure(*predicates: ContractCallable) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Validate postconditions once the callable returns.

    Predicates receive the call arguments plus ``result=`` as a keyword.
    """

    if not predicates:
        msg = "@ensure expects at least one predicate"
        raise ValueError(msg)

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
            result = func(*args, **kwargs)
            if dbc_active():
                for predicate in predicates:
                    _evaluate_contract(
                        kind="ensure",
                        func=func,
                        predicate=predicate,
                        args=tuple(args),
                        kwargs={**kwargs, "result": result},
                    )
            return result

        return wrapped

    return decorator


def invariant(*predicates: ContractCallable) -> Callable[[type[T]], type[T]]:
    """Check class invariants after ``__init__`` and around public methods."""

    if not predicates:
        msg = "@invariant expects at least one predicate"
        raise ValueError(msg)

    def check(instance: object, func: Callable[..., object]) -> None:
        for predicate in predicates:
            _evaluate_contract(
                kind="invariant",
                func=func,
                predicate=predicate,
                args=(instance,),
                kwargs={},
            )

    def wrap_method(method: Callable[..., object]) -> Callable[..., object]:
        @wraps(method)
        def wrapper(self: object, *args: object, **kwargs: object) -> object:
            if not dbc_active():
                return method(self, *args, **kwargs)
            check(self, method)
            try:
                return method(self, *args, **kwargs)
            finally:
                check(self, method)

        return wrapper

    def decorator(cls: type[T]) -> type[T]:
        original_init = cls.__init__

        @wraps(original_init)
        def init_wrapper(self: object, *args: object, **kwargs: object) -> None:
            original_init(self, *args, **kwargs)
            if dbc_active():
                check(self, original_init)

        type.__setattr__(cls, "__init__", init_wrapper)

        for name, attribute in list(cls.__dict__.items()):
            if name.startswith("_") or not callable(attribute):
                continue
            if isinstance(attribute, (staticmethod, classmethod)):
                continue
            setattr(cls, name, wrap_method(attribute))
        return cls

    return decorator


__all__ = [
    "ContractResult",
    "dbc_active",
    "dbc_enabled",
    "disable_dbc",
    "enable_dbc",
    "ensure",
    "invariant",
    "require",
]
