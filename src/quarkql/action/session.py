"""Build sessions - per-build name issuance for temporaries and helpers.

A `with build_session():` block pins one session for everything built
inside it, including asyncio tasks it spawns. Outside such a block each
thread and each asyncio task gets its own implicit session, created on
first use and dropped by `release_session()` (which `prepare` calls), so
concurrent or back-to-back builds never interleave their numbering.
"""

from __future__ import annotations

import asyncio
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from quarkql.values import Variable

VARIABLE_PREFIX = "__v__"
INVOCATION_PREFIX = "__invocation__"


class BuildSession:
    """Counters used while composing one script."""

    def __init__(self) -> None:
        self._next_variable = 0
        self._next_invocation = 0

    def fresh_variable(self) -> Variable:
        """Issue the next temporary (`__v__0`, `__v__1`, ...)."""
        variable = Variable(f"{VARIABLE_PREFIX}{self._next_variable}")
        self._next_variable += 1
        return variable

    def fresh_invocation_name(self) -> str:
        """Issue the next invocation helper name."""
        name = f"{INVOCATION_PREFIX}{self._next_invocation}"
        self._next_invocation += 1
        return name

    def reset(self) -> None:
        self._next_variable = 0
        self._next_invocation = 0

    def __repr__(self) -> str:
        return (
            f"BuildSession(next_variable={self._next_variable}, "
            f"next_invocation={self._next_invocation})"
        )


class _Scope:
    """A session bound to a context.

    `owner` is None for sessions opened with `build_session`, which are
    shared with every child context. Implicit sessions record the task or
    thread that created them and are invisible to any other.
    """

    __slots__ = ("session", "owner")

    def __init__(self, session: BuildSession, owner: object = None):
        self.session = session
        self.owner = owner


_current: ContextVar[Optional[_Scope]] = ContextVar(
    "quarkql_build_session", default=None
)


def _owner() -> object:
    """The running asyncio task, or the current thread outside of one."""
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    return task if task is not None else threading.get_ident()


def current_session() -> BuildSession:
    """Return the session of the current context, creating one if needed."""
    scope = _current.get()
    if scope is not None and scope.owner is None:
        return scope.session

    owner = _owner()
    if scope is None or scope.owner != owner:
        scope = _Scope(BuildSession(), owner)
        _current.set(scope)
    return scope.session


def reset_session() -> None:
    """Restart numbering for the current context."""
    current_session().reset()


def release_session() -> None:
    """Drop the implicit session of the current context.

    The next build in this context starts from `__v__0` again. Sessions
    opened with `build_session` are left alone.
    """
    scope = _current.get()
    if scope is not None and scope.owner is not None:
        _current.set(None)


@contextmanager
def build_session(session: Optional[BuildSession] = None) -> Iterator[BuildSession]:
    """Run a block of composition calls against a dedicated session.

    Example:
        with build_session():
            action = pipeline([pop(add(Uint256(1), Uint256(2)))])
    """
    session = session or BuildSession()
    token = _current.set(_Scope(session))
    try:
        yield session
    finally:
        _current.reset(token)
