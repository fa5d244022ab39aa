"""Actions - composable Yul fragments and the engine that sequences them."""

from quarkql.action.compose import build_action, pipe, pipeline, pop
from quarkql.action.session import (
    BuildSession,
    build_session,
    current_session,
    release_session,
    reset_session,
)
from quarkql.action.spec import Action, Preamble

__all__ = [
    "Action",
    "Preamble",
    "BuildSession",
    "build_session",
    "current_session",
    "reset_session",
    "release_session",
    "build_action",
    "pipe",
    "pipeline",
    "pop",
]
