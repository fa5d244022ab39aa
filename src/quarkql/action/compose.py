"""Composition engine - sequencing actions and binding their results.

`pipe` binds the value of one action to a fresh temporary and hands it to
the next; `build_action` lifts nested actions out of argument lists, left
to right; `pop` discards a value; `pipeline` folds finished actions into
one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, TypeVar

from quarkql.action.session import BuildSession, build_session, current_session
from quarkql.action.spec import Action, Preamble
from quarkql.exceptions import MissingStatementError
from quarkql.values import Input, Pending, Variable, as_input
from quarkql.yul import yul

log = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

PIPE_SEPARATOR = " |> "
PIPELINE_HEADER = "Pipeline:"
PIPELINE_BULLET = "\n  * "


def pipe(
    action0: Action[T],
    continuation: Callable[[Variable], Action[U]],
    session: Optional[BuildSession] = None,
) -> Action[U]:
    """Bind the result of `action0` to a fresh temporary and continue.

    Args:
        action0: The producing action. Its last statement is bound.
        continuation: Called with the bound Variable; returns the consumer.
        session: Session issuing the temporary, also used by everything
            the continuation builds. Defaults to the current one.

    Returns:
        The combined action, in producer -> consumer order.

    Raises:
        MissingStatementError: If `action0` has no statements.
    """
    if not action0.statements:
        raise MissingStatementError(action0.description)

    *head, last = action0.statements
    session = session or current_session()
    variable = session.fresh_variable()
    with build_session(session):
        action1 = continuation(variable)

    return Action(
        preamble=action0.preamble.union(action1.preamble),
        statements=(
            *head,
            yul("let {{ var }} := {{ expr }}", var=variable, expr=last),
            *action1.statements,
        ),
        description=f"{action0.description}{PIPE_SEPARATOR}{action1.description}",
    )


def build_action(
    inputs: Sequence[Any],
    generator: Callable[..., Action[T]],
    session: Optional[BuildSession] = None,
) -> Action[T]:
    """Build an action from inputs that may still be pending actions.

    Pending inputs are resolved strictly left to right: the first one is
    piped into a continuation that rebuilds with that position replaced by
    its bound Variable. Once every input is a literal or a Variable,
    `generator(*inputs)` produces the action.

    Args:
        inputs: Values, Variables or Actions.
        generator: Builds the action from resolved operands.
        session: Session issuing temporaries, also used by the generator.
            Defaults to the current one.

    Raises:
        MissingStatementError: If the generator returns no statements.
        TypeError: If an input is neither a Value nor an Action.
    """
    session = session or current_session()
    tagged: list[Input] = [as_input(item) for item in inputs]

    for index, item in enumerate(tagged):
        if isinstance(item, Pending):

            def resume(variable: Variable, index: int = index) -> Action[T]:
                resolved = list(tagged)
                resolved[index] = variable
                return build_action(resolved, generator, session=session)

            return pipe(item.action, resume, session=session)

    with build_session(session):
        action = generator(*tagged)
    if not action.statements:
        raise MissingStatementError(action.description)
    return action


def pop(action: Action[Any]) -> Action[None]:
    """Evaluate the last statement of `action` for its side effect only.

    Raises:
        MissingStatementError: If `action` has no statements.
    """
    if not action.statements:
        raise MissingStatementError(action.description)

    *head, last = action.statements
    return Action(
        preamble=action.preamble,
        statements=(*head, yul("pop({{ expr }})", expr=last)),
        description=action.description,
    )


def pipeline(actions: Sequence[Action[None]]) -> Action[None]:
    """Fold actions into one, in order.

    An empty list is legal and yields an action without statements.
    """
    preamble = Preamble()
    statements: list[str] = []
    description = PIPELINE_HEADER

    for action in actions:
        preamble = preamble.union(action.preamble)
        statements.extend(action.statements)
        description += f"{PIPELINE_BULLET}{action.description}"

    log.debug(
        "Folded %d action(s) into %d statement(s), %d helper(s)",
        len(actions),
        len(statements),
        len(preamble),
    )
    return Action(
        preamble=preamble, statements=tuple(statements), description=description
    )
