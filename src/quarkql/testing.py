"""Test helpers: a canned compiler and small arithmetic fragments."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from quarkql.action.compose import build_action
from quarkql.action.spec import Action
from quarkql.command.compiler import BYTECODE_OUTPUT, Compiler, Language
from quarkql.exceptions import CompileFailureError
from quarkql.values import Uint256, Value
from quarkql.yul import yul


class StaticCompiler(Compiler):
    """Compiler returning fixed outputs and recording every request."""

    def __init__(self, outputs: Dict[str, str]):
        self.outputs = dict(outputs)
        self.requests: List[Tuple[str, Language, Optional[str], str]] = []

    def compile(
        self,
        source: str,
        language: Language,
        target: Optional[str] = None,
        output: str = BYTECODE_OUTPUT,
    ) -> Dict[str, str]:
        self.requests.append((source, language, target, output))
        if target is None:
            return dict(self.outputs)
        if target not in self.outputs:
            raise CompileFailureError(f"No canned output for {target!r}")
        return {target: self.outputs[target]}


def add(x: Any, y: Any) -> Action[Uint256]:
    def generate(x: Value, y: Value) -> Action[Uint256]:
        return Action.create(
            preamble=yul(
                """
                function _add(x, y) -> r {
                  r := add(x, y)
                }
                """
            ),
            statements=yul("_add({{ x }}, {{ y }})", x=x, y=y),
            description=f"Add {x.get()} and {y.get()}",
        )

    return build_action([x, y], generate)


def sub(x: Any, y: Any) -> Action[Uint256]:
    def generate(x: Value, y: Value) -> Action[Uint256]:
        return Action.create(
            preamble=yul(
                """
                function _sub(x, y) -> r {
                  r := sub(x, y)
                }
                """
            ),
            statements=yul("_sub({{ x }}, {{ y }})", x=x, y=y),
            description=f"Subtract {y.get()} from {x.get()}",
        )

    return build_action([x, y], generate)
