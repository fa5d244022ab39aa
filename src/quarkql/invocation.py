"""Invocations - raw transactions as actions.

A transaction `{"to": ..., "data": ..., "value": ...}` becomes a generated
helper that stores the calldata in freshly allocated memory and calls the
target. Helper names come from the build session.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, TypeVar

from quarkql.action.compose import build_action, pipeline
from quarkql.action.session import BuildSession, current_session
from quarkql.action.spec import Action
from quarkql.command.assembler import prepare
from quarkql.command.compiler import Compiler
from quarkql.command.config import CompileSettings
from quarkql.command.spec import Command
from quarkql.utils import to_bytes, to_hex
from quarkql.values import Address, Uint256
from quarkql.yul import yul

T = TypeVar("T")

WORD_SIZE = 32

INVOCATION_TEMPLATE = """
function {{ name }}(){% if return_size %} -> r{% endif %} {
  let data := allocate({{ data_size | hex }})
  {%- if return_size %}
  let res := allocate({{ return_size | hex }})
  {%- endif %}
  {%- for offset, word in words %}
  mstore(add(data, {{ offset | hex }}), 0x{{ word }})
  {%- endfor %}
  pop(call(gas(), {{ to }}, {{ value }}, data, {{ data_size | hex }}, {{ "res" if return_size else "0" }}, {{ return_size | hex }}))
  {%- if return_size %}
  r := mload(res)
  {%- endif %}
}
"""


def calldata_words(data: bytes) -> list[tuple[int, str]]:
    """Split calldata into (offset, 32-byte word) pairs, right-padding the last."""
    return [
        (offset, data[offset : offset + WORD_SIZE].hex().ljust(WORD_SIZE * 2, "0"))
        for offset in range(0, len(data), WORD_SIZE)
    ]


def invoke_internal(
    tx: Mapping[str, Any],
    return_size: int,
    session: Optional[BuildSession] = None,
) -> Action[T]:
    """Build the action for `tx`, reading `return_size` bytes of return data."""
    if not tx.get("to"):
        raise ValueError("Transaction has no `to` address")

    session = session or current_session()
    name = session.fresh_invocation_name()
    to = Address(tx["to"])
    data = to_bytes(tx.get("data") or b"")
    value = Uint256(tx.get("value") or 0)

    def generate() -> Action[T]:
        return Action.create(
            preamble=yul(
                INVOCATION_TEMPLATE,
                name=name,
                to=to,
                value=value,
                data_size=len(data),
                return_size=return_size,
                words=calldata_words(data),
            ),
            statements=f"{name}()",
            description=(
                f"Invocation of function with signature {to_hex(data[:4])} "
                f"to contract {to.get()}"
            ),
        )

    return build_action([], generate, session=session)


def invoke(tx: Mapping[str, Any], session: Optional[BuildSession] = None) -> Action[None]:
    """Call `tx` and ignore its return data."""
    return invoke_internal(tx, 0, session=session)


def read_uint256(
    tx: Mapping[str, Any], session: Optional[BuildSession] = None
) -> Action[Uint256]:
    """Call `tx` and produce its first return word as a uint256."""
    return invoke_internal(tx, WORD_SIZE, session=session)


def read_address(
    tx: Mapping[str, Any], session: Optional[BuildSession] = None
) -> Action[Address]:
    """Call `tx` and produce its first return word as an address."""
    return invoke_internal(tx, WORD_SIZE, session=session)


def wrap(
    tx: Mapping[str, Any],
    compiler: Optional[Compiler] = None,
    settings: Optional[CompileSettings] = None,
) -> Command:
    """Compile a single transaction into a Command."""
    return prepare(pipeline([invoke(tx)]), compiler=compiler, settings=settings)
