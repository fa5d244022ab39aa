"""Value model - typed literals and named temporaries used as Yul operands.

Every value renders to a canonical textual operand through `get()`:
literals as lowercase 0x-prefixed hex, variables as their name.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Union

from quarkql.exceptions import InvalidLiteralError
from quarkql.utils import to_hex

if TYPE_CHECKING:
    from quarkql.action.spec import Action

UINT256_BOUND = 2**256

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]*$")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$.]*$")


class Value:
    """Base class for every operand."""

    kind = "value"

    __slots__ = ("_v",)

    def __init__(self, text: str):
        self._v = text

    def get(self) -> str:
        return self._v

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return type(self) is type(other) and self._v == other._v

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._v))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._v!r})"

    def __str__(self) -> str:
        return self._v


class Literal(Value):
    """A constant operand."""

    __slots__ = ()


class Bool(Literal):
    kind = "bool"

    __slots__ = ()

    def __init__(self, x: bool):
        if not isinstance(x, bool):
            raise InvalidLiteralError(self.kind, x, "expected a bool")
        super().__init__("0x1" if x else "0x0")


class Address(Literal):
    kind = "address"

    __slots__ = ()

    def __init__(self, x: str):
        if not isinstance(x, str) or x[:2].lower() != "0x":
            raise InvalidLiteralError(self.kind, x, "expected a 0x-prefixed string")
        digits = x[2:]
        if len(digits) != 40 or not _HEX_DIGITS.match(digits):
            raise InvalidLiteralError(self.kind, x, "expected 20 bytes of hex")
        super().__init__("0x" + digits.lower())


class Uint256(Literal):
    """An unsigned 256-bit integer.

    Accepts an int, a 0x-prefixed hex string or a decimal string. Values
    outside [0, 2**256) are rejected rather than truncated.
    """

    kind = "uint256"

    __slots__ = ()

    def __init__(self, x: int | str):
        number = self._parse(x)
        if not 0 <= number < UINT256_BOUND:
            raise InvalidLiteralError(self.kind, x, "out of range for uint256")
        super().__init__(f"0x{number:x}")

    @classmethod
    def _parse(cls, x: int | str) -> int:
        if isinstance(x, bool):
            raise InvalidLiteralError(cls.kind, x, "expected an integer")
        if isinstance(x, int):
            return x
        if not isinstance(x, str):
            raise InvalidLiteralError(cls.kind, x, "expected an int or a string")
        text = x.strip()
        if text[:2].lower() == "0x":
            digits = text[2:]
            if not digits or not _HEX_DIGITS.match(digits):
                raise InvalidLiteralError(cls.kind, x, "malformed hex")
            return int(digits, 16)
        if not (text.isascii() and text.isdigit()):
            raise InvalidLiteralError(cls.kind, x, "malformed decimal")
        return int(text)

    @property
    def value(self) -> int:
        return int(self._v, 16)


class Bytes(Literal):
    kind = "bytes"

    __slots__ = ()

    def __init__(self, x: bytes | bytearray | str):
        if isinstance(x, (bytes, bytearray)):
            super().__init__(to_hex(x))
            return
        if not isinstance(x, str) or x[:2].lower() != "0x":
            raise InvalidLiteralError(self.kind, x, "expected bytes or 0x-prefixed hex")
        digits = x[2:]
        if len(digits) % 2 or not _HEX_DIGITS.match(digits):
            raise InvalidLiteralError(self.kind, x, "malformed hex")
        super().__init__("0x" + digits.lower())


class Variable(Value):
    """A name bound to a previously computed result."""

    kind = "variable"

    __slots__ = ()

    def __init__(self, name: str):
        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid Yul identifier: {name!r}")
        super().__init__(name)

    @property
    def name(self) -> str:
        return self._v


class Pending:
    """An input whose value is still produced by an unresolved action."""

    __slots__ = ("action",)

    def __init__(self, action: Action):
        self.action = action

    def __repr__(self) -> str:
        return f"Pending({self.action.description!r})"


# Inputs accepted by build_action: constants, bound names, or actions to lift.
Input = Union[Literal, Variable, Pending]

UINT256_MAX = Uint256(UINT256_BOUND - 1)


def as_input(x: object) -> Input:
    """Tag a raw argument as an Input.

    Raises:
        TypeError: If `x` is neither a Value nor an Action.
    """
    from quarkql.action.spec import Action

    if isinstance(x, (Literal, Variable, Pending)):
        return x
    if isinstance(x, Action):
        return Pending(x)
    raise TypeError(f"Expected a Value or an Action, got {type(x).__name__}")
