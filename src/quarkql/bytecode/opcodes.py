"""EVM opcode classification used by the relocator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

JUMP = 0x56
JUMPI = 0x57
PUSH1 = 0x60
PUSH32 = 0x7F

JUMPS = frozenset({JUMP, JUMPI})


def is_push(opcode: int) -> bool:
    """PUSH1..PUSH32. PUSH0 carries no immediate and is not included."""
    return PUSH1 <= opcode <= PUSH32


def is_jump(opcode: int) -> bool:
    return opcode in JUMPS


def immediate_width(opcode: int) -> int:
    """Number of immediate bytes following `opcode`."""
    if is_push(opcode):
        return opcode - PUSH1 + 1
    return 0


@dataclass(frozen=True)
class Instruction:
    offset: int
    opcode: int
    immediate: bytes = b""

    @property
    def width(self) -> int:
        """Declared width: opcode byte plus its immediate."""
        return 1 + immediate_width(self.opcode)

    def encode(self) -> bytes:
        return bytes([self.opcode]) + self.immediate


def iter_instructions(code: bytes) -> Iterator[Instruction]:
    """Decode `code` left to right.

    A push truncated by the end of the code yields a short immediate.
    """
    offset = 0
    while offset < len(code):
        opcode = code[offset]
        width = immediate_width(opcode)
        yield Instruction(offset, opcode, code[offset + 1 : offset + 1 + width])
        offset += 1 + width
