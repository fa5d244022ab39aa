"""Relocator - prepends the magic marker to assembled bytecode.

Prepending `len(marker)` bytes shifts every absolute code offset by the
same constant, so the only thing to fix is each jump destination. This is
a single forward pass with one instruction of lookahead:

- a push immediately followed by JUMP/JUMPI has its immediate increased
  by `len(marker)`, re-encoded at the same width (the opcode byte never
  changes);
- any other instruction immediately followed by a jump is rejected, since
  its destination is not statically known here;
- everything else is copied unchanged.

Precondition: the destination of every jump is pushed by the instruction
directly before it. Code emitted by the paired assembler satisfies this;
arbitrary EVM bytecode does not in general.
"""

from __future__ import annotations

import logging

from quarkql.bytecode.opcodes import is_jump, is_push, iter_instructions
from quarkql.command.spec import MAGIC_MARKER
from quarkql.exceptions import PushOverflowError, UnresolvedDynamicJumpError
from quarkql.utils import to_bytes, to_hex

log = logging.getLogger(__name__)


def relocate(code: bytes, marker: bytes = MAGIC_MARKER) -> bytes:
    """Return `marker + code` with every static jump target shifted.

    Args:
        code: Assembled bytecode, without the marker.
        marker: Bytes to prepend.

    Returns:
        The relocated bytecode.

    Raises:
        UnresolvedDynamicJumpError: If a jump is not preceded by a push.
        PushOverflowError: If a shifted target needs a wider push.
    """
    shift = len(marker)
    out = bytearray(marker)

    for instr in iter_instructions(code):
        next_offset = instr.offset + instr.width
        if next_offset >= len(code) or not is_jump(code[next_offset]):
            out += instr.encode()
            continue

        if not is_push(instr.opcode):
            raise UnresolvedDynamicJumpError(instr.offset, instr.opcode)

        width = len(instr.immediate)
        value = int.from_bytes(instr.immediate, "big") + shift
        if value >= 1 << (8 * width):
            raise PushOverflowError(instr.offset, width, value)

        log.debug(
            "Relocated push at 0x%x: 0x%s -> 0x%x",
            instr.offset,
            instr.immediate.hex(),
            value,
        )
        out.append(instr.opcode)
        out += value.to_bytes(width, "big")

    return bytes(out)


def relocate_hex(script: str, marker: bytes = MAGIC_MARKER) -> str:
    """Hex-string form of `relocate`: "0x6003565b" -> "0x3030305050506009565b"."""
    return to_hex(relocate(to_bytes(script), marker))
