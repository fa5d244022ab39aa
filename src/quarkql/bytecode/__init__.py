"""Bytecode - relocation of already-assembled EVM code."""

from quarkql.bytecode.opcodes import (
    Instruction,
    immediate_width,
    is_jump,
    is_push,
    iter_instructions,
)
from quarkql.bytecode.relocator import relocate, relocate_hex

__all__ = [
    "Instruction",
    "immediate_width",
    "is_jump",
    "is_push",
    "iter_instructions",
    "relocate",
    "relocate_hex",
]
