"""QuarkQL Exceptions

Custom exceptions for building and relocating Quark scripts. Every error
here is fatal to the build that raised it.
"""

from __future__ import annotations

from typing import Sequence


class QuarkError(Exception):
    """Base exception for all QuarkQL errors."""

    pass


class InvalidLiteralError(QuarkError, ValueError):
    """Raised when a literal value cannot be represented as an operand."""

    def __init__(self, kind: str, value: object, reason: str):
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind} literal {value!r}: {reason}")


class MissingStatementError(QuarkError):
    """Raised when an action has no trailing statement to consume."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Invalid action: {description!r}: missing core statement")


class UnresolvedDynamicJumpError(QuarkError):
    """Raised when a jump is not preceded by a push of its destination."""

    def __init__(self, offset: int, opcode: int):
        self.offset = offset
        self.opcode = opcode
        super().__init__(
            f"Unable to relocate dynamic jump: instruction 0x{opcode:02x} "
            f"at offset {offset} feeds a jump"
        )


class PushOverflowError(QuarkError):
    """Raised when a relocated jump target no longer fits its push width."""

    def __init__(self, offset: int, width: int, value: int):
        self.offset = offset
        self.width = width
        self.value = value
        super().__init__(
            f"Unable to widen push at offset {offset}: 0x{value:x} "
            f"does not fit in {width} byte(s)"
        )


class MagicMarkerMissingError(QuarkError):
    """Raised when compiled code does not start with the magic marker."""

    pass


class CompileFailureError(QuarkError):
    """Raised when the external compiler reports an error."""

    def __init__(self, message: str, diagnostics: Sequence[str] = ()):
        self.diagnostics = list(diagnostics)
        detail = "\n".join(self.diagnostics)
        super().__init__(f"{message}\n{detail}" if detail else message)


class UnsupportedSourceError(QuarkError):
    """Raised when a source cannot be turned into a Quark command."""

    pass
