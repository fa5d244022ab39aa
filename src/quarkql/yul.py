"""Yul template rendering.

Fragments are authored as Jinja2 templates with `{{ slot }}` operands.
Values render through their canonical `get()` form; the result is then
normalized so the least-indented line sits at column zero.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jinja2 import Environment, StrictUndefined

from quarkql.utils import call_sig
from quarkql.values import Value


def _operand_text(operand: Any) -> Any:
    """Finalize hook: Values render as operands, everything else as-is."""
    if isinstance(operand, Value):
        return operand.get()
    return operand


def _hex(number: int) -> str:
    return f"0x{number:x}"


@lru_cache(maxsize=1)
def get_yul_env() -> Environment:
    """Create the Jinja2 Environment used for Yul fragments.

    Returns:
        Configured Jinja2 Environment.
    """
    env = Environment(
        finalize=_operand_text,
        undefined=StrictUndefined,
        autoescape=False,
    )
    env.filters["hex"] = _hex
    env.globals["call_sig"] = call_sig
    return env


def normalize(text: str) -> str:
    """Strip the common leading indentation, then trim the block.

    Relative indentation between lines is preserved. A block made only of
    blank lines normalizes to the empty string.
    """
    lines = text.split("\n")
    margin = min(
        (len(line) - len(line.lstrip()) for line in lines if line.strip()),
        default=0,
    )
    return "\n".join(line[margin:] for line in lines).strip()


def yul(template: str, **operands: Any) -> str:
    """Render a Yul fragment.

    Args:
        template: Jinja2 template text; slots are filled from `operands`.
        **operands: Values, raw Yul text, or plain Python values.

    Returns:
        The rendered fragment, normalized.

    Example:
        yul("_add({{ x }}, {{ y }})", x=Uint256(1), y=Uint256(2))
        # -> "_add(0x1, 0x2)"
    """
    rendered = get_yul_env().from_string(template).render(**operands)
    return normalize(rendered)


def indent(text: str, width: int) -> str:
    """Prefix every line of `text` with `width` spaces."""
    prefix = " " * width
    return "\n".join(prefix + line for line in text.split("\n"))
