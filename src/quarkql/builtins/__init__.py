"""Builtin actions for common protocols.

Builtins are not inherently safe: they emit Yul that runs with the
caller's authority. They may only rely on their own helpers and the
shared `allocate` function.
"""

from quarkql.builtins import comet, tokens
from quarkql.builtins.comet import Comet

__all__ = ["Comet", "comet", "tokens"]
