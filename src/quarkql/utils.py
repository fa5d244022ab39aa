"""Shared helpers: hex conversion, call signatures and logging setup."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from Crypto.Hash import keccak
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from quarkql.values import Bytes

console = Console(stderr=True)


def strip_hex_prefix(text: str) -> str:
    """Return `text` without its leading 0x/0X."""
    if text[:2] in ("0x", "0X"):
        return text[2:]
    return text


def to_bytes(data: bytes | bytearray | str) -> bytes:
    """Convert a 0x-prefixed hex string (or raw bytes) to bytes.

    Raises:
        ValueError: If the string is not valid, even-length hex.
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    digits = strip_hex_prefix(data)
    if len(digits) % 2:
        raise ValueError(f"Hex string has odd length: {data!r}")
    return bytes.fromhex(digits)


def to_hex(data: bytes | bytearray) -> str:
    """Render bytes as a lowercase 0x-prefixed hex string."""
    return "0x" + bytes(data).hex()


def keccak256(data: bytes) -> bytes:
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


def call_sig(signature: str) -> Bytes:
    """Return the 4-byte function selector for an ABI signature.

    Example:
        call_sig("transfer(address,uint256)").get() == "0xa9059cbb"
    """
    from quarkql.values import Bytes

    return Bytes(keccak256(signature.encode("utf-8"))[:4])


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for quarkql.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose: INFO level
    - Debug (QUARKQL_DEBUG=1): DEBUG level - rendered Yul, relocated pushes
    """
    debug = bool(os.environ.get("QUARKQL_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("quarkql")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
