"""Tests for shared helpers."""

import logging

import pytest
from rich.logging import RichHandler

from quarkql.utils import call_sig, keccak256, setup_logging, to_bytes, to_hex
from quarkql.values import Bytes


@pytest.fixture
def quarkql_logger():
    logger = logging.getLogger("quarkql")
    level, handlers, propagate = logger.level, list(logger.handlers), logger.propagate
    yield logger
    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = propagate


def test_call_sig():
    assert call_sig("transfer(address,uint256)") == Bytes("0xa9059cbb")
    assert call_sig("balanceOf(address)").get() == "0x70a08231"


def test_keccak256_of_empty_input():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


def test_hex_conversion():
    assert to_bytes("0x6003565b") == bytes.fromhex("6003565b")
    assert to_bytes("6003") == b"\x60\x03"
    assert to_bytes(bytearray(b"\x01")) == b"\x01"
    assert to_hex(b"\x00\xff") == "0x00ff"

    with pytest.raises(ValueError, match="odd length"):
        to_bytes("0x600")


def test_setup_logging_levels(quarkql_logger, monkeypatch):
    monkeypatch.delenv("QUARKQL_DEBUG", raising=False)

    setup_logging()
    assert quarkql_logger.level == logging.WARNING
    assert len(quarkql_logger.handlers) == 1
    assert isinstance(quarkql_logger.handlers[0], RichHandler)
    assert quarkql_logger.propagate is False

    setup_logging(verbose=True)
    assert quarkql_logger.level == logging.INFO
    assert len(quarkql_logger.handlers) == 1

    monkeypatch.setenv("QUARKQL_DEBUG", "1")
    setup_logging()
    assert quarkql_logger.level == logging.DEBUG
