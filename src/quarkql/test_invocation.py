"""Tests for transaction invocations."""

import pytest

from quarkql.action import build_session, pipe
from quarkql.invocation import calldata_words, invoke, read_uint256, wrap
from quarkql.testing import StaticCompiler, add
from quarkql.values import Uint256

TOKEN = "0x" + "11" * 20
TRANSFER_CALLDATA = "0xa9059cbb"

EXPECTED_READ = f"""function __invocation__0() -> r {{
  let data := allocate(0x4)
  let res := allocate(0x20)
  mstore(add(data, 0x0), 0xa9059cbb{"0" * 56})
  pop(call(gas(), {TOKEN}, 0x0, data, 0x4, res, 0x20))
  r := mload(res)
}}"""


def test_read_uint256_helper():
    with build_session():
        action = read_uint256({"to": TOKEN, "data": TRANSFER_CALLDATA})

    assert list(action.preamble) == [EXPECTED_READ]
    assert action.statements == ("__invocation__0()",)
    assert action.description == (
        f"Invocation of function with signature 0xa9059cbb to contract {TOKEN}"
    )


def test_invoke_ignores_return_data():
    with build_session():
        action = invoke({"to": TOKEN, "data": TRANSFER_CALLDATA, "value": 7})

    (helper,) = action.preamble
    assert helper.startswith("function __invocation__0() {")
    assert "allocate(0x20)" not in helper
    assert f"pop(call(gas(), {TOKEN}, 0x7, data, 0x4, 0, 0x0))" in helper


def test_invocation_names_are_unique_per_build():
    with build_session():
        first = invoke({"to": TOKEN})
        second = invoke({"to": TOKEN})

    assert first.statements == ("__invocation__0()",)
    assert second.statements == ("__invocation__1()",)


def test_invocation_result_feeds_other_actions():
    with build_session():
        action = pipe(
            read_uint256({"to": TOKEN, "data": TRANSFER_CALLDATA}),
            lambda balance: add(balance, Uint256(1)),
        )

    assert action.statements == (
        "let __v__0 := __invocation__0()",
        "_add(__v__0, 0x1)",
    )
    assert len(action.preamble) == 2


def test_missing_target_is_rejected():
    with pytest.raises(ValueError, match="no `to` address"):
        invoke({"data": TRANSFER_CALLDATA})


def test_calldata_words_pad_the_last_word():
    data = bytes(range(36))

    words = calldata_words(data)

    assert [offset for offset, _ in words] == [0, 32]
    assert words[0][1] == bytes(range(32)).hex()
    assert words[1][1] == "20212223" + "0" * 56
    assert calldata_words(b"") == []


def test_wrap_compiles_a_single_transaction():
    compiler = StaticCompiler({"QuarkCommand": "30303050505000"})

    with build_session():
        command = wrap({"to": TOKEN, "data": TRANSFER_CALLDATA}, compiler=compiler)

    assert command.bytecode == "0x30303050505000"
    assert "function __invocation__0() {" in command.source
    assert "\n    __invocation__0()\n" in command.source
    assert command.description == (
        "Pipeline:\n  * Invocation of function with signature 0xa9059cbb "
        f"to contract {TOKEN}"
    )
