"""Tests for the ERC-20 and Comet builtins."""

import re

import pytest

from quarkql.action import build_session, pipeline, pop
from quarkql.builtins import Comet, tokens
from quarkql.utils import call_sig
from quarkql.values import Address, Uint256

USDC = Address("0x" + "aa" * 20)
ALICE = Address("0x" + "bb" * 20)
COMET_USDC = "0x" + "cc" * 20
COMET_WETH = "0x" + "dd" * 20


def test_approve_statement():
    action = tokens.approve(USDC, ALICE, Uint256(5))

    assert action.statements == (f"__erc20__approve({USDC}, {ALICE}, 0x5)",)
    assert action.description == "Erc20 Approve"
    (helper,) = action.preamble
    assert helper.startswith("function __erc20__approve(asset, spender, amount) {")


def test_transfer_description():
    action = tokens.transfer(USDC, ALICE, Uint256(100))

    assert action.description == f"Erc20 Transfer 0x64 to {ALICE}"


def test_balance_of_feeds_supply():
    with build_session():
        action = Comet(COMET_USDC).supply(USDC, tokens.balance_of(USDC, ALICE))

    assert action.statements == (
        f"let __v__0 := __erc20__balanceOf({USDC}, {ALICE})",
        f"__comet__supply({COMET_USDC}, {USDC}, __v__0)",
    )
    assert action.description == (
        f"Erc20 Balance of |> Supply to Comet [{COMET_USDC}]"
    )
    helpers = list(action.preamble)
    assert helpers[0].startswith("function __erc20__balanceOf(asset, account) -> b {")
    assert helpers[1].startswith("function __comet__supply(comet, asset, amount) -> success {")


def test_markets_share_helpers():
    usdc_market = Comet(COMET_USDC, name="cUSDCv3")
    weth_market = Comet(COMET_WETH, name="cWETHv3")

    with build_session():
        action = pipeline(
            [
                pop(usdc_market.supply(USDC, Uint256(1))),
                pop(weth_market.supply(USDC, Uint256(2))),
                pop(usdc_market.withdraw(USDC, Uint256(3))),
            ]
        )

    assert len(action.preamble) == 2
    assert action.statements == (
        f"pop(__comet__supply({COMET_USDC}, {USDC}, 0x1))",
        f"pop(__comet__supply({COMET_WETH}, {USDC}, 0x2))",
        f"pop(__comet__withdraw({COMET_USDC}, {USDC}, 0x3))",
    )
    assert action.description == (
        "Pipeline:"
        f"\n  * Supply to cUSDCv3 [{COMET_USDC}]"
        f"\n  * Supply to cWETHv3 [{COMET_WETH}]"
        f"\n  * Withdraw from cUSDCv3 [{COMET_USDC}]"
    )


def test_comet_accepts_address_values():
    market = Comet(Address(COMET_USDC))

    assert market.address == Address(COMET_USDC)
    assert repr(market) == f"Comet({COMET_USDC!r}, name='Comet')"


MSTORE = re.compile(r"^\s*mstore\((?:data|add\(data, (0x[0-9a-f]+)\)), (.+)\)$")
SHIFT = re.compile(r"shl\((\d+), (0x[0-9a-f]+)\)")
CALL_SIZE = re.compile(r"call\(gas\(\), \w+, \w+, data, (0x[0-9a-f]+),")


def _calldata(helper, **params):
    """Replay the helper's stores into `data` and return the bytes it sends."""
    memory = bytearray(0x80)
    for line in helper.splitlines():
        match = MSTORE.match(line)
        if match is None:
            continue
        offset = int(match.group(1), 16) if match.group(1) else 0
        shifted = SHIFT.fullmatch(match.group(2))
        if shifted:
            word = (int(shifted.group(2), 16) << int(shifted.group(1))) % 2**256
        else:
            word = params[match.group(2)]
        memory[offset : offset + 32] = word.to_bytes(32, "big")
    size = int(CALL_SIZE.search(helper).group(1), 16)
    return bytes(memory[:size])


def _word(value):
    return int(value.get(), 16).to_bytes(32, "big")


@pytest.mark.parametrize(
    "build, signature, params",
    [
        (
            lambda: tokens.approve(USDC, ALICE, Uint256(5)),
            "approve(address,uint256)",
            {"spender": ALICE, "amount": Uint256(5)},
        ),
        (
            lambda: tokens.transfer(USDC, ALICE, Uint256(100)),
            "transfer(address,uint256)",
            {"recipient": ALICE, "amount": Uint256(100)},
        ),
        (
            lambda: tokens.balance_of(USDC, ALICE),
            "balanceOf(address)",
            {"account": ALICE},
        ),
        (
            lambda: Comet(COMET_USDC).supply(USDC, Uint256(7)),
            "supply(address,uint256)",
            {"asset": USDC, "amount": Uint256(7)},
        ),
        (
            lambda: Comet(COMET_USDC).withdraw(USDC, Uint256(8)),
            "withdraw(address,uint256)",
            {"asset": USDC, "amount": Uint256(8)},
        ),
    ],
)
def test_calldata_starts_with_selector(build, signature, params):
    (helper,) = build().preamble

    calldata = _calldata(
        helper, **{name: int(value.get(), 16) for name, value in params.items()}
    )

    expected = call_sig(signature).get()[2:]
    assert calldata[:4].hex() == expected
    assert calldata[4:] == b"".join(_word(value) for value in params.values())
