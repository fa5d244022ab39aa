"""ERC-20 builtins.

Every builtin accepts Values or pending Actions for its arguments and
emits its helper through the preamble, so repeated use shares one
definition.
"""

from __future__ import annotations

from typing import Any

from quarkql.action.compose import build_action
from quarkql.action.spec import Action
from quarkql.values import Uint256, Value
from quarkql.yul import yul

APPROVE = """
function __erc20__approve(asset, spender, amount) {
  let data := allocate(0x44)
  mstore(data, shl(224, {{ call_sig("approve(address,uint256)") }}))
  mstore(add(data, 0x04), spender)
  mstore(add(data, 0x24), amount)
  pop(call(gas(), asset, 0, data, 0x44, 0, 0))
}
"""

TRANSFER = """
function __erc20__transfer(asset, recipient, amount) {
  let data := allocate(0x44)
  mstore(data, shl(224, {{ call_sig("transfer(address,uint256)") }}))
  mstore(add(data, 0x04), recipient)
  mstore(add(data, 0x24), amount)
  pop(call(gas(), asset, 0, data, 0x44, 0, 0))
}
"""

BALANCE_OF = """
function __erc20__balanceOf(asset, account) -> b {
  let data := allocate(0x24)
  let res := allocate(0x20)
  mstore(data, shl(224, {{ call_sig("balanceOf(address)") }}))
  mstore(add(data, 0x04), account)
  pop(call(gas(), asset, 0, data, 0x24, res, 0x20))
  b := mload(res)
}
"""


def approve(asset: Any, spender: Any, amount: Any) -> Action[None]:
    """Erc20 `approve(spender, amount)` on `asset`."""

    def generate(asset: Value, spender: Value, amount: Value) -> Action[None]:
        return Action.create(
            preamble=yul(APPROVE),
            statements=yul(
                "__erc20__approve({{ asset }}, {{ spender }}, {{ amount }})",
                asset=asset,
                spender=spender,
                amount=amount,
            ),
            description="Erc20 Approve",
        )

    return build_action([asset, spender, amount], generate)


def transfer(asset: Any, recipient: Any, amount: Any) -> Action[None]:
    """Erc20 `transfer(recipient, amount)` on `asset`."""

    def generate(asset: Value, recipient: Value, amount: Value) -> Action[None]:
        return Action.create(
            preamble=yul(TRANSFER),
            statements=yul(
                "__erc20__transfer({{ asset }}, {{ recipient }}, {{ amount }})",
                asset=asset,
                recipient=recipient,
                amount=amount,
            ),
            description=f"Erc20 Transfer {amount.get()} to {recipient.get()}",
        )

    return build_action([asset, recipient, amount], generate)


def balance_of(asset: Any, account: Any) -> Action[Uint256]:
    """Erc20 `balanceOf(account)` on `asset`."""

    def generate(asset: Value, account: Value) -> Action[Uint256]:
        return Action.create(
            preamble=yul(BALANCE_OF),
            statements=yul(
                "__erc20__balanceOf({{ asset }}, {{ account }})",
                asset=asset,
                account=account,
            ),
            description="Erc20 Balance of",
        )

    return build_action([asset, account], generate)
