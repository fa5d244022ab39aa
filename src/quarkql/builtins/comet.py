"""Compound III (Comet) builtins."""

from __future__ import annotations

from typing import Any

from quarkql.action.compose import build_action
from quarkql.action.spec import Action
from quarkql.values import Address, Bool, Value
from quarkql.yul import yul

SUPPLY = """
function __comet__supply(comet, asset, amount) -> success {
  let data := allocate(0x44)
  mstore(data, shl(224, {{ call_sig("supply(address,uint256)") }}))
  mstore(add(data, 0x04), asset)
  mstore(add(data, 0x24), amount)
  success := call(gas(), comet, 0, data, 0x44, 0, 0)
}
"""

WITHDRAW = """
function __comet__withdraw(comet, asset, amount) -> success {
  let data := allocate(0x44)
  mstore(data, shl(224, {{ call_sig("withdraw(address,uint256)") }}))
  mstore(add(data, 0x04), asset)
  mstore(add(data, 0x24), amount)
  success := call(gas(), comet, 0, data, 0x44, 0, 0)
}
"""


class Comet:
    """A Comet market deployed at `address`.

    Helpers take the market address as their first argument, so several
    markets in one script share the same helper definitions.
    """

    def __init__(self, address: Address | str, name: str = "Comet"):
        self.address = address if isinstance(address, Address) else Address(address)
        self.name = name

    def supply(self, asset: Any, amount: Any) -> Action[Bool]:
        """Supply `amount` of `asset`; produces the call's success flag."""

        def generate(asset: Value, amount: Value) -> Action[Bool]:
            return Action.create(
                preamble=yul(SUPPLY),
                statements=yul(
                    "__comet__supply({{ comet }}, {{ asset }}, {{ amount }})",
                    comet=self.address,
                    asset=asset,
                    amount=amount,
                ),
                description=f"Supply to {self.name} [{self.address.get()}]",
            )

        return build_action([asset, amount], generate)

    def withdraw(self, asset: Any, amount: Any) -> Action[Bool]:
        """Withdraw `amount` of `asset`; produces the call's success flag."""

        def generate(asset: Value, amount: Value) -> Action[Bool]:
            return Action.create(
                preamble=yul(WITHDRAW),
                statements=yul(
                    "__comet__withdraw({{ comet }}, {{ asset }}, {{ amount }})",
                    comet=self.address,
                    asset=asset,
                    amount=amount,
                ),
                description=f"Withdraw from {self.name} [{self.address.get()}]",
            )

        return build_action([asset, amount], generate)

    def __repr__(self) -> str:
        return f"Comet({self.address.get()!r}, name={self.name!r})"
