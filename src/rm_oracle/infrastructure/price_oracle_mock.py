"""PriceOracleMock: settable token prices, wired into the ReservesManager.

The reserve state machine never reads it; it exists so deployments on local
and test networks have something to pass to `ReservesManager.initialize`.
"""

from src.rm_chain.addresses import to_address
from src.rm_chain.chain import Chain, Contract, transactional
from src.rm_common.errors import InvalidAmountError


class PriceOracleMock(Contract):
    _storage_fields = ("_prices",)

    def __init__(self, chain: Chain, address: str) -> None:
        super().__init__(chain, address)
        self._prices: dict[str, int] = {}

    @transactional
    def set_price(self, caller: str, token: str, price: int) -> None:
        if price < 0:
            raise InvalidAmountError(price)
        token = to_address(token)
        self._prices[token] = price
        self.emit("PriceUpdated", token=token, price=price, sender=to_address(caller))

    def get_price(self, token: str) -> int:
        return self._prices.get(to_address(token), 0)
