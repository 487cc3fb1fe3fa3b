"""In-memory ERC20 with OpenZeppelin revert strings.

Stands in for DAIMock / Token8Mock on local and test networks. Minting is
open to anyone.
"""

from src.rm_chain.addresses import ZERO_ADDRESS, to_address
from src.rm_chain.chain import Chain, Contract, transactional
from src.rm_common.errors import InvalidAmountError, TokenError


class ERC20Mock(Contract):
    _storage_fields = ("_balances", "_allowances", "_total_supply")

    def __init__(
        self, chain: Chain, address: str, name: str, symbol: str, decimals: int = 18
    ) -> None:
        super().__init__(chain, address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(to_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((to_address(owner), to_address(spender)), 0)

    @transactional
    def mint(self, to: str, amount: int) -> None:
        to = to_address(to)
        _check_amount(amount)
        if to == ZERO_ADDRESS:
            raise TokenError("ERC20: mint to the zero address")
        self._total_supply += amount
        self._balances[to] = self._balances.get(to, 0) + amount
        self.emit("Transfer", **{"from": ZERO_ADDRESS, "to": to, "value": amount})

    @transactional
    def approve(self, caller: str, spender: str, amount: int) -> bool:
        owner, spender = to_address(caller), to_address(spender)
        _check_amount(amount)
        if spender == ZERO_ADDRESS:
            raise TokenError("ERC20: approve to the zero address")
        self._allowances[(owner, spender)] = amount
        self.emit("Approval", owner=owner, spender=spender, value=amount)
        return True

    @transactional
    def transfer(self, caller: str, to: str, amount: int) -> bool:
        self._transfer(to_address(caller), to_address(to), amount)
        return True

    @transactional
    def transfer_from(self, caller: str, owner: str, to: str, amount: int) -> bool:
        spender, owner = to_address(caller), to_address(owner)
        _check_amount(amount)
        current = self.allowance(owner, spender)
        if current < amount:
            raise TokenError("ERC20: insufficient allowance")
        self._allowances[(owner, spender)] = current - amount
        self._transfer(owner, to_address(to), amount)
        return True

    def _transfer(self, sender: str, to: str, amount: int) -> None:
        _check_amount(amount)
        if to == ZERO_ADDRESS:
            raise TokenError("ERC20: transfer to the zero address")
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise TokenError("ERC20: transfer amount exceeds balance")
        self._balances[sender] = balance - amount
        self._balances[to] = self._balances.get(to, 0) + amount
        self.emit("Transfer", **{"from": sender, "to": to, "value": amount})


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise InvalidAmountError(amount)
