"""In-memory ERC721 with OpenZeppelin revert strings.

`safe_transfer_from` calls the receiver hook registered for the recipient,
the way onERC721Received runs on chain. A hook may call back into any
contract; if it raises, the whole transfer reverts.
"""

from collections.abc import Callable

from src.rm_chain.addresses import ZERO_ADDRESS, to_address
from src.rm_chain.chain import Chain, Contract, transactional
from src.rm_common.errors import TokenError

# (operator, from, token_id)
ReceiverHook = Callable[[str, str, int], None]


class ERC721Mock(Contract):
    _storage_fields = ("_owners", "_balances", "_token_approvals", "_operator_approvals")

    def __init__(self, chain: Chain, address: str, name: str, symbol: str) -> None:
        super().__init__(chain, address)
        self.name = name
        self.symbol = symbol
        self._owners: dict[int, str] = {}
        self._balances: dict[str, int] = {}
        self._token_approvals: dict[int, str] = {}
        self._operator_approvals: set[tuple[str, str]] = set()
        self._receivers: dict[str, ReceiverHook] = {}

    def register_receiver(self, account: str, hook: ReceiverHook) -> None:
        self._receivers[to_address(account)] = hook

    def balance_of(self, owner: str) -> int:
        owner = to_address(owner)
        if owner == ZERO_ADDRESS:
            raise TokenError("ERC721: balance query for the zero address")
        return self._balances.get(owner, 0)

    def owner_of(self, token_id: int) -> str:
        owner = self._owners.get(token_id)
        if owner is None:
            raise TokenError("ERC721: owner query for nonexistent token")
        return owner

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    def get_approved(self, token_id: int) -> str:
        if token_id not in self._owners:
            raise TokenError("ERC721: approved query for nonexistent token")
        return self._token_approvals.get(token_id, ZERO_ADDRESS)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return (to_address(owner), to_address(operator)) in self._operator_approvals

    @transactional
    def mint(self, to: str, token_id: int) -> None:
        to = to_address(to)
        if to == ZERO_ADDRESS:
            raise TokenError("ERC721: mint to the zero address")
        if token_id in self._owners:
            raise TokenError("ERC721: token already minted")
        self._owners[token_id] = to
        self._balances[to] = self._balances.get(to, 0) + 1
        self.emit("Transfer", **{"from": ZERO_ADDRESS, "to": to, "tokenId": token_id})

    @transactional
    def approve(self, caller: str, to: str, token_id: int) -> None:
        caller, to = to_address(caller), to_address(to)
        owner = self.owner_of(token_id)
        if to == owner:
            raise TokenError("ERC721: approval to current owner")
        if caller != owner and not self.is_approved_for_all(owner, caller):
            raise TokenError("ERC721: approve caller is not owner nor approved for all")
        self._token_approvals[token_id] = to
        self.emit("Approval", owner=owner, approved=to, tokenId=token_id)

    @transactional
    def set_approval_for_all(self, caller: str, operator: str, approved: bool) -> None:
        owner, operator = to_address(caller), to_address(operator)
        if owner == operator:
            raise TokenError("ERC721: approve to caller")
        if approved:
            self._operator_approvals.add((owner, operator))
        else:
            self._operator_approvals.discard((owner, operator))
        self.emit("ApprovalForAll", owner=owner, operator=operator, approved=approved)

    @transactional
    def transfer_from(self, caller: str, owner: str, to: str, token_id: int) -> None:
        caller = to_address(caller)
        if not self._is_approved_or_owner(caller, token_id):
            raise TokenError("ERC721: transfer caller is not owner nor approved")
        self._transfer(to_address(owner), to_address(to), token_id)

    @transactional
    def safe_transfer_from(self, caller: str, owner: str, to: str, token_id: int) -> None:
        self.transfer_from(caller, owner, to, token_id)
        hook = self._receivers.get(to_address(to))
        if hook is not None:
            hook(to_address(caller), to_address(owner), token_id)

    def _is_approved_or_owner(self, spender: str, token_id: int) -> bool:
        owner = self.owner_of(token_id)
        return (
            spender == owner
            or self.get_approved(token_id) == spender
            or self.is_approved_for_all(owner, spender)
        )

    def _transfer(self, owner: str, to: str, token_id: int) -> None:
        if self.owner_of(token_id) != owner:
            raise TokenError("ERC721: transfer from incorrect owner")
        if to == ZERO_ADDRESS:
            raise TokenError("ERC721: transfer to the zero address")
        self._token_approvals.pop(token_id, None)
        self._balances[owner] -= 1
        self._balances[to] = self._balances.get(to, 0) + 1
        self._owners[token_id] = to
        self.emit("Transfer", **{"from": owner, "to": to, "tokenId": token_id})
