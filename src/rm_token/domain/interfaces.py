"""Token collaborator contracts.

The reserve state machine only relies on these calls. Any token object
registered on the chain that provides them can be used as a payment,
collateral or collection token. `caller` is always the msg.sender.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class FungibleToken(Protocol):
    address: str

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, caller: str, spender: str, amount: int) -> bool: ...

    def transfer(self, caller: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, caller: str, owner: str, to: str, amount: int) -> bool: ...


@runtime_checkable
class NonFungibleToken(Protocol):
    address: str

    def owner_of(self, token_id: int) -> str: ...

    def get_approved(self, token_id: int) -> str: ...

    def is_approved_for_all(self, owner: str, operator: str) -> bool: ...

    def approve(self, caller: str, to: str, token_id: int) -> None: ...

    def set_approval_for_all(self, caller: str, operator: str, approved: bool) -> None: ...

    def transfer_from(self, caller: str, owner: str, to: str, token_id: int) -> None: ...

    def safe_transfer_from(self, caller: str, owner: str, to: str, token_id: int) -> None: ...
