"""Initializable + Ownable + UUPS-style upgrade hook.

Contracts are built in two phases: the constructor fixes immutable
collaborators, `initialize` sets storage exactly once. `upgrade_to` swaps
the behaviour of a live contract for that of a compatible implementation
while its storage stays in place.
"""

import logging
from typing import Any

from src.rm_chain.addresses import ZERO_ADDRESS, to_address
from src.rm_chain.chain import Chain, Contract, transactional
from src.rm_common.errors import (
    AlreadyInitializedError,
    NotOwnerError,
    NotUpgradeableImplementationError,
)

logger = logging.getLogger(__name__)


class UpgradeableContract(Contract):
    _storage_fields = ("_initialized", "_owner", "_implementation")

    def __init__(self, chain: Chain, address: str) -> None:
        super().__init__(chain, address)
        self._initialized = False
        self._owner = ZERO_ADDRESS
        self._implementation = self.address

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def implementation(self) -> str:
        return self._implementation

    @property
    def initialized(self) -> bool:
        return self._initialized

    def snapshot(self) -> dict[str, Any]:
        state = super().snapshot()
        state["__class__"] = type(self)
        return state

    def restore(self, snapshot: dict[str, Any]) -> None:
        state = dict(snapshot)
        self.__class__ = state.pop("__class__")
        super().restore(state)

    def _initializer(self, caller: str) -> None:
        """Guard for `initialize`; the initializing caller becomes the owner."""
        if self._initialized:
            raise AlreadyInitializedError()
        self._initialized = True
        self._set_owner(to_address(caller))

    def _only_owner(self, caller: str) -> None:
        if to_address(caller) != self._owner:
            raise NotOwnerError()

    def _set_owner(self, new_owner: str) -> None:
        previous = self._owner
        self._owner = new_owner
        self.emit("OwnershipTransferred", previousOwner=previous, newOwner=new_owner)

    @classmethod
    def _proxiable_base(cls) -> type["UpgradeableContract"]:
        """First concrete class below UpgradeableContract in the MRO."""
        for klass in reversed(cls.__mro__):
            if issubclass(klass, UpgradeableContract) and klass is not UpgradeableContract:
                return klass
        return cls

    @transactional
    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self._only_owner(caller)
        self._set_owner(to_address(new_owner))

    @transactional
    def upgrade_to(self, caller: str, new_implementation: str) -> None:
        self._only_owner(caller)
        implementation = self.chain.get(new_implementation)
        if implementation is None or not isinstance(implementation, self._proxiable_base()):
            raise NotUpgradeableImplementationError()

        self._implementation = implementation.address
        # Storage stays on this instance; only the code is replaced.
        self.__class__ = type(implementation)
        logger.info("%s upgraded to %s", self.address, implementation.address)
        self.emit("Upgraded", implementation=implementation.address)
