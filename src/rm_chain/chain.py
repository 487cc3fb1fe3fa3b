"""In-process execution environment for the reserve contracts.

A Chain owns the block clock, the event log and a registry of contracts by
address. Public contract entry points run inside `Chain.atomic()`: if the
call raises, every registered contract's storage and the event log are put
back exactly as they were at entry, so no partial effect survives a failed
call. Nested calls (marketplace -> manager -> token) join the outermost
scope.
"""

import copy
import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar, cast

from src.rm_chain.addresses import to_address
from src.rm_chain.clock import Clock, SystemClock
from src.rm_chain.events import Event, EventLog
from src.rm_common.errors import ContractNotFoundError, InternalError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C")


class Chain:
    def __init__(self, clock: Clock | None = None, chain_id: int = 31337) -> None:
        self.clock: Clock = clock or SystemClock()
        self.chain_id = chain_id
        self.events = EventLog()
        self._contracts: dict[str, "Contract"] = {}
        self._depth = 0

    def now(self) -> int:
        return self.clock.now()

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register(self, contract: "Contract") -> None:
        if contract.address in self._contracts:
            raise InternalError(f"Address already in use: {contract.address}")
        self._contracts[contract.address] = contract

    def get(self, address: str) -> "Contract | None":
        return self._contracts.get(to_address(address))

    def resolve(self, address: str, expected: type[C]) -> C:
        """Return the contract at `address`, checking it implements `expected`."""
        contract = self.get(address)
        if contract is None or not isinstance(contract, expected):
            raise ContractNotFoundError(to_address(address), expected.__name__)
        return contract

    # ------------------------------------------------------------------
    # Atomicity
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshots = {address: c.snapshot() for address, c in self._contracts.items()}
        event_mark = len(self.events)
        self._depth = 1
        try:
            yield
        except Exception as exc:
            for address, contract in self._contracts.items():
                # Contracts deployed inside the failed call have no snapshot.
                if address in snapshots:
                    contract.restore(snapshots[address])
            for address in [a for a in self._contracts if a not in snapshots]:
                del self._contracts[address]
            self.events.truncate(event_mark)
            logger.warning("Call reverted: %s", exc)
            raise
        finally:
            self._depth = 0


class Contract:
    """Base for everything deployed on a Chain.

    Subclasses list the attributes that make up their storage in
    `_storage_fields`; only those are snapshotted and rolled back.
    """

    _storage_fields: tuple[str, ...] = ()

    def __init__(self, chain: Chain, address: str) -> None:
        self.chain = chain
        self.address = to_address(address)
        chain.register(self)

    @property
    def now(self) -> int:
        return self.chain.now()

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy({name: getattr(self, name) for name in self._storage_fields})

    def restore(self, snapshot: dict[str, Any]) -> None:
        for name, value in snapshot.items():
            setattr(self, name, value)

    def emit(self, name: str, **args: Any) -> Event:
        return self.chain.events.emit(name, self.address, self.now, args)


def transactional(method: F) -> F:
    """Run a contract entry point all-or-nothing inside Chain.atomic()."""

    @functools.wraps(method)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        with self.chain.atomic():
            return method(self, *args, **kwargs)

    return cast(F, wrapper)
