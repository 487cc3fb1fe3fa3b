"""ProposalRepository Protocol: keyed store of unmatched proposals."""
from typing import Protocol, TypeVar

from src.rm_marketplace.domain.models import PurchaseReserveProposal, SaleReserveProposal

P = TypeVar("P", SaleReserveProposal, PurchaseReserveProposal)


class ProposalRepositoryProtocol(Protocol[P]):
    def get(self, proposal_id: str) -> P | None: ...

    def save(self, proposal_id: str, proposal: P) -> None: ...

    def delete(self, proposal_id: str) -> None: ...
