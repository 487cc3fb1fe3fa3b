"""In-memory ProposalRepository, lives in the ReserveMarketplace's storage."""
from typing import Generic, TypeVar

from src.rm_marketplace.domain.models import PurchaseReserveProposal, SaleReserveProposal

P = TypeVar("P", SaleReserveProposal, PurchaseReserveProposal)


class ProposalRepository(Generic[P]):
    def __init__(self) -> None:
        self._proposals: dict[str, P] = {}

    def __len__(self) -> int:
        return len(self._proposals)

    def get(self, proposal_id: str) -> P | None:
        return self._proposals.get(proposal_id)

    def save(self, proposal_id: str, proposal: P) -> None:
        self._proposals[proposal_id] = proposal

    def delete(self, proposal_id: str) -> None:
        self._proposals.pop(proposal_id, None)
