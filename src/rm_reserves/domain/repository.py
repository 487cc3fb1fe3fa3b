"""ReserveRepository Protocol: keyed store of active reserves."""
from typing import Protocol

from src.rm_reserves.domain.models import Reserve


class ReserveRepositoryProtocol(Protocol):
    def get(self, reserve_id: str) -> Reserve | None: ...

    def save(self, reserve_id: str, reserve: Reserve) -> None: ...

    def delete(self, reserve_id: str) -> None: ...

    def list_ids(self) -> list[str]: ...
