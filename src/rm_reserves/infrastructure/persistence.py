"""In-memory ReserveRepository, lives in the ReservesManager's storage."""

from src.rm_reserves.domain.models import Reserve


class ReserveRepository:
    def __init__(self) -> None:
        self._reserves: dict[str, Reserve] = {}

    def __len__(self) -> int:
        return len(self._reserves)

    def get(self, reserve_id: str) -> Reserve | None:
        return self._reserves.get(reserve_id)

    def save(self, reserve_id: str, reserve: Reserve) -> None:
        self._reserves[reserve_id] = reserve

    def delete(self, reserve_id: str) -> None:
        self._reserves.pop(reserve_id, None)

    def list_ids(self) -> list[str]:
        return list(self._reserves)
