from __future__ import annotations

from abc import ABC, abstractmethod

from boardroom.domain.entities.boardroom import Boardroom


class BoardroomStorePort(ABC):
    @abstractmethod
    def get(self, boardroom_id: str) -> Boardroom | None:
        raise NotImplementedError

    @abstractmethod
    def list_rooms(self, active_only: bool = True) -> list[Boardroom]:
        """Rooms sorted by name."""
        raise NotImplementedError

    @abstractmethod
    def save(self, boardroom: Boardroom) -> None:
        raise NotImplementedError
