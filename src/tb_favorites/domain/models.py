"""Favorites — ordered set of service ids the user marked."""

from collections.abc import Iterable
from typing import Any


class Favorites:
    def __init__(self, service_ids: Iterable[str] = ()) -> None:
        # dict keeps insertion order and O(1) membership
        self._ids: dict[str, None] = dict.fromkeys(service_ids)

    def __len__(self) -> int:
        return len(self._ids)

    def items(self) -> list[str]:
        return list(self._ids)

    def is_favorite(self, service_id: str) -> bool:
        return service_id in self._ids

    def add(self, service_id: str) -> None:
        self._ids[service_id] = None

    def remove(self, service_id: str) -> None:
        self._ids.pop(service_id, None)

    def toggle(self, service_id: str) -> bool:
        """Flip membership and return the new state."""
        if service_id in self._ids:
            self.remove(service_id)
            return False
        self.add(service_id)
        return True

    def to_snapshot(self) -> dict[str, Any]:
        return {"favorites": self.items()}

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any]) -> "Favorites":
        return cls(snapshot.get("favorites", []))
