"""Storage of sync tokens, filter IDs and rooms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from mxclient.room import Room


class Storer(Protocol):
    """Anything that can keep filter IDs, next-batch tokens and rooms."""

    def save_filter_id(self, user_id: str, filter_id: str) -> None: ...

    def load_filter_id(self, user_id: str) -> str: ...

    def save_next_batch(self, user_id: str, next_batch_token: str) -> None: ...

    def load_next_batch(self, user_id: str) -> str: ...

    def save_room(self, room: Room) -> None: ...

    def load_room(self, room_id: str) -> Optional[Room]: ...


@dataclass
class InMemoryStore:
    """A store that keeps everything in dictionaries and forgets it on exit.

    Only the thread running the sync loop should save or load through it.
    """

    filters: dict[str, str] = field(default_factory=dict)
    next_batch: dict[str, str] = field(default_factory=dict)
    rooms: dict[str, Room] = field(default_factory=dict)

    def save_filter_id(self, user_id: str, filter_id: str) -> None:
        self.filters[user_id] = filter_id

    def load_filter_id(self, user_id: str) -> str:
        """The stored filter ID, or an empty string if there is none."""
        return self.filters.get(user_id, "")

    def save_next_batch(self, user_id: str, next_batch_token: str) -> None:
        self.next_batch[user_id] = next_batch_token

    def load_next_batch(self, user_id: str) -> str:
        """The stored next-batch token, or an empty string if there is none."""
        return self.next_batch.get(user_id, "")

    def save_room(self, room: Room) -> None:
        self.rooms[room.id] = room

    def load_room(self, room_id: str) -> Optional[Room]:
        """The stored room, or None if it is unknown."""
        return self.rooms.get(room_id)


def new_in_memory_store() -> InMemoryStore:
    """Create an empty in-memory store."""
    return InMemoryStore()