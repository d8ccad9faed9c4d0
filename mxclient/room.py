"""Rooms and their current state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from mxclient.events import Event


@dataclass
class Room:
    """A single Matrix room with its current state events."""

    id: str
    state: dict[str, dict[str, Event]] = field(default_factory=dict)

    def update_state(self, event: Event) -> None:
        """Store a state event, replacing any with the same type and state key."""
        if event.state_key is None:
            raise ValueError(f"event {event.id!r} of type {event.type!r} has no state key")
        self.state.setdefault(event.type, {})[event.state_key] = event

    def get_state_event(self, event_type: str, state_key: str) -> Optional[Event]:
        """Return the state event for the type and state key, or None."""
        return self.state.get(event_type, {}).get(state_key)

    def get_membership_state(self, user_id: str) -> str:
        """Return the membership of a user, or ``"leave"`` if unknown."""
        event = self.get_state_event("m.room.member", user_id)
        if event is not None:
            membership = event.content.get("membership")
            if isinstance(membership, str):
                return membership
        return "leave"


@dataclass
class PublicRoom:
    """A room as listed in the public room directory."""

    canonical_alias: str = ""
    name: str = ""
    world_readable: bool = False
    topic: str = ""
    num_joined_members: int = 0
    avatar_url: str = ""
    room_id: str = ""
    guest_can_join: bool = False
    aliases: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PublicRoom":
        data = data or {}
        return cls(
            canonical_alias=data.get("canonical_alias") or "",
            name=data.get("name") or "",
            world_readable=bool(data.get("world_readable", False)),
            topic=data.get("topic") or "",
            num_joined_members=int(data.get("num_joined_members") or 0),
            avatar_url=data.get("avatar_url") or "",
            room_id=data.get("room_id") or "",
            guest_can_join=bool(data.get("guest_can_join", False)),
            aliases=list(data.get("aliases") or []),
        )


def new_room(room_id: str) -> Room:
    """Create an empty room with the given ID."""
    return Room(id=room_id)