"""Sync filter definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

_LIST_KEYS = ("not_rooms", "rooms", "not_senders", "not_types", "senders", "types")


def _copy_list(value: Any) -> Optional[list]:
    return list(value) if value is not None else None


@dataclass
class FilterPart:
    """Filtering rules for one category of events."""

    not_rooms: Optional[list[str]] = None
    rooms: Optional[list[str]] = None
    limit: int = 0
    not_senders: Optional[list[str]] = None
    not_types: Optional[list[str]] = None
    senders: Optional[list[str]] = None
    types: Optional[list[str]] = None
    contains_url: Optional[bool] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.not_rooms:
            out["not_rooms"] = list(self.not_rooms)
        if self.rooms:
            out["rooms"] = list(self.rooms)
        if self.limit:
            out["limit"] = self.limit
        if self.not_senders:
            out["not_senders"] = list(self.not_senders)
        if self.not_types:
            out["not_types"] = list(self.not_types)
        if self.senders:
            out["senders"] = list(self.senders)
        if self.types:
            out["types"] = list(self.types)
        if self.contains_url is not None:
            out["contains_url"] = self.contains_url
        return out

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "FilterPart":
        data = data or {}
        lists = {key: _copy_list(data.get(key)) for key in _LIST_KEYS}
        return cls(
            limit=int(data.get("limit") or 0),
            contains_url=data.get("contains_url"),
            **lists,
        )


@dataclass
class RoomFilter:
    """Filtering rules for room events."""

    account_data: FilterPart = field(default_factory=FilterPart)
    ephemeral: FilterPart = field(default_factory=FilterPart)
    include_leave: bool = False
    not_rooms: Optional[list[str]] = None
    rooms: Optional[list[str]] = None
    state: FilterPart = field(default_factory=FilterPart)
    timeline: FilterPart = field(default_factory=FilterPart)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "account_data": self.account_data.to_dict(),
            "ephemeral": self.ephemeral.to_dict(),
        }
        if self.include_leave:
            out["include_leave"] = True
        if self.not_rooms:
            out["not_rooms"] = list(self.not_rooms)
        if self.rooms:
            out["rooms"] = list(self.rooms)
        out["state"] = self.state.to_dict()
        out["timeline"] = self.timeline.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RoomFilter":
        data = data or {}
        return cls(
            account_data=FilterPart.from_dict(data.get("account_data")),
            ephemeral=FilterPart.from_dict(data.get("ephemeral")),
            include_leave=bool(data.get("include_leave", False)),
            not_rooms=_copy_list(data.get("not_rooms")),
            rooms=_copy_list(data.get("rooms")),
            state=FilterPart.from_dict(data.get("state")),
            timeline=FilterPart.from_dict(data.get("timeline")),
        )


@dataclass
class Filter:
    """Tells the server how to filter responses such as /sync."""

    account_data: FilterPart = field(default_factory=FilterPart)
    event_fields: Optional[list[str]] = None
    event_format: str = ""
    presence: FilterPart = field(default_factory=FilterPart)
    room: RoomFilter = field(default_factory=RoomFilter)

    def validate(self) -> None:
        """Raise ``ValueError`` if a property holds an invalid value."""
        if self.event_format not in ("client", "federation"):
            raise ValueError(
                'Bad event_format value. Must be one of ["client", "federation"]'
            )

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"account_data": self.account_data.to_dict()}
        if self.event_fields:
            out["event_fields"] = list(self.event_fields)
        if self.event_format:
            out["event_format"] = self.event_format
        out["presence"] = self.presence.to_dict()
        out["room"] = self.room.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Filter":
        data = data or {}
        return cls(
            account_data=FilterPart.from_dict(data.get("account_data")),
            event_fields=_copy_list(data.get("event_fields")),
            event_format=data.get("event_format") or "",
            presence=FilterPart.from_dict(data.get("presence")),
            room=RoomFilter.from_dict(data.get("room")),
        )


def default_filter_part() -> FilterPart:
    """The filter part the server applies when none is given."""
    return FilterPart(limit=20)


def default_filter() -> Filter:
    """The filter the server applies when none is given."""
    return Filter(
        account_data=default_filter_part(),
        event_format="client",
        presence=default_filter_part(),
        room=RoomFilter(
            account_data=default_filter_part(),
            ephemeral=default_filter_part(),
            state=default_filter_part(),
            timeline=default_filter_part(),
        ),
    )