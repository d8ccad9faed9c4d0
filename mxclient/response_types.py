"""JSON response bodies of the client-server API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from mxclient.events import Event
from mxclient.room import PublicRoom


def _events(items: Any) -> list[Event]:
    return [Event.from_dict(item or {}) for item in items or []]


def _section_events(data: dict, key: str) -> list[Event]:
    return _events((data.get(key) or {}).get("events"))


@dataclass(eq=False)
class RespError(Exception):
    """The standard error body returned by homeservers."""

    errcode: str = ""
    error: str = ""

    def __str__(self) -> str:
        return f"{self.errcode}: {self.error}"

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespError":
        data = data or {}
        return cls(errcode=data.get("errcode") or "", error=data.get("error") or "")


@dataclass
class RespCreateFilter:
    filter_id: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespCreateFilter":
        data = data or {}
        return cls(filter_id=data.get("filter_id") or "")


@dataclass
class RespVersions:
    versions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespVersions":
        data = data or {}
        return cls(versions=list(data.get("versions") or []))


@dataclass
class RespPublicRooms:
    total_room_count_estimate: int = 0
    prev_batch: str = ""
    next_batch: str = ""
    chunk: list[PublicRoom] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespPublicRooms":
        data = data or {}
        return cls(
            total_room_count_estimate=int(data.get("total_room_count_estimate") or 0),
            prev_batch=data.get("prev_batch") or "",
            next_batch=data.get("next_batch") or "",
            chunk=[PublicRoom.from_dict(room) for room in data.get("chunk") or []],
        )


@dataclass
class RespJoinRoom:
    room_id: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespJoinRoom":
        data = data or {}
        return cls(room_id=data.get("room_id") or "")


@dataclass
class RespLeaveRoom:
    pass


@dataclass
class RespForgetRoom:
    pass


@dataclass
class RespInviteUser:
    pass


@dataclass
class RespKickUser:
    pass


@dataclass
class RespBanUser:
    pass


@dataclass
class RespUnbanUser:
    pass


@dataclass
class RespTyping:
    pass


@dataclass
class RespJoinedRooms:
    joined_rooms: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespJoinedRooms":
        data = data or {}
        return cls(joined_rooms=list(data.get("joined_rooms") or []))


@dataclass
class JoinedMember:
    """Profile of a joined room member; either value may be absent."""

    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass
class RespJoinedMembers:
    joined: dict[str, JoinedMember] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespJoinedMembers":
        data = data or {}
        joined = {}
        for user_id, member in (data.get("joined") or {}).items():
            member = member or {}
            joined[user_id] = JoinedMember(
                display_name=member.get("display_name"),
                avatar_url=member.get("avatar_url"),
            )
        return cls(joined=joined)


@dataclass
class RespMessages:
    start: str = ""
    chunk: list[Event] = field(default_factory=list)
    end: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespMessages":
        data = data or {}
        return cls(
            start=data.get("start") or "",
            chunk=_events(data.get("chunk")),
            end=data.get("end") or "",
        )


@dataclass
class RespSendEvent:
    event_id: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespSendEvent":
        data = data or {}
        return cls(event_id=data.get("event_id") or "")


@dataclass
class RespMediaUpload:
    content_uri: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespMediaUpload":
        data = data or {}
        return cls(content_uri=data.get("content_uri") or "")


@dataclass
class RespUserInteractive:
    """A user-interactive authentication challenge; flows hold stage lists."""

    flows: list[list[str]] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)
    session: str = ""
    completed: list[str] = field(default_factory=list)
    errcode: str = ""
    error: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespUserInteractive":
        data = data or {}
        return cls(
            flows=[list((flow or {}).get("stages") or []) for flow in data.get("flows") or []],
            params=dict(data.get("params") or {}),
            session=data.get("session") or "",
            completed=list(data.get("completed") or []),
            errcode=data.get("errcode") or "",
            error=data.get("error") or "",
        )

    def has_single_stage_flow(self, stage_name: str) -> bool:
        """True if some flow consists of exactly the one given stage."""
        return any(stages == [stage_name] for stages in self.flows)


@dataclass
class RespUserDisplayName:
    display_name: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespUserDisplayName":
        data = data or {}
        return cls(display_name=data.get("displayname") or "")


@dataclass
class RespUserStatus:
    presence: str = ""
    status_msg: str = ""
    last_active_ago: int = 0
    currently_active: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespUserStatus":
        data = data or {}
        return cls(
            presence=data.get("presence") or "",
            status_msg=data.get("status_msg") or "",
            last_active_ago=int(data.get("last_active_ago") or 0),
            currently_active=bool(data.get("currently_active", False)),
        )


@dataclass
class RespRegister:
    access_token: str = ""
    device_id: str = ""
    home_server: str = ""
    refresh_token: str = ""
    user_id: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespRegister":
        data = data or {}
        return cls(
            access_token=data.get("access_token") or "",
            device_id=data.get("device_id") or "",
            home_server=data.get("home_server") or "",
            refresh_token=data.get("refresh_token") or "",
            user_id=data.get("user_id") or "",
        )


@dataclass
class DiscoveryInformation:
    """Homeserver and identity server base URLs from discovery."""

    homeserver_base_url: str = ""
    identity_server_base_url: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DiscoveryInformation":
        data = data or {}
        homeserver = data.get("m.homeserver") or {}
        identity_server = data.get("m.identitiy_server") or {}
        return cls(
            homeserver_base_url=homeserver.get("base_url") or "",
            identity_server_base_url=identity_server.get("base_url") or "",
        )


@dataclass
class RespLogin:
    access_token: str = ""
    device_id: str = ""
    home_server: str = ""
    user_id: str = ""
    well_known: DiscoveryInformation = field(default_factory=DiscoveryInformation)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespLogin":
        data = data or {}
        return cls(
            access_token=data.get("access_token") or "",
            device_id=data.get("device_id") or "",
            home_server=data.get("home_server") or "",
            user_id=data.get("user_id") or "",
            well_known=DiscoveryInformation.from_dict(data.get("well_known")),
        )


@dataclass
class RespLogout:
    pass


@dataclass
class RespLogoutAll:
    pass


@dataclass
class RespWhoAmI:
    device_id: str = ""
    user_id: str = ""
    is_guest: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespWhoAmI":
        data = data or {}
        return cls(
            device_id=data.get("device_id") or "",
            user_id=data.get("user_id") or "",
            is_guest=bool(data.get("is_guest", False)),
        )


@dataclass
class RespCreateRoom:
    room_id: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespCreateRoom":
        data = data or {}
        return cls(room_id=data.get("room_id") or "")


@dataclass
class SyncTimeline:
    """The timeline section of a room in a /sync response."""

    events: list[Event] = field(default_factory=list)
    limited: bool = False
    prev_batch: str = ""


def _timeline(data: Optional[dict]) -> SyncTimeline:
    data = data or {}
    return SyncTimeline(
        events=_events(data.get("events")),
        limited=bool(data.get("limited", False)),
        prev_batch=data.get("prev_batch") or "",
    )


@dataclass
class SyncJoinedRoom:
    """A joined room in a /sync response."""

    state: list[Event] = field(default_factory=list)
    timeline: SyncTimeline = field(default_factory=SyncTimeline)
    ephemeral: list[Event] = field(default_factory=list)


@dataclass
class SyncLeftRoom:
    """A left room in a /sync response."""

    state: list[Event] = field(default_factory=list)
    timeline: SyncTimeline = field(default_factory=SyncTimeline)


@dataclass
class SyncInvitedRoom:
    """An invited room in a /sync response."""

    state: list[Event] = field(default_factory=list)


def _joined_room(data: Optional[dict]) -> SyncJoinedRoom:
    data = data or {}
    return SyncJoinedRoom(
        state=_section_events(data, "state"),
        timeline=_timeline(data.get("timeline")),
        ephemeral=_section_events(data, "ephemeral"),
    )


def _left_room(data: Optional[dict]) -> SyncLeftRoom:
    data = data or {}
    return SyncLeftRoom(
        state=_section_events(data, "state"),
        timeline=_timeline(data.get("timeline")),
    )


def _invited_room(data: Optional[dict]) -> SyncInvitedRoom:
    data = data or {}
    return SyncInvitedRoom(state=_section_events(data, "invite_state"))


@dataclass
class RespSync:
    """A /sync response; rooms are split into join, invite and leave maps."""

    next_batch: str = ""
    account_data: list[Event] = field(default_factory=list)
    presence: list[Event] = field(default_factory=list)
    join: dict[str, SyncJoinedRoom] = field(default_factory=dict)
    invite: dict[str, SyncInvitedRoom] = field(default_factory=dict)
    leave: dict[str, SyncLeftRoom] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespSync":
        data = data or {}
        rooms = data.get("rooms") or {}
        return cls(
            next_batch=data.get("next_batch") or "",
            account_data=_section_events(data, "account_data"),
            presence=_section_events(data, "presence"),
            join={rid: _joined_room(room) for rid, room in (rooms.get("join") or {}).items()},
            invite={rid: _invited_room(room) for rid, room in (rooms.get("invite") or {}).items()},
            leave={rid: _left_room(room) for rid, room in (rooms.get("leave") or {}).items()},
        )


@dataclass
class RespTurnServer:
    username: str = ""
    password: str = ""
    ttl: int = 0
    uris: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "RespTurnServer":
        data = data or {}
        return cls(
            username=data.get("username") or "",
            password=data.get("password") or "",
            ttl=int(data.get("ttl") or 0),
            uris=list(data.get("uris") or []),
        )