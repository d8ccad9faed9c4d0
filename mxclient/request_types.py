"""JSON request bodies for the client-server API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from mxclient.events import Event


def _encode(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    return to_dict() if callable(to_dict) else value


def _set_if(out: dict, key: str, value: Any) -> None:
    if value:
        out[key] = value


@dataclass
class ReqRegister:
    """Body of a registration request."""

    username: str = ""
    bind_email: bool = False
    password: str = ""
    device_id: str = ""
    initial_device_display_name: str = ""
    auth: Any = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        _set_if(out, "username", self.username)
        _set_if(out, "bind_email", self.bind_email)
        _set_if(out, "password", self.password)
        _set_if(out, "device_id", self.device_id)
        out["initial_device_display_name"] = self.initial_device_display_name
        if self.auth is not None:
            out["auth"] = _encode(self.auth)
        return out


@dataclass
class ReqLogin:
    """Body of a login request."""

    type: str = ""
    identifier: Any = None
    password: str = ""
    medium: str = ""
    user: str = ""
    address: str = ""
    token: str = ""
    device_id: str = ""
    initial_device_display_name: str = ""

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"type": self.type}
        if self.identifier is not None:
            out["identifier"] = _encode(self.identifier)
        _set_if(out, "password", self.password)
        _set_if(out, "medium", self.medium)
        _set_if(out, "user", self.user)
        _set_if(out, "address", self.address)
        _set_if(out, "token", self.token)
        _set_if(out, "device_id", self.device_id)
        _set_if(out, "initial_device_display_name", self.initial_device_display_name)
        return out


@dataclass
class ReqInvite3PID:
    """A third-party invite, on its own or as part of room creation."""

    id_server: str = ""
    medium: str = ""
    address: str = ""

    def to_dict(self) -> dict:
        return {"id_server": self.id_server, "medium": self.medium, "address": self.address}


@dataclass
class ReqCreateRoom:
    """Body of a room creation request."""

    visibility: str = ""
    room_alias_name: str = ""
    name: str = ""
    topic: str = ""
    invite: list[str] = field(default_factory=list)
    invite_3pid: list[ReqInvite3PID] = field(default_factory=list)
    creation_content: dict[str, Any] = field(default_factory=dict)
    initial_state: list[Event] = field(default_factory=list)
    preset: str = ""
    is_direct: bool = False

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        _set_if(out, "visibility", self.visibility)
        _set_if(out, "room_alias_name", self.room_alias_name)
        _set_if(out, "name", self.name)
        _set_if(out, "topic", self.topic)
        if self.invite:
            out["invite"] = list(self.invite)
        if self.invite_3pid:
            out["invite_3pid"] = [item.to_dict() for item in self.invite_3pid]
        if self.creation_content:
            out["creation_content"] = dict(self.creation_content)
        if self.initial_state:
            out["initial_state"] = [event.to_dict() for event in self.initial_state]
        _set_if(out, "preset", self.preset)
        _set_if(out, "is_direct", self.is_direct)
        return out


@dataclass
class ReqRedact:
    """Body of a redaction request."""

    reason: str = ""

    def to_dict(self) -> dict:
        return {"reason": self.reason} if self.reason else {}


@dataclass
class ReqInviteUser:
    """Body of a request inviting a user to a room."""

    user_id: str = ""

    def to_dict(self) -> dict:
        return {"user_id": self.user_id}


def _with_reason(reason: Optional[str], user_id: str) -> dict:
    out: dict[str, Any] = {}
    _set_if(out, "reason", reason)
    out["user_id"] = user_id
    return out


@dataclass
class ReqKickUser:
    """Body of a request kicking a user from a room."""

    user_id: str = ""
    reason: str = ""

    def to_dict(self) -> dict:
        return _with_reason(self.reason, self.user_id)


@dataclass
class ReqBanUser:
    """Body of a request banning a user from a room."""

    user_id: str = ""
    reason: str = ""

    def to_dict(self) -> dict:
        return _with_reason(self.reason, self.user_id)


@dataclass
class ReqUnbanUser:
    """Body of a request lifting a user's ban from a room."""

    user_id: str = ""

    def to_dict(self) -> dict:
        return {"user_id": self.user_id}


@dataclass
class ReqTyping:
    """Body of a typing notification; timeout is in milliseconds."""

    typing: bool = False
    timeout: int = 0

    def to_dict(self) -> dict:
        return {"typing": self.typing, "timeout": self.timeout}