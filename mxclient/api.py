"""High-level Matrix client-server API calls built on the core client."""

from __future__ import annotations

import json
import time
from typing import Any, BinaryIO, Optional, Union

from mxclient.client import Client, HTTPError
from mxclient.events import FileMessage, ImageMessage, TextMessage, VideoMessage
from mxclient.request_types import (
    ReqBanUser,
    ReqCreateRoom,
    ReqInvite3PID,
    ReqInviteUser,
    ReqKickUser,
    ReqLogin,
    ReqRedact,
    ReqRegister,
    ReqTyping,
    ReqUnbanUser,
)
from mxclient.response_types import (
    RespBanUser,
    RespCreateRoom,
    RespForgetRoom,
    RespInviteUser,
    RespJoinedMembers,
    RespJoinedRooms,
    RespJoinRoom,
    RespKickUser,
    RespLeaveRoom,
    RespLogin,
    RespLogout,
    RespLogoutAll,
    RespMediaUpload,
    RespMessages,
    RespPublicRooms,
    RespRegister,
    RespSendEvent,
    RespTurnServer,
    RespTyping,
    RespUnbanUser,
    RespUserDisplayName,
    RespUserInteractive,
    RespUserStatus,
    RespVersions,
    RespWhoAmI,
)

_ROOM_MESSAGE = "m.room.message"
_HTML_FORMAT = "org.matrix.custom.html"
_DUMMY_STAGE = "m.login.dummy"


def _txn_id() -> str:
    return "mx" + str(time.time_ns())


class MatrixClient(Client):
    """A Matrix client with one method per client-server API endpoint."""

    # Registration and login

    def _register(
        self, url: str, req: ReqRegister
    ) -> tuple[Optional[RespRegister], Optional[RespUserInteractive]]:
        try:
            data = self.make_request("POST", url, req)
        except HTTPError as exc:
            if exc.code != 401:
                raise
            return None, RespUserInteractive.from_dict(json.loads(exc.contents))
        return RespRegister.from_dict(data), None

    def register(
        self, req: ReqRegister
    ) -> tuple[Optional[RespRegister], Optional[RespUserInteractive]]:
        """Register a user account.

        Returns ``(response, None)`` on success, or ``(None, challenge)`` when the
        server asks for user-interactive authentication (HTTP 401).
        """
        return self._register(self.build_url("register"), req)

    def register_guest(
        self, req: ReqRegister
    ) -> tuple[Optional[RespRegister], Optional[RespUserInteractive]]:
        """Register a guest account; returns like :meth:`register`."""
        url = self.build_url_with_query(["register"], {"kind": "guest"})
        return self._register(url, req)

    def register_dummy(self, req: ReqRegister) -> RespRegister:
        """Register using ``m.login.dummy`` authentication.

        Credentials are not set on the client. Raises ``RuntimeError`` if the
        server does not allow this kind of registration.
        """
        res, uia = self.register(req)
        if uia is not None and uia.has_single_stage_flow(_DUMMY_STAGE):
            auth = {"type": _DUMMY_STAGE}
            if uia.session:
                auth["session"] = uia.session
            req.auth = auth
            res, _ = self.register(req)
        if res is None:
            raise RuntimeError(
                "registration failed: does this server support m.login.dummy?"
            )
        return res

    def login(self, req: ReqLogin) -> RespLogin:
        """Log in; credentials are not set on the client."""
        return RespLogin.from_dict(self.make_request("POST", self.build_url("login"), req))

    def logout(self) -> RespLogout:
        """Log out the current session; credentials are kept on the client."""
        self.make_request("POST", self.build_url("logout"))
        return RespLogout()

    def logout_all(self) -> RespLogoutAll:
        """Log out on all devices; credentials are kept on the client."""
        self.make_request("POST", self.build_url("logout/all"))
        return RespLogoutAll()

    def whoami(self) -> RespWhoAmI:
        """Information about the owner of the access token."""
        return RespWhoAmI.from_dict(
            self.make_request("GET", self.build_url("account/whoami"))
        )

    def versions(self) -> RespVersions:
        """The Matrix versions supported by the homeserver."""
        url = self.build_base_url("_matrix", "client", "versions")
        return RespVersions.from_dict(self.make_request("GET", url))

    # Room directory

    def public_rooms(
        self, limit: int = 0, since: str = "", server: str = ""
    ) -> RespPublicRooms:
        """List public rooms on the target server."""
        args: dict[str, str] = {}
        if limit:
            args["limit"] = str(limit)
        if since:
            args["since"] = since
        if server:
            args["server"] = server
        url = self.build_url_with_query(["publicRooms"], args)
        return RespPublicRooms.from_dict(self.make_request("GET", url))

    def public_rooms_filtered(
        self, limit: int = 0, since: str = "", server: str = "", filter: str = ""
    ) -> RespPublicRooms:
        """List public rooms, filtered by the server."""
        content: dict[str, str] = {}
        if limit:
            content["limit"] = str(limit)
        if since:
            content["since"] = since
        if filter:
            content["filter"] = filter
        if server:
            url = self.build_url_with_query(["publicRooms"], {"server": server})
        else:
            url = self.build_url("publicRooms")
        return RespPublicRooms.from_dict(self.make_request("POST", url, content))

    def join_room(
        self, room_id_or_alias: str, server_name: str = "", content: Any = None
    ) -> RespJoinRoom:
        """Join a room by ID or alias, optionally via a given server."""
        if server_name:
            url = self.build_url_with_query(
                ["join", room_id_or_alias], {"server_name": server_name}
            )
        else:
            url = self.build_url("join", room_id_or_alias)
        return RespJoinRoom.from_dict(self.make_request("POST", url, content))

    # Profile and presence

    def get_display_name(self, mxid: str) -> RespUserDisplayName:
        url = self.build_url("profile", mxid, "displayname")
        return RespUserDisplayName.from_dict(self.make_request("GET", url))

    def get_own_display_name(self) -> RespUserDisplayName:
        return self.get_display_name(self.user_id)

    def set_display_name(self, display_name: str) -> None:
        url = self.build_url("profile", self.user_id, "displayname")
        self.make_request("PUT", url, {"displayname": display_name})

    def get_avatar_url(self) -> str:
        url = self.build_url("profile", self.user_id, "avatar_url")
        data = self.make_request("GET", url) or {}
        return data.get("avatar_url") or ""

    def set_avatar_url(self, url: str) -> None:
        request_url = self.build_url("profile", self.user_id, "avatar_url")
        self.make_request("PUT", request_url, {"avatar_url": url})

    def get_status(self, mxid: str) -> RespUserStatus:
        url = self.build_url("presence", mxid, "status")
        return RespUserStatus.from_dict(self.make_request("GET", url))

    def get_own_status(self) -> RespUserStatus:
        return self.get_status(self.user_id)

    def set_status(self, presence: str, status: str) -> None:
        url = self.build_url("presence", self.user_id, "status")
        self.make_request("PUT", url, {"presence": presence, "status_msg": status})

    # Sending events

    def send_message_event(self, room_id: str, event_type: str, content: Any) -> RespSendEvent:
        """Send a message event with a fresh transaction ID."""
        url = self.build_url("rooms", room_id, "send", event_type, _txn_id())
        return RespSendEvent.from_dict(self.make_request("PUT", url, content))

    def send_state_event(
        self, room_id: str, event_type: str, state_key: str, content: Any
    ) -> RespSendEvent:
        url = self.build_url("rooms", room_id, "state", event_type, state_key)
        return RespSendEvent.from_dict(self.make_request("PUT", url, content))

    def send_text(self, room_id: str, text: str) -> RespSendEvent:
        return self.send_message_event(
            room_id, _ROOM_MESSAGE, TextMessage(msgtype="m.text", body=text)
        )

    def send_formatted_text(
        self, room_id: str, text: str, formatted_text: str
    ) -> RespSendEvent:
        message = TextMessage(
            msgtype="m.text", body=text, formatted_body=formatted_text, format=_HTML_FORMAT
        )
        return self.send_message_event(room_id, _ROOM_MESSAGE, message)

    def send_image(self, room_id: str, body: str, url: str) -> RespSendEvent:
        return self.send_message_event(
            room_id, _ROOM_MESSAGE, ImageMessage(msgtype="m.image", body=body, url=url)
        )

    def send_video(self, room_id: str, body: str, url: str) -> RespSendEvent:
        return self.send_message_event(
            room_id, _ROOM_MESSAGE, VideoMessage(msgtype="m.video", body=body, url=url)
        )

    def send_file(self, room_id: str, body: str, url: str) -> RespSendEvent:
        return self.send_message_event(
            room_id, _ROOM_MESSAGE, FileMessage(msgtype="m.file", body=body, url=url)
        )

    def send_notice(self, room_id: str, text: str) -> RespSendEvent:
        return self.send_message_event(
            room_id, _ROOM_MESSAGE, TextMessage(msgtype="m.notice", body=text)
        )

    def redact_event(
        self, room_id: str, event_id: str, req: Optional[ReqRedact] = None
    ) -> RespSendEvent:
        url = self.build_url("rooms", room_id, "redact", event_id, _txn_id())
        return RespSendEvent.from_dict(self.make_request("PUT", url, req))

    def mark_read(self, room_id: str, event_id: str) -> None:
        """Mark the event, and everything before it, as read."""
        url = self.build_url("rooms", room_id, "receipt", "m.read", event_id)
        self.make_request("POST", url)

    # Room membership

    def create_room(self, req: ReqCreateRoom) -> RespCreateRoom:
        url = self.build_url("createRoom")
        return RespCreateRoom.from_dict(self.make_request("POST", url, req))

    def leave_room(self, room_id: str) -> RespLeaveRoom:
        self.make_request("POST", self.build_url("rooms", room_id, "leave"), {})
        return RespLeaveRoom()

    def forget_room(self, room_id: str) -> RespForgetRoom:
        self.make_request("POST", self.build_url("rooms", room_id, "forget"), {})
        return RespForgetRoom()

    def invite_user(self, room_id: str, req: ReqInviteUser) -> RespInviteUser:
        self.make_request("POST", self.build_url("rooms", room_id, "invite"), req)
        return RespInviteUser()

    def invite_user_by_third_party(self, room_id: str, req: ReqInvite3PID) -> RespInviteUser:
        self.make_request("POST", self.build_url("rooms", room_id, "invite"), req)
        return RespInviteUser()

    def kick_user(self, room_id: str, req: ReqKickUser) -> RespKickUser:
        self.make_request("POST", self.build_url("rooms", room_id, "kick"), req)
        return RespKickUser()

    def ban_user(self, room_id: str, req: ReqBanUser) -> RespBanUser:
        self.make_request("POST", self.build_url("rooms", room_id, "ban"), req)
        return RespBanUser()

    def unban_user(self, room_id: str, req: ReqUnbanUser) -> RespUnbanUser:
        self.make_request("POST", self.build_url("rooms", room_id, "unban"), req)
        return RespUnbanUser()

    def user_typing(self, room_id: str, typing: bool, timeout: int) -> RespTyping:
        """Set the typing state of the client's user; timeout is in milliseconds."""
        url = self.build_url("rooms", room_id, "typing", self.user_id)
        self.make_request("PUT", url, ReqTyping(typing=typing, timeout=timeout))
        return RespTyping()

    def state_event(self, room_id: str, event_type: str, state_key: str = "") -> Any:
        """Return the decoded content of a single state event."""
        url = self.build_url("rooms", room_id, "state", event_type, state_key)
        return self.make_request("GET", url)

    # Media

    def upload_link(self, link: str) -> RespMediaUpload:
        """Fetch an HTTP URL and upload its body to the content repository."""
        with self.http.get(link) as response:
            content = response.content
            content_type = response.headers.get("Content-Type", "")
        return self.upload_to_content_repo(content, content_type, len(content))

    def upload_to_content_repo(
        self,
        content: Union[bytes, BinaryIO],
        content_type: str,
        content_length: int,
    ) -> RespMediaUpload:
        """Upload data to the content repository and return its MXC URI.

        A negative ``content_length`` means the length is unknown.
        """
        headers = {
            "Content-Type": content_type,
            "Authorization": "Bearer " + self.access_token,
        }
        if content_length >= 0:
            headers["Content-Length"] = str(content_length)
        url = self.build_base_url("_matrix/media/r0/upload")
        with self.http.request("POST", url, data=content, headers=headers) as response:
            if response.status_code != 200:
                contents = response.content
                raise HTTPError(
                    contents=contents,
                    message="Upload request failed: "
                    + contents.decode("utf-8", errors="replace"),
                    code=response.status_code,
                )
            return RespMediaUpload.from_dict(response.json())

    # Room contents

    def joined_members(self, room_id: str) -> RespJoinedMembers:
        url = self.build_url("rooms", room_id, "joined_members")
        return RespJoinedMembers.from_dict(self.make_request("GET", url))

    def joined_rooms(self) -> RespJoinedRooms:
        return RespJoinedRooms.from_dict(
            self.make_request("GET", self.build_url("joined_rooms"))
        )

    def messages(
        self,
        room_id: str,
        from_token: str,
        to_token: str = "",
        direction: str = "b",
        limit: int = 0,
    ) -> RespMessages:
        """Page through the message history of a room."""
        query = {"from": from_token, "dir": direction}
        if to_token:
            query["to"] = to_token
        if limit:
            query["limit"] = str(limit)
        url = self.build_url_with_query(["rooms", room_id, "messages"], query)
        return RespMessages.from_dict(self.make_request("GET", url))

    def turn_server(self) -> RespTurnServer:
        """TURN server details and credentials for VoIP calls."""
        return RespTurnServer.from_dict(
            self.make_request("GET", self.build_url("voip", "turnServer"))
        )


def new_client(homeserver_url: str, user_id: str = "", access_token: str = "") -> MatrixClient:
    """Create a client with an in-memory store and the default syncer."""
    return MatrixClient(homeserver_url, user_id, access_token)