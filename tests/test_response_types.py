import pytest

from mxclient.response_types import (
    DiscoveryInformation,
    RespCreateFilter,
    RespError,
    RespJoinedMembers,
    RespJoinedRooms,
    RespLogin,
    RespMediaUpload,
    RespMessages,
    RespPublicRooms,
    RespRegister,
    RespSendEvent,
    RespSync,
    RespTurnServer,
    RespUserDisplayName,
    RespUserInteractive,
    RespUserStatus,
    RespVersions,
    RespWhoAmI,
)

PUBLIC_ROOMS = {
    "chunk": [
        {
            "aliases": ["#murrays:cheese.bar"],
            "avatar_url": "mxc://bleeker.street/CHEDDARandBRIE",
            "guest_can_join": False,
            "name": "CHEESE",
            "num_joined_members": 37,
            "room_id": "!ol19s:bleecker.street",
            "topic": "Tasty tasty cheese",
            "world_readable": True,
        }
    ],
    "next_batch": "p190q",
    "prev_batch": "p1902",
    "total_room_count_estimate": 115,
}


def test_resp_error_message_and_raise():
    err = RespError.from_dict({"errcode": "M_FORBIDDEN", "error": "nope"})
    assert err.errcode == "M_FORBIDDEN"
    assert str(err) == "M_FORBIDDEN: nope"
    with pytest.raises(RespError) as info:
        raise err
    assert info.value.error == "nope"


def test_public_rooms():
    resp = RespPublicRooms.from_dict(PUBLIC_ROOMS)
    assert resp.total_room_count_estimate == 115
    assert len(resp.chunk) == 1
    assert resp.chunk[0].name == "CHEESE"
    assert resp.chunk[0].num_joined_members == 37
    assert resp.next_batch == "p190q"
    assert resp.prev_batch == "p1902"


def test_simple_responses():
    assert RespCreateFilter.from_dict({"filter_id": "2"}).filter_id == "2"
    assert RespSendEvent.from_dict({"event_id": "$ev"}).event_id == "$ev"
    assert RespMediaUpload.from_dict({"content_uri": "mxc://a/b"}).content_uri == "mxc://a/b"
    assert RespUserDisplayName.from_dict({"displayname": "Alice"}).display_name == "Alice"
    assert RespJoinedRooms.from_dict({"joined_rooms": ["!a:b"]}).joined_rooms == ["!a:b"]


def test_versions_missing_is_empty():
    assert RespVersions.from_dict(None).versions == []
    assert RespVersions.from_dict({"versions": ["r0.6.0"]}).versions == ["r0.6.0"]


def test_joined_members_optional_fields():
    resp = RespJoinedMembers.from_dict(
        {"joined": {"@a:b": {"display_name": "A"}, "@c:d": {"avatar_url": "mxc://x/y"}}}
    )
    assert resp.joined["@a:b"].display_name == "A"
    assert resp.joined["@a:b"].avatar_url is None
    assert resp.joined["@c:d"].display_name is None
    assert resp.joined["@c:d"].avatar_url == "mxc://x/y"


def test_messages_chunk():
    resp = RespMessages.from_dict(
        {"start": "s1", "end": "e1", "chunk": [{"type": "m.room.message", "event_id": "$1"}]}
    )
    assert resp.start == "s1"
    assert resp.end == "e1"
    assert [event.id for event in resp.chunk] == ["$1"]


def test_user_interactive_single_stage():
    resp = RespUserInteractive.from_dict(
        {
            "flows": [{"stages": ["m.login.dummy"]}, {"stages": ["m.login.email", "m.login.dummy"]}],
            "session": "sess",
        }
    )
    assert resp.session == "sess"
    assert resp.has_single_stage_flow("m.login.dummy") is True
    assert resp.has_single_stage_flow("m.login.email") is False


def test_user_interactive_no_flows():
    resp = RespUserInteractive.from_dict({})
    assert resp.has_single_stage_flow("m.login.dummy") is False


def test_user_status():
    resp = RespUserStatus.from_dict(
        {"presence": "online", "status_msg": "busy", "last_active_ago": 420, "currently_active": True}
    )
    assert resp.presence == "online"
    assert resp.status_msg == "busy"
    assert resp.last_active_ago == 420
    assert resp.currently_active is True


def test_register_and_whoami():
    reg = RespRegister.from_dict({"access_token": "token", "user_id": "@a:b", "device_id": "DEV"})
    assert reg.access_token == "token"
    assert reg.user_id == "@a:b"
    who = RespWhoAmI.from_dict({"user_id": "@a:b", "is_guest": True})
    assert who.is_guest is True
    assert who.user_id == "@a:b"


def test_login_well_known():
    resp = RespLogin.from_dict(
        {
            "user_id": "@a:example.com",
            "well_known": {
                "m.homeserver": {"base_url": "https://hs.example.com"},
                "m.identitiy_server": {"base_url": "https://id.example.com"},
            },
        }
    )
    assert resp.user_id == "@a:example.com"
    assert resp.well_known.homeserver_base_url == "https://hs.example.com"
    assert resp.well_known.identity_server_base_url == "https://id.example.com"
    assert DiscoveryInformation.from_dict(None) == DiscoveryInformation()


def test_turn_server():
    resp = RespTurnServer.from_dict(
        {"username": "u", "password": "password", "ttl": 86400, "uris": ["turn:t.example.com"]}
    )
    assert resp.password == "password"
    assert resp.ttl == 86400
    assert resp.uris == ["turn:t.example.com"]


def test_sync_structure():
    data = {
        "next_batch": "nb",
        "presence": {"events": [{"type": "m.presence", "sender": "@a:b"}]},
        "rooms": {
            "join": {
                "!j:b": {
                    "state": {"events": [{"type": "m.room.name", "state_key": ""}]},
                    "timeline": {
                        "events": [{"type": "m.room.message", "event_id": "$m"}],
                        "limited": True,
                        "prev_batch": "pb",
                    },
                    "ephemeral": {"events": [{"type": "m.typing"}]},
                }
            },
            "invite": {
                "!i:b": {"invite_state": {"events": [{"type": "m.room.member", "state_key": "@a:b"}]}}
            },
            "leave": {
                "!l:b": {"timeline": {"events": [{"type": "m.room.member", "state_key": "@a:b"}]}}
            },
        },
    }
    resp = RespSync.from_dict(data)
    assert resp.next_batch == "nb"
    assert [event.type for event in resp.presence] == ["m.presence"]
    joined = resp.join["!j:b"]
    assert [event.type for event in joined.state] == ["m.room.name"]
    assert joined.state[0].state_key == ""
    assert [event.id for event in joined.timeline.events] == ["$m"]
    assert joined.timeline.limited is True
    assert joined.timeline.prev_batch == "pb"
    assert [event.type for event in joined.ephemeral] == ["m.typing"]
    assert resp.invite["!i:b"].state[0].state_key == "@a:b"
    assert resp.leave["!l:b"].timeline.events[0].type == "m.room.member"
    assert resp.leave["!l:b"].state == []


def test_sync_empty():
    resp = RespSync.from_dict({})
    assert resp == RespSync()
    assert resp.join == {}