import json

import pytest

from mxclient.response_types import RespSync
from mxclient.store import new_in_memory_store
from mxclient.sync import new_default_syncer

USER = "@example:matrix.org"


def _message(body):
    return {
        "type": "m.room.message",
        "sender": "@other:matrix.org",
        "event_id": "$" + body,
        "content": {"msgtype": "m.text", "body": body},
    }


def _member(user_id, membership):
    return {
        "type": "m.room.member",
        "sender": user_id,
        "state_key": user_id,
        "event_id": "$member" + membership,
        "content": {"membership": membership},
    }


def _collect(syncer, event_type):
    seen = []
    syncer.on_event_type(event_type, seen.append)
    return seen


@pytest.fixture
def syncer():
    return new_default_syncer(USER, new_in_memory_store())


def test_first_sync_is_not_processed(syncer):
    seen = _collect(syncer, "m.room.message")
    resp = RespSync.from_dict(
        {"rooms": {"join": {"!r:b": {"timeline": {"events": [_message("hi")]}}}}}
    )
    syncer.process_response(resp, "")
    assert seen == []
    assert syncer.store.load_room("!r:b") is None


def test_joined_room_events_reach_listeners(syncer):
    messages = _collect(syncer, "m.room.message")
    members = _collect(syncer, "m.room.member")
    resp = RespSync.from_dict(
        {
            "rooms": {
                "join": {
                    "!r:b": {
                        "state": {"events": [_member("@other:matrix.org", "join")]},
                        "timeline": {"events": [_message("hi")]},
                    }
                }
            }
        }
    )
    syncer.process_response(resp, "s1")
    assert [event.body() for event in messages] == ["hi"]
    assert messages[0].room_id == "!r:b"
    assert len(members) == 1
    room = syncer.store.load_room("!r:b")
    assert room.get_membership_state("@other:matrix.org") == "join"


def test_ephemeral_events_are_notified(syncer):
    typing = _collect(syncer, "m.typing")
    resp = RespSync.from_dict(
        {
            "rooms": {
                "join": {
                    "!r:b": {"ephemeral": {"events": [{"type": "m.typing", "content": {}}]}}
                }
            }
        }
    )
    syncer.process_response(resp, "s1")
    assert [event.room_id for event in typing] == ["!r:b"]


def test_own_join_discards_room(syncer):
    messages = _collect(syncer, "m.room.message")
    resp = RespSync.from_dict(
        {
            "rooms": {
                "join": {
                    "!r:b": {
                        "timeline": {"events": [_message("old"), _member(USER, "join")]}
                    }
                },
                "invite": {"!r:b": {"invite_state": {"events": [_member(USER, "invite")]}}},
            }
        }
    )
    syncer.process_response(resp, "s1")
    assert messages == []
    assert "!r:b" not in resp.join
    assert "!r:b" not in resp.invite


def test_invite_state_is_stored(syncer):
    resp = RespSync.from_dict(
        {"rooms": {"invite": {"!i:b": {"invite_state": {"events": [_member(USER, "invite")]}}}}}
    )
    syncer.process_response(resp, "s1")
    assert syncer.store.load_room("!i:b").get_membership_state(USER) == "invite"


def test_leave_only_processes_state_events(syncer):
    messages = _collect(syncer, "m.room.message")
    members = _collect(syncer, "m.room.member")
    resp = RespSync.from_dict(
        {
            "rooms": {
                "leave": {
                    "!l:b": {"timeline": {"events": [_message("bye"), _member(USER, "leave")]}}
                }
            }
        }
    )
    syncer.process_response(resp, "s1")
    assert messages == []
    assert [event.room_id for event in members] == ["!l:b"]
    assert syncer.store.load_room("!l:b").get_membership_state(USER) == "leave"


def test_listeners_called_in_order_of_registration(syncer):
    calls = []
    syncer.on_event_type("m.room.message", lambda event: calls.append("first"))
    syncer.on_event_type("m.room.message", lambda event: calls.append("second"))
    resp = RespSync.from_dict(
        {"rooms": {"join": {"!r:b": {"timeline": {"events": [_message("x")]}}}}}
    )
    syncer.process_response(resp, "s1")
    assert calls == ["first", "second"]


def test_listener_failure_raises_runtime_error(syncer):
    def broken(event):
        raise KeyError("boom")

    syncer.on_event_type("m.room.message", broken)
    resp = RespSync.from_dict(
        {"rooms": {"join": {"!r:b": {"timeline": {"events": [_message("x")]}}}}}
    )
    with pytest.raises(RuntimeError, match="ProcessResponse panicked"):
        syncer.process_response(resp, "s1")


def test_existing_room_is_reused(syncer):
    resp = RespSync.from_dict(
        {"rooms": {"join": {"!r:b": {"state": {"events": [_member("@a:b", "join")]}}}}}
    )
    syncer.process_response(resp, "s1")
    room = syncer.store.load_room("!r:b")
    resp = RespSync.from_dict(
        {"rooms": {"join": {"!r:b": {"state": {"events": [_member("@c:d", "join")]}}}}}
    )
    syncer.process_response(resp, "s2")
    assert syncer.store.load_room("!r:b") is room
    assert room.get_membership_state("@a:b") == "join"
    assert room.get_membership_state("@c:d") == "join"


def test_on_failed_sync_waits_ten_seconds(syncer):
    assert syncer.on_failed_sync(None, OSError("down")) == 10.0


def test_filter_json(syncer):
    assert json.loads(syncer.get_filter_json(USER)) == {"room": {"timeline": {"limit": 50}}}