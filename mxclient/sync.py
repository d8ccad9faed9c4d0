"""Processing of /sync responses."""

from __future__ import annotations

import json
import traceback
from datetime import timedelta
from typing import Callable, Optional, Protocol

from mxclient.events import Event
from mxclient.response_types import RespSync
from mxclient.room import Room, new_room
from mxclient.store import Storer

OnEventListener = Callable[[Event], None]


class Syncer(Protocol):
    """Anything that can drive the /sync loop of a client."""

    def process_response(self, resp: RespSync, since: str) -> None:
        """Handle one /sync response; raising stops syncing for good."""

    def on_failed_sync(self, resp: Optional[RespSync], error: Exception) -> float:
        """Seconds to wait before retrying; raising stops syncing for good."""

    def get_filter_json(self, user_id: str) -> str:
        """The filter JSON to upload for the given user."""


class DefaultSyncer:
    """A syncer that hands each incoming event to listeners for its type."""

    def __init__(self, user_id: str, store: Storer) -> None:
        self.user_id = user_id
        self.store = store
        self.failed_sync_delay = timedelta(seconds=10)
        self.timeline_limit = 50
        self._listeners: dict[str, list[OnEventListener]] = {}

    def process_response(self, resp: RespSync, since: str) -> None:
        """Notify listeners of the events in a response and update room state.

        Nothing is processed for the first sync (empty ``since``). An exception
        from a listener is raised again as ``RuntimeError``.
        """
        if not self._should_process_response(resp, since):
            return
        try:
            self._process(resp)
        except Exception as exc:
            raise RuntimeError(
                f"ProcessResponse panicked! userID={self.user_id} since={since} "
                f"panic={exc}\n{traceback.format_exc()}"
            ) from exc

    def _process(self, resp: RespSync) -> None:
        for room_id, joined in resp.join.items():
            room = self._get_or_create_room(room_id)
            for event in joined.state:
                event.room_id = room_id
                room.update_state(event)
                self._notify_listeners(event)
            for event in (*joined.timeline.events, *joined.ephemeral):
                event.room_id = room_id
                self._notify_listeners(event)
        for room_id, invited in resp.invite.items():
            room = self._get_or_create_room(room_id)
            for event in invited.state:
                event.room_id = room_id
                room.update_state(event)
                self._notify_listeners(event)
        for room_id, left in resp.leave.items():
            room = self._get_or_create_room(room_id)
            for event in left.timeline.events:
                if event.state_key is not None:
                    event.room_id = room_id
                    room.update_state(event)
                    self._notify_listeners(event)

    def on_event_type(self, event_type: str, callback: OnEventListener) -> None:
        """Call ``callback`` for every new event of ``event_type``; no duplicate checks."""
        self._listeners.setdefault(event_type, []).append(callback)

    def _should_process_response(self, resp: RespSync, since: str) -> bool:
        if since == "":
            return False
        # A freshly joined room comes with recent history that may already have
        # been seen; drop rooms whose timeline shows our own join.
        for room_id, joined in list(resp.join.items()):
            for event in reversed(joined.timeline.events):
                if event.type != "m.room.member" or event.state_key != self.user_id:
                    continue
                membership = event.content.get("membership")
                if not isinstance(membership, str):
                    continue
                if membership == "join":
                    resp.join.pop(room_id, None)
                    resp.invite.pop(room_id, None)
                    break
        return True

    def _get_or_create_room(self, room_id: str) -> Room:
        room = self.store.load_room(room_id)
        if room is None:
            room = new_room(room_id)
            self.store.save_room(room)
        return room

    def _notify_listeners(self, event: Event) -> None:
        for listener in self._listeners.get(event.type, ()):
            listener(event)

    def on_failed_sync(self, resp: Optional[RespSync], error: Exception) -> float:
        """Wait the configured delay (ten seconds) between failed syncs; never give up."""
        return self.failed_sync_delay.total_seconds()

    def get_filter_json(self, user_id: str) -> str:
        """A filter limiting room timelines to the configured limit (50)."""
        return json.dumps(
            {"room": {"timeline": {"limit": self.timeline_limit}}},
            separators=(",", ":"),
        )


def new_default_syncer(user_id: str, store: Storer) -> DefaultSyncer:
    """Create a default syncer for the user backed by the store."""
    return DefaultSyncer(user_id, store)