"""Matrix events and message content types."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Any, Optional

_HTML_TAG = re.compile(r"<[^<]+?>")
_HTML_FORMAT = "org.matrix.custom.html"


def _drop_empty(items: dict) -> dict:
    return {key: value for key, value in items.items() if value}


@dataclass
class Event:
    """A single Matrix event."""

    sender: str = ""
    type: str = ""
    timestamp: int = 0
    id: str = ""
    room_id: str = ""
    state_key: Optional[str] = None
    redacts: str = ""
    unsigned: dict[str, Any] = field(default_factory=dict)
    content: dict[str, Any] = field(default_factory=dict)
    prev_content: Optional[dict[str, Any]] = None

    def body(self) -> Optional[str]:
        """The ``body`` of the content if present and a string, else None."""
        value = self.content.get("body")
        return value if isinstance(value, str) else None

    def message_type(self) -> Optional[str]:
        """The ``msgtype`` of the content if present and a string, else None."""
        value = self.content.get("msgtype")
        return value if isinstance(value, str) else None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.state_key is not None:
            out["state_key"] = self.state_key
        out.update(
            sender=self.sender,
            type=self.type,
            origin_server_ts=self.timestamp,
            event_id=self.id,
            room_id=self.room_id,
        )
        if self.redacts:
            out["redacts"] = self.redacts
        out["unsigned"] = self.unsigned
        out["content"] = self.content
        if self.prev_content:
            out["prev_content"] = self.prev_content
        return out

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        return cls(
            sender=data.get("sender") or "",
            type=data.get("type") or "",
            timestamp=int(data.get("origin_server_ts") or 0),
            id=data.get("event_id") or "",
            room_id=data.get("room_id") or "",
            state_key=data.get("state_key"),
            redacts=data.get("redacts") or "",
            unsigned=dict(data.get("unsigned") or {}),
            content=dict(data.get("content") or {}),
            prev_content=data.get("prev_content"),
        )


@dataclass
class TextMessage:
    """Content of a formatted text message."""

    msgtype: str = ""
    body: str = ""
    formatted_body: str = ""
    format: str = ""

    def to_dict(self) -> dict:
        return {
            "msgtype": self.msgtype,
            "body": self.body,
            "formatted_body": self.formatted_body,
            "format": self.format,
        }


@dataclass
class ThumbnailInfo:
    """Information about a thumbnail image."""

    height: int = 0
    width: int = 0
    mimetype: str = ""
    size: int = 0

    def to_dict(self) -> dict:
        return _drop_empty(
            {"h": self.height, "w": self.width, "mimetype": self.mimetype, "size": self.size}
        )


@dataclass
class ImageInfo:
    """Information about an image."""

    height: int = 0
    width: int = 0
    mimetype: str = ""
    size: int = 0
    thumbnail_info: ThumbnailInfo = field(default_factory=ThumbnailInfo)
    thumbnail_url: str = ""

    def to_dict(self) -> dict:
        out = _drop_empty(
            {"h": self.height, "w": self.width, "mimetype": self.mimetype, "size": self.size}
        )
        out["thumbnail_info"] = self.thumbnail_info.to_dict()
        if self.thumbnail_url:
            out["thumbnail_url"] = self.thumbnail_url
        return out


@dataclass
class VideoInfo:
    """Information about a video."""

    mimetype: str = ""
    thumbnail_info: ThumbnailInfo = field(default_factory=ThumbnailInfo)
    thumbnail_url: str = ""
    height: int = 0
    width: int = 0
    duration: int = 0
    size: int = 0

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.mimetype:
            out["mimetype"] = self.mimetype
        out["thumbnail_info"] = self.thumbnail_info.to_dict()
        out.update(
            _drop_empty(
                {
                    "thumbnail_url": self.thumbnail_url,
                    "h": self.height,
                    "w": self.width,
                    "duration": self.duration,
                    "size": self.size,
                }
            )
        )
        return out


@dataclass
class VideoMessage:
    """Content of an ``m.video`` message."""

    msgtype: str = ""
    body: str = ""
    url: str = ""
    info: VideoInfo = field(default_factory=VideoInfo)

    def to_dict(self) -> dict:
        return {
            "msgtype": self.msgtype,
            "body": self.body,
            "url": self.url,
            "info": self.info.to_dict(),
        }


@dataclass
class ImageMessage:
    """Content of an ``m.image`` message."""

    msgtype: str = ""
    body: str = ""
    url: str = ""
    info: ImageInfo = field(default_factory=ImageInfo)

    def to_dict(self) -> dict:
        return {
            "msgtype": self.msgtype,
            "body": self.body,
            "url": self.url,
            "info": self.info.to_dict(),
        }


@dataclass
class HTMLMessage:
    """Content of an HTML formatted message."""

    body: str = ""
    msgtype: str = ""
    format: str = ""
    formatted_body: str = ""

    def to_dict(self) -> dict:
        return {
            "body": self.body,
            "msgtype": self.msgtype,
            "format": self.format,
            "formatted_body": self.formatted_body,
        }


@dataclass
class FileInfo:
    """Information about a file."""

    mimetype: str = ""
    size: int = 0

    def to_dict(self) -> dict:
        return _drop_empty({"mimetype": self.mimetype, "size": self.size})


@dataclass
class FileMessage:
    """Content of an ``m.file`` message."""

    msgtype: str = ""
    body: str = ""
    url: str = ""
    filename: str = ""
    info: FileInfo = field(default_factory=FileInfo)
    thumbnail_url: str = ""
    thumbnail_info: ImageInfo = field(default_factory=ImageInfo)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "msgtype": self.msgtype,
            "body": self.body,
            "url": self.url,
            "filename": self.filename,
            "info": self.info.to_dict(),
        }
        if self.thumbnail_url:
            out["thumbnail_url"] = self.thumbnail_url
        out["thumbnail_info"] = self.thumbnail_info.to_dict()
        return out


@dataclass
class LocationMessage:
    """Content of an ``m.location`` message."""

    msgtype: str = ""
    body: str = ""
    geo_uri: str = ""
    thumbnail_url: str = ""
    thumbnail_info: ImageInfo = field(default_factory=ImageInfo)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "msgtype": self.msgtype,
            "body": self.body,
            "geo_uri": self.geo_uri,
        }
        if self.thumbnail_url:
            out["thumbnail_url"] = self.thumbnail_url
        out["thumbnail_info"] = self.thumbnail_info.to_dict()
        return out


@dataclass
class AudioInfo:
    """Information about an audio file; duration is in milliseconds."""

    mimetype: str = ""
    size: int = 0
    duration: int = 0

    def to_dict(self) -> dict:
        return _drop_empty(
            {"mimetype": self.mimetype, "size": self.size, "duration": self.duration}
        )


@dataclass
class AudioMessage:
    """Content of an ``m.audio`` message."""

    msgtype: str = ""
    body: str = ""
    url: str = ""
    info: AudioInfo = field(default_factory=AudioInfo)

    def to_dict(self) -> dict:
        return {
            "msgtype": self.msgtype,
            "body": self.body,
            "url": self.url,
            "info": self.info.to_dict(),
        }


def get_html_message(msgtype: str, html_text: str) -> HTMLMessage:
    """Build an HTML message whose plain body is the text with tags stripped."""
    return HTMLMessage(
        body=html.unescape(_HTML_TAG.sub("", html_text)),
        msgtype=msgtype,
        format=_HTML_FORMAT,
        formatted_body=html_text,
    )