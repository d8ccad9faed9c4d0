from mxclient.events import (
    AudioInfo,
    AudioMessage,
    Event,
    FileMessage,
    ImageInfo,
    ImageMessage,
    LocationMessage,
    TextMessage,
    ThumbnailInfo,
    VideoInfo,
    VideoMessage,
    get_html_message,
)


def _raw_event():
    return {
        "state_key": "@alice:example.com",
        "sender": "@alice:example.com",
        "type": "m.room.member",
        "origin_server_ts": 1500000000000,
        "event_id": "$abc:example.com",
        "room_id": "!room:example.com",
        "unsigned": {"age": 5},
        "content": {"membership": "join", "body": "hi", "msgtype": "m.text"},
    }


def test_event_from_dict_fields():
    event = Event.from_dict(_raw_event())
    assert event.state_key == "@alice:example.com"
    assert event.type == "m.room.member"
    assert event.timestamp == 1500000000000
    assert event.id == "$abc:example.com"
    assert event.prev_content is None


def test_event_round_trip():
    event = Event.from_dict(_raw_event())
    assert Event.from_dict(event.to_dict()) == event
    assert event.to_dict() == _raw_event()


def test_event_body_and_message_type():
    event = Event.from_dict(_raw_event())
    assert event.body() == "hi"
    assert event.message_type() == "m.text"


def test_event_body_missing_or_not_string():
    assert Event().body() is None
    assert Event(content={"body": 5, "msgtype": ["x"]}).body() is None
    assert Event(content={"msgtype": ["x"]}).message_type() is None


def test_event_to_dict_omits_optional_fields():
    out = Event(type="m.room.message").to_dict()
    assert "state_key" not in out
    assert "redacts" not in out
    assert "prev_content" not in out
    assert out["type"] == "m.room.message"


def test_text_message_to_dict():
    msg = TextMessage(msgtype="m.text", body="hello")
    assert msg.to_dict() == {
        "msgtype": "m.text",
        "body": "hello",
        "formatted_body": "",
        "format": "",
    }


def test_image_message_keeps_thumbnail_info():
    msg = ImageMessage(msgtype="m.image", body="pic", url="mxc://example.com/abc")
    out = msg.to_dict()
    assert out["info"] == {"thumbnail_info": {}}
    assert out["url"] == "mxc://example.com/abc"


def test_image_info_includes_set_fields():
    info = ImageInfo(height=10, mimetype="image/png", thumbnail_info=ThumbnailInfo(width=3))
    out = info.to_dict()
    assert out["h"] == 10
    assert out["mimetype"] == "image/png"
    assert out["thumbnail_info"] == {"w": 3}
    assert "w" not in out and "thumbnail_url" not in out


def test_video_message_to_dict():
    msg = VideoMessage(msgtype="m.video", body="clip", url="mxc://example.com/v",
                       info=VideoInfo(duration=42))
    out = msg.to_dict()
    assert out["msgtype"] == "m.video"
    assert out["info"]["duration"] == 42
    assert "size" not in out["info"]


def test_file_message_to_dict():
    msg = FileMessage(msgtype="m.file", body="doc", url="mxc://example.com/f")
    out = msg.to_dict()
    assert out["filename"] == ""
    assert out["info"] == {}
    assert "thumbnail_url" not in out
    assert "thumbnail_info" in out


def test_location_and_audio_messages():
    loc = LocationMessage(msgtype="m.location", body="here", geo_uri="geo:1,2")
    assert loc.to_dict()["geo_uri"] == "geo:1,2"
    audio = AudioMessage(msgtype="m.audio", body="a", url="mxc://example.com/a",
                         info=AudioInfo(mimetype="audio/ogg"))
    assert audio.to_dict()["info"] == {"mimetype": "audio/ogg"}


def test_get_html_message():
    html_text = "<b>bold</b> text &amp; more"
    msg = get_html_message("m.notice", html_text)
    assert msg.body == "bold text & more"
    assert msg.msgtype == "m.notice"
    assert msg.format == "org.matrix.custom.html"
    assert msg.formatted_body == html_text


def test_get_html_message_plain_text_unchanged():
    msg = get_html_message("m.text", "no tags here")
    assert msg.body == "no tags here"
    assert msg.to_dict()["formatted_body"] == "no tags here"