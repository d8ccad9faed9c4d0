# mxclient

A client library for the Matrix Client-Server API. It covers login and
registration, sending messages and state events, room membership, profiles,
presence, media upload and a long-polling `/sync` loop that hands events to
listeners by type.

## Installation

```
pip install mxclient
```

The only runtime dependency is `requests`.

## Quick start

```python
from mxclient.api import new_client

cli = new_client("https://matrix.example.com", "@alice:example.com", "token")

resp = cli.send_text("!room:example.com", "Down the rabbit hole")
print(resp.event_id)
```

`new_client` returns a `MatrixClient` (from `mxclient.api`) with an
`InMemoryStore` and a `DefaultSyncer`. Requests go under the prefix
`/_matrix/client/v3`; `Client.build_url`, `Client.build_base_url` and
`Client.build_url_with_query` build the URLs and can be used directly.
`Client.mxc_to_http` turns an `mxc://server/media` URI into a download URL.

Logging in and storing the credentials on the client:

```python
from mxclient.api import new_client
from mxclient.request_types import ReqLogin

password = "password"
cli = new_client("http://localhost:8008", "", "")
resp = cli.login(ReqLogin(type="m.login.password", user="alice", password=password))
cli.set_credentials(resp.user_id, resp.access_token)
```

`login`, `register` and `logout` never change the client's credentials
themselves; use `set_credentials` and `clear_credentials`.

`register` and `register_guest` return a pair `(response, challenge)`: on
success the first item is a `RespRegister`; when the server answers 401 the
second is a `RespUserInteractive` describing the authentication flows.
`register_dummy` completes an `m.login.dummy` flow for you and raises
`RuntimeError` if the server does not offer one.

Request bodies live in `mxclient.request_types` (`ReqCreateRoom`,
`ReqKickUser`, `ReqTyping`, ...), response bodies in
`mxclient.response_types`, message contents such as `TextMessage`,
`ImageMessage` and `get_html_message` in `mxclient.events`, and sync filters
(`Filter`, `default_filter`) in `mxclient.filter`.

## Syncing

`Client.sync()` blocks and long-polls the homeserver, passing every response to
the client's syncer. The default syncer dispatches events to listeners by type:

```python
import threading

from mxclient.api import new_client

cli = new_client("https://matrix.example.com", "@bot:example.com", "token")

def on_message(event):
    body = event.body()
    if body is not None:
        print(event.sender, body)

cli.syncer.on_event_type("m.room.message", on_message)

worker = threading.Thread(target=cli.sync, daemon=True)
worker.start()
# ...
cli.stop_sync()
```

Before the first request `sync` uploads the syncer's filter (by default one
limiting room timelines to 50 events) unless the store already holds a
filter ID. A failed request is retried after the delay the syncer returns
(ten seconds for `DefaultSyncer`). The default syncer skips the very first
response, and rooms whose timeline shows the user's own join, so that old
history is not replayed. An exception raised by a listener stops the loop
and surfaces as a `RuntimeError` from `sync`. `stop_sync` makes a running
`sync` return once its current request completes.

## Storage

Filter IDs, `next_batch` tokens and room state are kept by the client's
store. The package ships only `InMemoryStore`, which forgets everything when
the process exits; to keep them across restarts, pass your own object
implementing the `Storer` protocol (`mxclient.store`) as `store=` when
constructing the client.

## Errors

Requests that get a non-2xx answer raise `mxclient.client.HTTPError`, which
carries the status code, the raw body and, when the homeserver sent a standard
Matrix error, a `RespError` describing it in `wrapped_error`. Uploads through
`upload_to_content_repo` raise `HTTPError` for any status other than 200.

## User ID helpers

```python
from mxclient.userids import (
    decode_user_localpart,
    encode_user_localpart,
    extract_user_localpart,
)

encode_user_localpart("Alph@Bet_50up")       # "_alph=40_bet__50up"
decode_user_localpart("_alph=40_bet__50up")  # "Alph@Bet_50up"
extract_user_localpart("@alice:matrix.org")  # "alice"
```

`decode_user_localpart` and `extract_user_localpart` raise `ValueError` on
malformed input.

## Running the tests

```
pip install -e ".[test]"
pytest
```