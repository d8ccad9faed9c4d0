"""Core HTTP client for the Matrix client-server API: URLs, requests and the sync loop."""

from __future__ import annotations

import json
import posixpath
import threading
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit, urlunsplit

import requests

from mxclient.response_types import RespCreateFilter, RespError, RespSync
from mxclient.store import InMemoryStore, Storer
from mxclient.sync import DefaultSyncer, Syncer

DEFAULT_PREFIX = "/_matrix/client/v3"
_SYNC_TIMEOUT_MS = 30000
_PATH_SAFE = "/$&+,:;=@"


@dataclass(eq=False)
class HTTPError(Exception):
    """A non-2xx HTTP response, possibly wrapping the server's error body."""

    contents: bytes = b""
    wrapped_error: Optional[Exception] = None
    message: str = ""
    code: int = 0

    def __str__(self) -> str:
        contents = "[" + " ".join(str(byte) for byte in self.contents) + "]"
        wrapped = str(self.wrapped_error) if self.wrapped_error is not None else ""
        return f"contents={contents} msg={self.message} code={self.code} wrapped={wrapped}"


def _to_jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Mapping):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def _join_path(parts: Sequence[str]) -> str:
    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _encode_query(query: Mapping[str, list[str]]) -> str:
    return urlencode(sorted(query.items()), doseq=True)


class Client:
    """A Matrix client bound to one homeserver and, optionally, one user."""

    def __init__(
        self,
        homeserver_url: str,
        user_id: str = "",
        access_token: str = "",
        *,
        prefix: str = DEFAULT_PREFIX,
        store: Optional[Storer] = None,
        syncer: Optional[Syncer] = None,
        http: Optional[requests.Session] = None,
        app_service_user_id: str = "",
    ) -> None:
        urlsplit(homeserver_url)  # raises ValueError on a malformed URL
        self.homeserver_url = homeserver_url
        self.prefix = prefix
        self.user_id = user_id
        self.access_token = access_token
        self.store: Storer = store if store is not None else InMemoryStore()
        self.syncer: Syncer = (
            syncer if syncer is not None else DefaultSyncer(user_id, self.store)
        )
        self.http = http if http is not None else requests.Session()
        # Sent as ?user_id= on every request when acting as an application service.
        self.app_service_user_id = app_service_user_id
        self._syncing_lock = threading.Lock()
        self._syncing_id = 0

    # URLs

    def build_url(self, *args: str) -> str:
        """Build a URL under the homeserver and the client's API prefix."""
        return self.build_base_url(self.prefix, *args)

    def build_base_url(self, *args: str) -> str:
        """Build a URL under the homeserver; the caller supplies any prefix."""
        parts = urlsplit(self.homeserver_url)
        path = _join_path([parts.path, *args])
        if args and args[-1].endswith("/"):
            path += "/"
        if path and not path.startswith("/") and parts.netloc:
            path = "/" + path
        query = parse_qs(parts.query, keep_blank_values=True)
        if self.app_service_user_id:
            query["user_id"] = [self.app_service_user_id]
        return urlunsplit(
            (
                parts.scheme,
                parts.netloc,
                quote(path, safe=_PATH_SAFE),
                _encode_query(query),
                parts.fragment,
            )
        )

    def build_url_with_query(
        self, url_path: Sequence[str], url_query: Mapping[str, str]
    ) -> str:
        """Build a prefixed URL and set the given query parameters on it."""
        parts = urlsplit(self.build_url(*url_path))
        query = parse_qs(parts.query, keep_blank_values=True)
        for key, value in url_query.items():
            query[key] = [value]
        return urlunsplit(parts._replace(query=_encode_query(query)))

    def mxc_to_http(self, mxc_url: str) -> str:
        """Turn an ``mxc://server/media`` URI into a download URL."""
        if not mxc_url.startswith("mxc://"):
            raise ValueError("uncorrect MXC-URL")
        parts = mxc_url.removeprefix("mxc://").split("/", 1)
        if len(parts) != 2:
            raise ValueError("uncorrect MXC-URL format")
        media_server, media_id = parts
        return (
            f"{self.homeserver_url}/_matrix/media/v3/download/{media_server}/{media_id}"
        )

    # Credentials

    def set_credentials(self, user_id: str, access_token: str) -> None:
        self.access_token = access_token
        self.user_id = user_id

    def clear_credentials(self) -> None:
        self.access_token = ""
        self.user_id = ""

    # Syncing

    def sync(self) -> None:
        """Sync with the homeserver until stopped or a fatal error is raised.

        Returns when :meth:`stop_sync` is called or another sync is started.
        Raises if the filter cannot be created, if the syncer's
        ``on_failed_sync`` raises, or if its ``process_response`` raises.
        """
        syncing_id = self._increment_syncing_id()
        next_batch = self.store.load_next_batch(self.user_id)
        filter_id = self.store.load_filter_id(self.user_id)
        if not filter_id:
            filter_json = self.syncer.get_filter_json(self.user_id)
            filter_id = self.create_filter(filter_json).filter_id
            self.store.save_filter_id(self.user_id, filter_id)

        while True:
            try:
                resp = self.sync_request(_SYNC_TIMEOUT_MS, next_batch, filter_id, False, "")
            except Exception as exc:
                delay = self.syncer.on_failed_sync(None, exc)
                time.sleep(delay)
                continue

            if self._current_syncing_id() != syncing_id:
                return

            # Save the token before processing so a bad event cannot stall us forever.
            self.store.save_next_batch(self.user_id, resp.next_batch)
            self.syncer.process_response(resp, next_batch)
            next_batch = resp.next_batch

    def stop_sync(self) -> None:
        """Make any running :meth:`sync` return after its current request."""
        self._increment_syncing_id()

    def _increment_syncing_id(self) -> int:
        with self._syncing_lock:
            self._syncing_id += 1
            return self._syncing_id

    def _current_syncing_id(self) -> int:
        with self._syncing_lock:
            return self._syncing_id

    # Requests

    def make_request(self, method: str, http_url: str, body: Any = None) -> Any:
        """Send a JSON request and return the decoded JSON response, or None if empty.

        Raises :class:`HTTPError` for a non-2xx status; its ``wrapped_error`` is a
        :class:`RespError` when the body is a standard Matrix error.
        """
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = "Bearer " + self.access_token
        data = None
        if body is not None:
            data = json.dumps(_to_jsonable(body)).encode("utf-8")

        response = self.http.request(method, http_url, data=data, headers=headers)
        with response:
            if response.status_code // 100 != 2:
                raise self._http_error(method, http_url, response)
            if not response.content:
                return None
            return response.json()

    @staticmethod
    def _http_error(method: str, http_url: str, response: requests.Response) -> HTTPError:
        contents = response.content
        wrapped: Optional[RespError] = None
        try:
            decoded = json.loads(contents)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            candidate = RespError.from_dict(decoded)
            if candidate.errcode:
                wrapped = candidate
        message = f"Failed to {method} JSON to {unquote(urlsplit(http_url).path)}"
        if wrapped is None:
            message += ": " + contents.decode("utf-8", errors="replace")
        return HTTPError(
            contents=contents, wrapped_error=wrapped, message=message, code=response.status_code
        )

    def create_filter(self, filter_json: Union[str, bytes, Mapping[str, Any]]) -> RespCreateFilter:
        """Upload a filter for the client's user and return its ID."""
        body = json.loads(filter_json) if isinstance(filter_json, (str, bytes)) else filter_json
        url = self.build_url("user", self.user_id, "filter")
        return RespCreateFilter.from_dict(self.make_request("POST", url, body))

    def sync_request(
        self,
        timeout: int,
        since: str = "",
        filter_id: str = "",
        full_state: bool = False,
        set_presence: str = "",
    ) -> RespSync:
        """Perform a single /sync request; ``timeout`` is in milliseconds."""
        query = {"timeout": str(timeout)}
        if since:
            query["since"] = since
        if filter_id:
            query["filter"] = filter_id
        if set_presence:
            query["set_presence"] = set_presence
        if full_state:
            query["full_state"] = "true"
        url = self.build_url_with_query(["sync"], query)
        return RespSync.from_dict(self.make_request("GET", url))