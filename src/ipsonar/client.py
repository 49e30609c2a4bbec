from __future__ import annotations
import inspect, logging
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, Union
from urllib.parse import quote

import httpx

from .errors import ConfigurationError
from .models import BatchLookupParams, BatchLookupRequestBody, LookupMyParams, LookupParams

API_SERVER = "https://api.ipsonar.com"
API_KEY_HEADER = "X-Api-Key"

LOOKUP_PATH = "v1/{ip}"
LOOKUP_MY_PATH = "v1/my"
BATCH_LOOKUP_PATH = "v1/batch"

QUERY_KEYS = ("fields", "locale_code")
DEFAULT_HEADERS = {"Accept": "application/json"}

logger = logging.getLogger(__name__)


class HttpRequestDoer(Protocol):
    """Anything that can send a prepared request; httpx.AsyncClient qualifies."""

    async def send(self, request: httpx.Request) -> httpx.Response: ...


# May mutate the request; raising aborts the call before it is sent.
RequestEditorFn = Callable[[httpx.Request], Union[None, Awaitable[None]]]
ClientOption = Callable[["Client"], None]


def normalize_server(server: str) -> str:
    """Validate an http(s) base URL and make sure it ends with exactly one '/'."""
    try:
        url = httpx.URL(server)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"invalid server URL {server!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"invalid server URL {server!r}: expected an absolute http(s) URL")
    if not server.endswith("/"):
        server += "/"
    return server


def with_http_client(doer: HttpRequestDoer) -> ClientOption:
    """Use `doer` instead of the default httpx.AsyncClient."""
    def apply(c: Client) -> None:
        c.http_client = doer
    return apply


def with_base_url(base_url: str) -> ClientOption:
    """Override the server given to the constructor."""
    def apply(c: Client) -> None:
        c.server = normalize_server(base_url)
    return apply


def with_request_editor_fn(fn: RequestEditorFn) -> ClientOption:
    """Append a hook that runs on every outgoing request."""
    def apply(c: Client) -> None:
        c.request_editors.append(fn)
    return apply


def api_key_editor(api_key: str) -> RequestEditorFn:
    def edit(request: httpx.Request) -> None:
        request.headers[API_KEY_HEADER] = api_key
    return edit


def _query(params) -> Optional[dict]:
    if not params:
        return None
    query = {}
    for key in QUERY_KEYS:
        value = params.get(key)
        if value is not None:
            query[key] = value
    return query or None


def _operation_url(server: str, path: str) -> httpx.URL:
    return httpx.URL(server).join(path)


def new_lookup_request(server: str, ip: str, params: Optional[LookupParams] = None) -> httpx.Request:
    # ':' stays readable for IPv6, '/' and friends are escaped
    path = LOOKUP_PATH.format(ip=quote(ip, safe=":"))
    return httpx.Request("GET", _operation_url(server, path), params=_query(params), headers=DEFAULT_HEADERS)


def new_lookup_my_request(server: str, params: Optional[LookupMyParams] = None) -> httpx.Request:
    return httpx.Request("GET", _operation_url(server, LOOKUP_MY_PATH), params=_query(params), headers=DEFAULT_HEADERS)


def new_batch_lookup_request(
    server: str,
    body: BatchLookupRequestBody,
    params: Optional[BatchLookupParams] = None,
) -> httpx.Request:
    return httpx.Request(
        "POST",
        _operation_url(server, BATCH_LOOKUP_PATH),
        params=_query(params),
        headers=DEFAULT_HEADERS,
        json=body,
    )


def new_batch_lookup_request_with_body(
    server: str,
    content: bytes,
    content_type: str,
    params: Optional[BatchLookupParams] = None,
) -> httpx.Request:
    return httpx.Request(
        "POST",
        _operation_url(server, BATCH_LOOKUP_PATH),
        params=_query(params),
        content=content,
        headers={**DEFAULT_HEADERS, "Content-Type": content_type},
    )


class Client:
    """
    Low-level IP Sonar client.
      - builds requests for lookup / lookup_my / batch_lookup
      - runs request editors in registration order
      - returns the transport's httpx.Response untouched (any status)
    Transport errors propagate as raised by the transport.
    """

    def __init__(self, server: str, *options: ClientOption):
        self.server = normalize_server(server)
        self.http_client: Optional[HttpRequestDoer] = None
        self.request_editors: List[RequestEditorFn] = []
        for option in options:
            option(self)
        self._owns_http_client = self.http_client is None
        if self.http_client is None:
            self.http_client = httpx.AsyncClient()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self) -> None:
        # a caller-supplied transport is the caller's to close
        if self._owns_http_client and isinstance(self.http_client, httpx.AsyncClient):
            await self.http_client.aclose()

    async def lookup(
        self,
        ip: str,
        params: Optional[LookupParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> httpx.Response:
        return await self._do(new_lookup_request(self.server, ip, params), request_editors)

    async def lookup_my(
        self,
        params: Optional[LookupMyParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> httpx.Response:
        return await self._do(new_lookup_my_request(self.server, params), request_editors)

    async def batch_lookup(
        self,
        body: BatchLookupRequestBody,
        params: Optional[BatchLookupParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> httpx.Response:
        return await self._do(new_batch_lookup_request(self.server, body, params), request_editors)

    async def batch_lookup_with_body(
        self,
        content: bytes,
        content_type: str,
        params: Optional[BatchLookupParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> httpx.Response:
        request = new_batch_lookup_request_with_body(self.server, content, content_type, params)
        return await self._do(request, request_editors)

    async def _apply_editors(self, request: httpx.Request, extra: Sequence[RequestEditorFn]) -> None:
        for fn in [*self.request_editors, *extra]:
            result = fn(request)
            if inspect.isawaitable(result):
                await result

    async def _do(self, request: httpx.Request, extra: Sequence[RequestEditorFn]) -> httpx.Response:
        await self._apply_editors(request, extra)
        assert self.http_client is not None
        logger.debug("%s %s", request.method, request.url)
        response = await self.http_client.send(request)
        logger.debug("%s %s -> %s", request.method, request.url, response.status_code)
        return response
