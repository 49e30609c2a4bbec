"""
Typed wrapper around `Client`.

Every `*_with_response` call returns a response object exposing:
- `status_code` / `status` / raw `body` / the original `http_response`
- `jsonNNN` fields, set only for the status codes the endpoint declares as
  JSON-producing and only when the Content-Type says JSON

Declared codes per endpoint:
- lookup:        200 IPGeolocation; 401, 404, 422, 429 ErrorResponse
- lookup_my:     200 IPGeolocation; 401, 422, 429, 500 ErrorResponse
- batch_lookup:  200 BatchLookupIPResponse; 401, 422, 429, 500 ErrorResponse

No HTTP status is an error here; only transport failures, body read failures
and undecodable bodies are raised.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Type

import httpx
from pydantic import BaseModel, ValidationError

from .client import Client, ClientOption, RequestEditorFn
from .errors import ResponseDecodeError
from .models import (
    BatchLookupIPResponse,
    BatchLookupParams,
    BatchLookupRequestBody,
    ErrorResponse,
    IPGeolocation,
    LookupMyParams,
    LookupParams,
)

logger = logging.getLogger(__name__)

LOOKUP_SCHEMAS: Dict[int, Type[BaseModel]] = {
    200: IPGeolocation,
    401: ErrorResponse,
    404: ErrorResponse,
    422: ErrorResponse,
    429: ErrorResponse,
}
LOOKUP_MY_SCHEMAS: Dict[int, Type[BaseModel]] = {
    200: IPGeolocation,
    401: ErrorResponse,
    422: ErrorResponse,
    429: ErrorResponse,
    500: ErrorResponse,
}
BATCH_LOOKUP_SCHEMAS: Dict[int, Type[BaseModel]] = {
    200: BatchLookupIPResponse,
    401: ErrorResponse,
    422: ErrorResponse,
    429: ErrorResponse,
    500: ErrorResponse,
}


@dataclass(frozen=True)
class _TypedResponse:
    body: bytes
    http_response: httpx.Response

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def status(self) -> str:
        # e.g. "200 OK"
        return f"{self.status_code} {self.http_response.reason_phrase}".strip()


@dataclass(frozen=True)
class LookupResponse(_TypedResponse):
    json200: Optional[IPGeolocation] = None
    json401: Optional[ErrorResponse] = None
    json404: Optional[ErrorResponse] = None
    json422: Optional[ErrorResponse] = None
    json429: Optional[ErrorResponse] = None


@dataclass(frozen=True)
class LookupMyResponse(_TypedResponse):
    json200: Optional[IPGeolocation] = None
    json401: Optional[ErrorResponse] = None
    json422: Optional[ErrorResponse] = None
    json429: Optional[ErrorResponse] = None
    json500: Optional[ErrorResponse] = None


@dataclass(frozen=True)
class BatchLookupResponse(_TypedResponse):
    json200: Optional[BatchLookupIPResponse] = None
    json401: Optional[ErrorResponse] = None
    json422: Optional[ErrorResponse] = None
    json429: Optional[ErrorResponse] = None
    json500: Optional[ErrorResponse] = None


def is_json(response: httpx.Response) -> bool:
    return "json" in response.headers.get("Content-Type", "")


async def _read_and_decode(
    response: httpx.Response,
    schemas: Dict[int, Type[BaseModel]],
) -> Tuple[bytes, Dict[str, BaseModel]]:
    try:
        body = await response.aread()
    finally:
        await response.aclose()

    status = response.status_code
    model = schemas.get(status)
    if model is None or not is_json(response):
        logger.debug("status %s (%s): body left undecoded", status, response.headers.get("Content-Type"))
        return body, {}
    # a JSON null decodes to the empty model, every field absent
    if body.strip() == b"null":
        return body, {f"json{status}": model()}
    try:
        decoded = model.model_validate_json(body)
    except ValidationError as e:
        raise ResponseDecodeError(f"cannot decode {status} body as {model.__name__}: {e}", status, body) from e
    return body, {f"json{status}": decoded}


async def parse_lookup_response(response: httpx.Response) -> LookupResponse:
    body, decoded = await _read_and_decode(response, LOOKUP_SCHEMAS)
    return LookupResponse(body=body, http_response=response, **decoded)


async def parse_lookup_my_response(response: httpx.Response) -> LookupMyResponse:
    body, decoded = await _read_and_decode(response, LOOKUP_MY_SCHEMAS)
    return LookupMyResponse(body=body, http_response=response, **decoded)


async def parse_batch_lookup_response(response: httpx.Response) -> BatchLookupResponse:
    body, decoded = await _read_and_decode(response, BATCH_LOOKUP_SCHEMAS)
    return BatchLookupResponse(body=body, http_response=response, **decoded)


class ClientWithResponses:

    def __init__(self, server: str, *options: ClientOption):
        self.client = Client(server, *options)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def lookup_with_response(
        self,
        ip: str,
        params: Optional[LookupParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> LookupResponse:
        rsp = await self.client.lookup(ip, params, request_editors=request_editors)
        return await parse_lookup_response(rsp)

    async def lookup_my_with_response(
        self,
        params: Optional[LookupMyParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> LookupMyResponse:
        rsp = await self.client.lookup_my(params, request_editors=request_editors)
        return await parse_lookup_my_response(rsp)

    async def batch_lookup_with_response(
        self,
        body: BatchLookupRequestBody,
        params: Optional[BatchLookupParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> BatchLookupResponse:
        rsp = await self.client.batch_lookup(body, params, request_editors=request_editors)
        return await parse_batch_lookup_response(rsp)

    async def batch_lookup_with_body_with_response(
        self,
        content: bytes,
        content_type: str,
        params: Optional[BatchLookupParams] = None,
        *,
        request_editors: Sequence[RequestEditorFn] = (),
    ) -> BatchLookupResponse:
        rsp = await self.client.batch_lookup_with_body(content, content_type, params, request_editors=request_editors)
        return await parse_batch_lookup_response(rsp)
