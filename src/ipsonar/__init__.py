"""Async client for the IP Sonar geolocation API."""
from .client import (
    API_KEY_HEADER,
    API_SERVER,
    Client,
    ClientOption,
    HttpRequestDoer,
    RequestEditorFn,
    api_key_editor,
    new_batch_lookup_request,
    new_batch_lookup_request_with_body,
    new_lookup_my_request,
    new_lookup_request,
    with_base_url,
    with_http_client,
    with_request_editor_fn,
)
from .errors import ConfigurationError, IPSonarError, ResponseDecodeError
from .models import (
    BatchLookupIPResponse,
    BatchLookupParams,
    BatchLookupRequestBody,
    ErrorResponse,
    IPGeolocation,
    LookupMyParams,
    LookupParams,
)
from .responses import (
    BatchLookupResponse,
    ClientWithResponses,
    LookupMyResponse,
    LookupResponse,
    parse_batch_lookup_response,
    parse_lookup_my_response,
    parse_lookup_response,
)

__all__ = [
    "API_KEY_HEADER",
    "API_SERVER",
    "BatchLookupIPResponse",
    "BatchLookupParams",
    "BatchLookupRequestBody",
    "BatchLookupResponse",
    "Client",
    "ClientOption",
    "ClientWithResponses",
    "ConfigurationError",
    "ErrorResponse",
    "HttpRequestDoer",
    "IPGeolocation",
    "IPSonarError",
    "LookupMyParams",
    "LookupMyResponse",
    "LookupParams",
    "LookupResponse",
    "RequestEditorFn",
    "ResponseDecodeError",
    "api_key_editor",
    "new_batch_lookup_request",
    "new_batch_lookup_request_with_body",
    "new_lookup_my_request",
    "new_lookup_request",
    "parse_batch_lookup_response",
    "parse_lookup_my_response",
    "parse_lookup_response",
    "with_base_url",
    "with_http_client",
    "with_request_editor_fn",
]
