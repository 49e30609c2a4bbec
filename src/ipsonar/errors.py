from __future__ import annotations
from typing import Optional


class IPSonarError(Exception):
    """Base class for errors raised by this library."""


class ConfigurationError(IPSonarError, ValueError):
    """Raised when a client is built with an unusable server/base URL."""


class ResponseDecodeError(IPSonarError):
    """
    A body the parser was expected to decode was not valid JSON
    or did not match the declared schema.
    The original exception is chained as __cause__.
    """

    def __init__(self, message: str, status_code: int, body: Optional[bytes] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
