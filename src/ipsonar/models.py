"""
Request and response models for the IP Sonar API.

Includes:
- IPGeolocation: one lookup result, every field optional (None = unknown)
- BatchLookupIPResponse: {"data": [IPGeolocation, ...]}
- ErrorResponse: {"message": "..."} for 401/404/422/429/500
- LookupParams / LookupMyParams / BatchLookupParams: query modifiers
- BatchLookupRequestBody: {"data": [ip, ...]}

Response bodies are frozen pydantic models; request shapes are plain TypedDicts.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, TypedDict

from pydantic import BaseModel, ConfigDict


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)


# GET /v1/{ip}, GET /v1/my
class IPGeolocation(_Frozen):
    ip: Optional[str] = None
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    city_name: Optional[str] = None
    continent_code: Optional[str] = None
    continent_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None
    postal_code: Optional[str] = None
    accuracy_radius: Optional[int] = None   # meters
    is_in_eu: Optional[bool] = None
    subdivision_1_code: Optional[str] = None
    subdivision_1_name: Optional[str] = None
    subdivision_2_code: Optional[str] = None
    subdivision_2_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IPGeolocation":
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; absent fields are omitted, empty strings are kept."""
        return self.model_dump(mode="json", exclude_none=True)


# POST /v1/batch (200)
class BatchLookupIPResponse(_Frozen):
    data: List[IPGeolocation] = []

    def to_dict(self) -> Dict[str, Any]:
        return {"data": [item.to_dict() for item in self.data]}


# 401 / 404 / 422 / 429 / 500
class ErrorResponse(_Frozen):
    message: str = ""


class LookupParams(TypedDict, total=False):
    fields: str          # comma string, e.g. "ip,country_code"
    locale_code: str


class LookupMyParams(TypedDict, total=False):
    fields: str
    locale_code: str


class BatchLookupParams(TypedDict, total=False):
    fields: str
    locale_code: str


class BatchLookupRequestBody(TypedDict):
    data: List[str]
