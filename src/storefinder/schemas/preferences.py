"""Persisted user preferences."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .stores import CoordinatesModel

SortKey = Literal["distance", "name", "recent"]


class Preferences(BaseModel):
    lastSearch: str = ""
    sortBy: SortKey = "distance"
    selectedServices: list[str] = Field(default_factory=list)
    openNow: bool = False
    lastLocation: Optional[CoordinatesModel] = None
    preferredStoreId: Optional[str] = None
    preferredStoreName: Optional[str] = None

    @field_validator("selectedServices")
    @classmethod
    def _normalize_services(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(item.strip().lower() for item in value if item and item.strip()))


class PreferencesUpdate(BaseModel):
    """Partial update; only fields that are explicitly set are merged."""

    lastSearch: Optional[str] = None
    sortBy: Optional[SortKey] = None
    selectedServices: Optional[list[str]] = None
    openNow: Optional[bool] = None
    lastLocation: Optional[CoordinatesModel] = None


class PreferredStoreRequest(BaseModel):
    storeId: str = Field(..., min_length=1)
