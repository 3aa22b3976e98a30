"""Pydantic response models for store endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Coordinates, Store, StatusResult
from ..services.hours import hours_to_dict


class CoordinatesModel(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def _reject_unset(self) -> "CoordinatesModel":
        if self.lat == 0 and self.lng == 0:
            raise ValueError("(0, 0) is treated as an unset location")
        return self

    def to_domain(self) -> Coordinates:
        return Coordinates(lat=self.lat, lng=self.lng)

    @classmethod
    def from_domain(cls, coordinates: Coordinates) -> "CoordinatesModel":
        return cls(lat=coordinates.lat, lng=coordinates.lng)


class AddressModel(BaseModel):
    street: str
    city: str
    state: str
    zip: str
    coordinates: CoordinatesModel


class ContactModel(BaseModel):
    phone: str = ""
    email: str = ""


class DayHoursModel(BaseModel):
    open: str
    close: str


class SpecialHoursModel(BaseModel):
    date: str
    status: str


class StatusModel(BaseModel):
    state: str
    message: str
    color: str
    minutesRemaining: Optional[int] = None

    @classmethod
    def from_domain(cls, status: StatusResult) -> "StatusModel":
        return cls(
            state=status.state,
            message=status.message,
            color=status.color,
            minutesRemaining=status.minutes_remaining,
        )


class StoreModel(BaseModel):
    id: str
    name: str
    address: AddressModel
    contact: ContactModel
    hours: Optional[dict[str, Optional[DayHoursModel]]] = None
    services: list[str]
    photo: str = ""
    details: list[str] = Field(default_factory=list)
    specialHours: list[SpecialHoursModel] = Field(default_factory=list)
    featured: bool = False
    distance: Optional[float] = None
    status: Optional[StatusModel] = None

    @classmethod
    def from_domain(cls, store: Store, status: Optional[StatusResult] = None) -> "StoreModel":
        coordinates = store.coordinates
        return cls(
            id=store.id,
            name=store.name,
            address=AddressModel(
                street=store.address.street,
                city=store.address.city,
                state=store.address.state,
                zip=store.address.zip,
                coordinates=CoordinatesModel(lat=coordinates.lat, lng=coordinates.lng),
            ),
            contact=ContactModel(phone=store.contact.phone, email=store.contact.email),
            hours=hours_to_dict(store.hours),
            services=sorted(store.services),
            photo=store.photo,
            details=list(store.details),
            specialHours=[SpecialHoursModel(date=s.date, status=s.status) for s in store.special_hours],
            featured=store.featured,
            distance=round(store.distance, 2) if store.distance is not None else None,
            status=StatusModel.from_domain(status) if status else None,
        )


class CatalogResponse(BaseModel):
    stores: list[StoreModel]
    total: int
    skipped: int
    services: list[str]
