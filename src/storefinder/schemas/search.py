"""Pydantic request/response models for search endpoints."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, RootModel

from ..services.search import AddressIntent, FilterIntent, GeolocationIntent, ResultSet
from .preferences import SortKey
from .stores import CoordinatesModel, StoreModel


class GeolocationIntentModel(BaseModel):
    kind: Literal["geolocation"]
    position: Optional[CoordinatesModel] = Field(
        default=None, description="Position reported by the client's geolocation API, if granted."
    )

    def to_intent(self) -> GeolocationIntent:
        return GeolocationIntent(position=self.position.to_domain() if self.position else None)


class AddressIntentModel(BaseModel):
    kind: Literal["address"]
    value: str = Field(..., description="Address, city or postal code typed by the user.")

    def to_intent(self) -> AddressIntent:
        return AddressIntent(value=self.value)


class FilterIntentModel(BaseModel):
    kind: Literal["filter"]
    services: List[str] = Field(default_factory=list)
    openNow: bool = False

    def to_intent(self) -> FilterIntent:
        return FilterIntent(services=tuple(self.services), open_now=self.openNow)


SearchIntentModel = Annotated[
    Union[GeolocationIntentModel, AddressIntentModel, FilterIntentModel],
    Field(discriminator="kind"),
]


class SearchIntentRequest(RootModel[SearchIntentModel]):
    """Request body holding exactly one intent, selected by its "kind"."""


class SortRequest(BaseModel):
    sortBy: SortKey


class SuggestionModel(BaseModel):
    label: str
    value: str


class ResultSetResponse(BaseModel):
    stores: List[StoreModel]
    anchor: Optional[CoordinatesModel] = None
    center: Optional[CoordinatesModel] = None
    hero: Optional[StoreModel] = None
    message: Optional[str] = None
    totalMatches: int
    sequence: int
    state: str

    @classmethod
    def from_result(cls, result: ResultSet, state: str) -> "ResultSetResponse":
        statuses = result.statuses
        return cls(
            stores=[StoreModel.from_domain(store, statuses.get(store.id)) for store in result.stores],
            anchor=CoordinatesModel.from_domain(result.anchor) if result.anchor else None,
            center=CoordinatesModel.from_domain(result.center) if result.center else None,
            hero=StoreModel.from_domain(result.hero, statuses.get(result.hero.id)) if result.hero else None,
            message=result.message,
            totalMatches=result.total_matches,
            sequence=result.sequence,
            state=state,
        )
