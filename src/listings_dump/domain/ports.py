# src/listings_dump/domain/ports.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Protocol, Sequence, TypeVar, Union

from pydantic import BaseModel

from listings_dump.domain.listing import PropertyListing, SearchResult


# ----------------------------
# Rows (the unit of persistence)
# ----------------------------

class Row(BaseModel):
    fetch_time: datetime
    listing: PropertyListing | None = None

    def to_json_row(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


# ----------------------------
# Search filter
# ----------------------------

@dataclass(frozen=True)
class LocationFilter:
    state: str
    suburb: str
    area: str = ""
    region: str = ""
    postcode: str = ""
    include_surrounding_suburbs: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "area": self.area,
            "region": self.region,
            "suburb": self.suburb,
            "postCode": self.postcode,
            "includeSurroundingSuburbs": self.include_surrounding_suburbs,
        }


@dataclass(frozen=True)
class ResidentialSearchRequest:
    listing_type: str
    locations: tuple[LocationFilter, ...] = field(default_factory=tuple)
    page_size: int | None = None

    def to_payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "listingType": self.listing_type,
            "locations": [loc.to_payload() for loc in self.locations],
        }
        if self.page_size is not None:
            body["pageSize"] = int(self.page_size)
        return body


def build_search_request(
    *,
    state: str,
    suburb: str,
    postcode: str | None = None,
    page_size: int | None = None,
) -> ResidentialSearchRequest:
    """
    Rental search for one suburb. No area/region narrowing and no
    surrounding suburbs, so a row always belongs to the suburb asked for.
    """
    return ResidentialSearchRequest(
        listing_type="Rent",
        locations=(
            LocationFilter(
                state=state,
                suburb=suburb,
                postcode=postcode or "",
                include_surrounding_suburbs=False,
            ),
        ),
        page_size=page_size,
    )


# ----------------------------
# Provisioning lookups
# ----------------------------

M = TypeVar("M")


@dataclass(frozen=True)
class Found(Generic[M]):
    metadata: M


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Failed:
    cause: BaseException


Lookup = Union[Found[Any], NotFound, Failed]


# ----------------------------
# Collaborators
# ----------------------------

class ListingsSource(Protocol):
    def search_residential(self, request: ResidentialSearchRequest) -> list[SearchResult]:
        ...


class Warehouse(Protocol):
    def lookup_dataset(self, dataset_id: str) -> Lookup:
        ...

    def create_dataset(self, dataset_id: str) -> None:
        ...

    def lookup_table(self, dataset_id: str, table_id: str) -> Lookup:
        ...

    def create_table(self, dataset_id: str, table_id: str) -> None:
        ...

    def update_table(
        self,
        dataset_id: str,
        table_id: str,
        *,
        friendly_name: str,
        schema: Sequence[Any],
    ) -> None:
        ...

    def insert_rows(self, dataset_id: str, table_id: str, rows: Sequence[Row]) -> None:
        ...
