# src/listings_dump/domain/listing.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


# --------------------------------------------
# Domain residential search payload
# --------------------------------------------
# These mirror the JSON returned by POST /listings/residential/_search.
# The API speaks camelCase; we keep snake_case attributes (they become the
# BigQuery column names) and parse through camelCase aliases.


class DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _null_list_to_empty(cls, v: Any, info: ValidationInfo) -> Any:
        # the API sends `null` for empty arrays on some listings
        if v is None and info.field_name:
            field = cls.model_fields.get(info.field_name)
            if field is not None and get_origin(field.annotation) is list:
                return []
        return v


class Contact(DomainModel):
    name: str | None = None
    photo_url: str | None = None


class Advertiser(DomainModel):
    type: str | None = None
    id: int | None = None
    name: str | None = None
    logo_url: str | None = None
    preferred_colour_hex: str | None = None
    banner_url: str | None = None
    contacts: list[Contact] = Field(default_factory=list)


class PriceDetails(DomainModel):
    price: int | None = None
    price_from: int | None = None
    price_to: int | None = None
    display_price: str | None = None


class Media(DomainModel):
    category: str | None = None
    url: str | None = None


class PropertyDetails(DomainModel):
    state: str | None = None
    features: list[str] = Field(default_factory=list)
    property_type: str | None = None
    all_property_types: list[str] = Field(default_factory=list)
    bathrooms: float | None = None
    bedrooms: float | None = None
    carspaces: int | None = None
    unit_number: str | None = None
    street_number: str | None = None
    street: str | None = None
    area: str | None = None
    region: str | None = None
    suburb: str | None = None
    postcode: str | None = None
    displayable_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    land_area: float | None = None
    building_area: float | None = None
    is_rural: bool | None = None


class InspectionTime(DomainModel):
    opening_time: datetime | None = None
    closing_time: datetime | None = None


class InspectionSchedule(DomainModel):
    by_appointment: bool | None = None
    recurring: bool | None = None
    times: list[InspectionTime] = Field(default_factory=list)


class AuctionSchedule(DomainModel):
    time: datetime | None = None
    auction_location: str | None = None


class PropertyListing(DomainModel):
    """
    A single property-for-rent (or sale) listing as Domain returns it.

    Every field is optional: what comes back depends on what the agent
    filled in.
    """

    id: int | None = None
    listing_type: str | None = None
    advertiser: Advertiser | None = None
    price_details: PriceDetails | None = None
    media: list[Media] = Field(default_factory=list)
    property_details: PropertyDetails | None = None
    headline: str | None = None
    summary_description: str | None = None
    has_floorplan: bool | None = None
    has_video: bool | None = None
    labels: list[str] = Field(default_factory=list)
    auction_schedule: AuctionSchedule | None = None
    inspection_schedule: InspectionSchedule | None = None
    listing_slug: str | None = None
    date_listed: datetime | None = None
    date_available: date | None = None


class SearchResult(DomainModel):
    """
    One entry of the search response. Project entries carry no `listing`.
    """

    type: str | None = None
    listing: PropertyListing | None = None
