from typing import Optional

from rentify.enums.listing_status import ListingStatus
from rentify.enums.property_type import PropertyType
from .base_schema import CamelModel


class ListingMinimumResponse(CamelModel):
    id: int
    title: str
    location: str
    price: float
    max_guests: int
    property_type: PropertyType
    status: ListingStatus
    host_id: int
    primary_image: Optional[str] = None
