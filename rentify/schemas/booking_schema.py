from datetime import date, datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from rentify.config import SPECIAL_REQUESTS_MAX_LENGTH
from rentify.enums.booking_status import BookingStatus
from rentify.enums.payment_status import PaymentStatus
from .base_schema import CamelModel
from .listing_schema import ListingMinimumResponse
from .user_schema import UserMinimumResponse


def _coerce_date(value):
    # Clients send either plain dates or full ISO timestamps
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class DateRangeMixin(CamelModel):
    check_in: date
    check_out: date

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def parse_dates(cls, value):
        return _coerce_date(value)

    @model_validator(mode="after")
    def check_date_order(self):
        if self.check_out <= self.check_in:
            raise ValueError("Check-out date must be after check-in date")
        return self


class AvailabilityRequest(DateRangeMixin):
    listing_id: int


class AvailabilityResponse(CamelModel):
    available: bool


class BookingCreate(DateRangeMixin):
    listing_id: int
    guests: int = Field(..., ge=1)
    total_price: float = Field(..., ge=0)
    guest_name: str = Field(..., min_length=1, max_length=200)
    guest_email: EmailStr
    guest_phone: Optional[str] = Field(None, max_length=20)
    special_requests: Optional[str] = Field(None, max_length=SPECIAL_REQUESTS_MAX_LENGTH)

    @field_validator("guest_name", "guest_phone", "special_requests")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("guest_email")
    @classmethod
    def lowercase_email(cls, value):
        return value.lower()


class BookingStatusUpdate(CamelModel):
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None

    @model_validator(mode="after")
    def require_change(self):
        if self.status is None and self.payment_status is None:
            raise ValueError("Either status or paymentStatus must be provided")
        return self


class CancelRequest(CamelModel):
    reason: Optional[str] = Field(None, max_length=500)


class BookingResponse(CamelModel):
    id: int
    listing: Optional[ListingMinimumResponse] = None
    host_id: int
    guest: Optional[UserMinimumResponse] = None
    guest_name: str
    guest_email: str
    guest_phone: Optional[str] = None
    check_in: date
    check_out: date
    nights: int
    guests: int
    total_price: float
    status: BookingStatus
    payment_status: PaymentStatus
    special_requests: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
