from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Date,
    DateTime,
    ForeignKey,
    Float,
    CheckConstraint,
    event,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from rentify.database.init import Base
from rentify.enums.booking_status import BookingStatus
from rentify.enums.payment_status import PaymentStatus
from rentify.utils.exceptions import ValidationError


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("check_out > check_in", name="ck_bookings_date_order"),
        CheckConstraint("guests >= 1", name="ck_bookings_guests"),
        CheckConstraint("total_price >= 0", name="ck_bookings_total_price"),
    )

    id = Column(Integer, primary_key=True, index=True)
    listing_id = Column(Integer, ForeignKey("listings.id"), nullable=False, index=True)
    # Copied from the listing at creation and never updated afterwards
    host_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    guest_name = Column(String(200), nullable=False)
    guest_email = Column(String(100), nullable=False)
    guest_phone = Column(String(20), nullable=True)

    check_in = Column(Date, nullable=False, index=True)
    check_out = Column(Date, nullable=False, index=True)
    guests = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False, index=True)
    payment_status = Column(String(20), default=PaymentStatus.PENDING.value, nullable=False)
    special_requests = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    listing = relationship("Listing", back_populates="bookings")
    host = relationship("User", foreign_keys=[host_id])
    guest = relationship("User", foreign_keys=[guest_id])

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


@event.listens_for(Booking, "before_insert")
@event.listens_for(Booking, "before_update")
def _check_date_order(mapper, connection, target):
    if target.check_out <= target.check_in:
        raise ValidationError("Check-out date must be after check-in date")
