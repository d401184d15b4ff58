from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    CheckConstraint,
    event,
)
from sqlalchemy.orm import relationship, Session
from sqlalchemy.sql import func

from rentify.database.init import Base
from rentify.enums.listing_status import ListingStatus


class ListingImage(Base):
    __tablename__ = "listing_images"

    id = Column(Integer, primary_key=True, index=True)
    listing_id = Column(Integer, ForeignKey("listings.id"), nullable=False)
    url = Column(String(500), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    listing = relationship("Listing", back_populates="images")


class Listing(Base):
    __tablename__ = "listings"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_listings_price_positive"),
        CheckConstraint("max_guests >= 1", name="ck_listings_max_guests"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(2000), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    country = Column(String(100), nullable=False, default="Philippines")
    location = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, index=True)
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Float, nullable=False)
    max_guests = Column(Integer, nullable=False)
    property_type = Column(String(20), nullable=False, index=True)
    amenities = Column(JSON, default=list)
    host_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    host_name = Column(String(200), nullable=False)
    rating = Column(Float, default=4.5)
    review_count = Column(Integer, default=0)
    status = Column(String(20), default=ListingStatus.ACTIVE.value, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    host = relationship("User", back_populates="listings")
    images = relationship(
        "ListingImage",
        back_populates="listing",
        cascade="all, delete-orphan",
        order_by="ListingImage.sort_order",
    )
    bookings = relationship("Booking", back_populates="listing")

    @property
    def is_bookable(self) -> bool:
        return self.status == ListingStatus.ACTIVE.value

    @property
    def primary_image(self):
        for image in self.images:
            if image.is_primary:
                return image.url
        return None


@event.listens_for(Session, "before_flush")
def _sync_listing_derived_fields(session, flush_context, instances):
    for obj in list(session.new) + list(session.dirty):
        if not isinstance(obj, Listing):
            continue

        obj.location = f"{obj.city}, {obj.country}"

        # Exactly one primary image when images exist
        if obj.images:
            ordered = sorted(obj.images, key=lambda image: image.sort_order or 0)
            primaries = [image for image in ordered if image.is_primary]
            keep = primaries[0] if primaries else ordered[0]
            for image in ordered:
                image.is_primary = image is keep
