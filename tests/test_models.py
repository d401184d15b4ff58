from datetime import date

import pytest

from rentify.database.models import Booking, ListingImage
from rentify.utils.exceptions import ValidationError


def test_listing_location_follows_city_and_country(db_session, listing):
    assert listing.location == "Cebu, Philippines"

    listing.city = "Manila"
    db_session.commit()
    db_session.refresh(listing)

    assert listing.location == "Manila, Philippines"


def test_first_image_becomes_primary(db_session, listing):
    listing.images = [
        ListingImage(url="/uploads/b.jpg", sort_order=1),
        ListingImage(url="/uploads/a.jpg", sort_order=0),
    ]
    db_session.commit()
    db_session.refresh(listing)

    primaries = [image.url for image in listing.images if image.is_primary]
    assert primaries == ["/uploads/a.jpg"]
    assert listing.primary_image == "/uploads/a.jpg"


def test_only_one_primary_image_is_kept(db_session, listing):
    listing.images = [
        ListingImage(url="/uploads/a.jpg", sort_order=0, is_primary=True),
        ListingImage(url="/uploads/b.jpg", sort_order=1, is_primary=True),
    ]
    db_session.commit()
    db_session.refresh(listing)

    assert [image.is_primary for image in listing.images] == [True, False]


def test_booking_dates_are_checked_on_write(db_session, listing):
    booking = Booking(
        listing_id=listing.id,
        host_id=listing.host_id,
        guest_name="Jane",
        guest_email="jane@example.com",
        check_in=date(2024, 3, 5),
        check_out=date(2024, 3, 5),
        guests=1,
        total_price=0,
    )
    db_session.add(booking)

    with pytest.raises(ValidationError):
        db_session.commit()
    db_session.rollback()


def test_booking_nights(make_booking, listing):
    booking = make_booking(listing, date(2024, 3, 1), date(2024, 3, 5))

    assert booking.nights == 4
