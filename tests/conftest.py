import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rentify.main import app
from rentify.database.init import Base, get_db
from rentify.database.models import Booking, Listing, User
from rentify.enums.booking_status import BookingStatus
from rentify.enums.listing_status import ListingStatus
from rentify.enums.property_type import PropertyType
from rentify.enums.user_role import UserRole
from rentify.utils.dependencies import create_access_token


# ---------- TEST FIXTURES ----------

@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """A new DB session for each test."""
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Override get_db dependency for FastAPI TestClient."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# ---------- TEST DATA HELPERS ----------

@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role=UserRole.USER, first_name=None, email=None):
        counter["n"] += 1
        user = User(
            first_name=first_name or f"{role.value.title()}{counter['n']}",
            last_name="Tester",
            email=email or f"{role.value}{counter['n']}@example.com",
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_listing(db_session):
    def _make_listing(host, max_guests=4, status=ListingStatus.ACTIVE, title="Beach House"):
        listing = Listing(
            title=title,
            description="A lovely place by the sea",
            address="1 Shore Road",
            city="Cebu",
            country="Philippines",
            price=120.0,
            bedrooms=2,
            bathrooms=1.5,
            max_guests=max_guests,
            property_type=PropertyType.HOUSE.value,
            amenities=["wifi", "pool"],
            host_id=host.id,
            host_name=host.name,
            status=status.value,
        )
        db_session.add(listing)
        db_session.commit()
        db_session.refresh(listing)
        return listing

    return _make_listing


@pytest.fixture
def make_booking(db_session):
    """Insert a booking row directly, bypassing the lifecycle engine."""

    def _make_booking(
        listing,
        check_in=date(2024, 3, 1),
        check_out=date(2024, 3, 5),
        guest=None,
        status=BookingStatus.PENDING,
    ):
        booking = Booking(
            listing_id=listing.id,
            host_id=listing.host_id,
            guest_id=guest.id if guest else None,
            guest_name=guest.name if guest else "Walk In",
            guest_email=guest.email if guest else "walkin@example.com",
            check_in=check_in,
            check_out=check_out,
            guests=2,
            total_price=480.0,
            status=status.value,
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token({"sub": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def host(make_user):
    return make_user(UserRole.HOST)


@pytest.fixture
def guest(make_user):
    return make_user(UserRole.USER)


@pytest.fixture
def listing(make_listing, host):
    return make_listing(host)
