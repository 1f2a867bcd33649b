"""
Pytest fixtures for test database, client, authentication and catalog data.

Tests run against an in-memory SQLite database by default; point
TEST_DATABASE_URL at a Postgres database to run the same suite there.
Tables are created and dropped around every test for isolation.
"""

import os

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from eventplanner.main import app
from eventplanner.db.base import Base
from eventplanner.db.session import get_db
from eventplanner.core.security import create_access_token
from eventplanner.models import Booking, Event, User, VendorProfile, VendorService
from eventplanner.models.enums import BookingStatus, PriceType, Role, VendorType
from eventplanner.services.pricing import calculate_cost

BOOKING_DATE = date(2026, 12, 12)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_headers_for(user: User) -> dict:
    """Authorization headers with a Bearer token for the given user."""
    token = create_access_token(data={"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


async def make_user(db: AsyncSession, username: str, role: Role, is_active: bool = True) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        first_name=username.capitalize(),
        last_name="Tester",
        profile_type=role,
        is_active=is_active,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_service(
    db: AsyncSession,
    vendor: VendorProfile,
    name: str,
    price_type: PriceType,
    base_price: str,
    capacity: Optional[int] = None,
    is_available: bool = True,
) -> VendorService:
    service = VendorService(
        vendor_id=vendor.id,
        service_name=name,
        base_price=Decimal(base_price),
        price_type=price_type,
        capacity=capacity,
        is_available=is_available,
    )
    db.add(service)
    await db.commit()
    await db.refresh(service)
    return service


async def make_booking(
    db: AsyncSession,
    event: Event,
    service: VendorService,
    customer: User,
    status: BookingStatus = BookingStatus.PENDING,
    booking_date: date = BOOKING_DATE,
    start_time: Optional[time] = None,
    end_time: Optional[time] = None,
    quantity: int = 1,
) -> Booking:
    """Insert a booking directly, bypassing the engine, in any status."""
    booking = Booking(
        event_id=event.id,
        vendor_id=service.vendor_id,
        service_id=service.id,
        customer_id=customer.id,
        quantity=quantity,
        unit_price=service.base_price,
        price_type=service.price_type,
        total_cost=calculate_cost(service.base_price, service.price_type, quantity, start_time, end_time),
        booking_date=booking_date,
        start_time=start_time,
        end_time=end_time,
        status=status,
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)
    return booking


# Users

@pytest_asyncio.fixture
async def customer(db_session: AsyncSession) -> User:
    return await make_user(db_session, "alice", Role.CUSTOMER)


@pytest_asyncio.fixture
async def other_customer(db_session: AsyncSession) -> User:
    return await make_user(db_session, "bob", Role.CUSTOMER)


@pytest_asyncio.fixture
async def vendor_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, "carla", Role.VENDOR)


@pytest_asyncio.fixture
async def other_vendor_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, "dmitri", Role.VENDOR)


@pytest_asyncio.fixture
async def manager(db_session: AsyncSession) -> User:
    return await make_user(db_session, "erin", Role.MANAGER)


@pytest_asyncio.fixture
async def other_manager(db_session: AsyncSession) -> User:
    return await make_user(db_session, "frank", Role.MANAGER)


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, "grace", Role.ADMIN)


# Events

@pytest_asyncio.fixture
async def event(db_session: AsyncSession, customer: User, manager: User) -> Event:
    """Alice's wedding, managed by Erin."""
    start = datetime(2026, 12, 12, 15, 0, tzinfo=timezone.utc)
    event = Event(
        title="Alice's Wedding",
        start_date=start,
        end_date=start + timedelta(hours=8),
        location="Lakeside Pavilion",
        customer_id=customer.id,
        manager_id=manager.id,
    )
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def other_event(db_session: AsyncSession, other_customer: User) -> Event:
    start = datetime(2026, 11, 20, 18, 0, tzinfo=timezone.utc)
    event = Event(
        title="Bob's Birthday",
        start_date=start,
        end_date=start + timedelta(hours=4),
        location="Rooftop Bar",
        customer_id=other_customer.id,
    )
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


# Vendors and services

async def _make_vendor(db: AsyncSession, owner: User, name: str, is_available: bool = True) -> VendorProfile:
    vendor = VendorProfile(
        user_id=owner.id,
        business_name=name,
        vendor_type=VendorType.CATERER,
        is_available=is_available,
    )
    db.add(vendor)
    await db.commit()
    await db.refresh(vendor)
    return vendor


@pytest_asyncio.fixture
async def vendor(db_session: AsyncSession, vendor_user: User) -> VendorProfile:
    return await _make_vendor(db_session, vendor_user, "Carla's Kitchen")


@pytest_asyncio.fixture
async def other_vendor(db_session: AsyncSession, other_vendor_user: User) -> VendorProfile:
    return await _make_vendor(db_session, other_vendor_user, "Dmitri Sound")


@pytest_asyncio.fixture
async def unavailable_vendor(db_session: AsyncSession, other_vendor_user: User) -> VendorProfile:
    return await _make_vendor(db_session, other_vendor_user, "Closed Catering", is_available=False)


@pytest_asyncio.fixture
async def per_person_service(db_session: AsyncSession, vendor: VendorProfile) -> VendorService:
    return await make_service(db_session, vendor, "Buffet", PriceType.PER_PERSON, "10.00", capacity=50)


@pytest_asyncio.fixture
async def per_hour_service(db_session: AsyncSession, vendor: VendorProfile) -> VendorService:
    return await make_service(db_session, vendor, "Live Chef", PriceType.PER_HOUR, "20.00")


@pytest_asyncio.fixture
async def per_event_service(db_session: AsyncSession, vendor: VendorProfile) -> VendorService:
    return await make_service(db_session, vendor, "Cake", PriceType.PER_EVENT, "500.00")


@pytest_asyncio.fixture
async def per_meal_service(db_session: AsyncSession, vendor: VendorProfile) -> VendorService:
    return await make_service(db_session, vendor, "Plated Dinner", PriceType.PER_MEAL, "25.50")


@pytest_asyncio.fixture
async def unavailable_service(db_session: AsyncSession, vendor: VendorProfile) -> VendorService:
    return await make_service(
        db_session, vendor, "Ice Sculpture", PriceType.PER_EVENT, "300.00", is_available=False
    )


@pytest_asyncio.fixture
async def other_vendor_service(db_session: AsyncSession, other_vendor: VendorProfile) -> VendorService:
    return await make_service(db_session, other_vendor, "DJ Set", PriceType.PER_HOUR, "80.00")


def booking_payload(event: Event, service: VendorService, **overrides) -> dict:
    payload = {
        "event_id": event.id,
        "vendor_id": service.vendor_id,
        "service_id": service.id,
        "quantity": 1,
        "booking_date": BOOKING_DATE.isoformat(),
    }
    payload.update(overrides)
    return payload
