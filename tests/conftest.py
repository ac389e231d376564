"""Shared test fixtures and helpers."""

import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.pop("PUSH_GATEWAY_URL", None)

import random
from datetime import datetime, timedelta
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.clock import FixedClock, get_clock, get_rng
from app.constants.statuses import AppSessionStatus, UserRole
from app.database import Base, get_db
from app.main import app
from app.models import AppSession, Service, User, Wallet
from app.security_utils import create_jwt_token

# Wednesday noon, UTC
NOW = datetime(2024, 1, 10, 12, 0, 0)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def client(db, clock):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rng] = lambda: random.Random(42)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, email: str, role: UserRole = UserRole.CLIENT, name: Optional[str] = None) -> User:
    """Helper to create a committed user."""
    user = User(email=email, role=role.value, name=name or email.split("@")[0])
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    token = create_jwt_token({"sub": str(user.id)}, expires_delta=timedelta(hours=1))
    return {"Authorization": f"Bearer {token}"}


def make_service(db, provider: User, price: float = 100.0, duration: int = 60, **kwargs) -> Service:
    service = Service(
        provider_id=provider.id,
        title=kwargs.pop("title", "Career coaching"),
        price=price,
        duration=duration,
        **kwargs,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def make_session(
    db,
    client_user: User,
    provider: User,
    start_time: datetime,
    minutes: Optional[int] = 60,
    status: AppSessionStatus = AppSessionStatus.SCHEDULED,
    price: float = 100.0,
    service: Optional[Service] = None,
) -> AppSession:
    session = AppSession(
        client_id=client_user.id,
        provider_id=provider.id,
        service_id=service.id if service else None,
        status=status.value,
        start_time=start_time,
        end_time=start_time + timedelta(minutes=minutes) if minutes else None,
        price=price,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def make_wallet(db, user: User, balance: float = 0.0, minutes: int = 0) -> Wallet:
    wallet = Wallet(user_id=user.id, balance=balance, available_minutes=minutes, total_minutes_purchased=minutes)
    db.add(wallet)
    db.commit()
    db.refresh(wallet)
    return wallet


@pytest.fixture
def provider(db):
    return make_user(db, "provider@example.com", UserRole.PROVIDER, name="Pat Provider")


@pytest.fixture
def customer(db):
    return make_user(db, "client@example.com", UserRole.CLIENT, name="Casey Client")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
def service(db, provider):
    return make_service(db, provider)
