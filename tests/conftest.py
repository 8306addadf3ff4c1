"""Shared pytest fixtures."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gymnasaas.auth.utils import create_session_token
from gymnasaas.db.database import get_db
from gymnasaas.db.models import (
    Academy,
    Base,
    Plan,
    PlanCode,
    Profile,
    Subscription,
    Tenant,
    UserRole,
)
from gymnasaas.main import app
from gymnasaas.security import api_limiter

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Each test starts with empty rate limit windows."""
    api_limiter.reset()
    yield
    api_limiter.reset()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Fresh in-memory database per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """Unauthenticated client sharing the test database session."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def plans(db: Session) -> dict[PlanCode, Plan]:
    """The three catalogue plans, using the built-in limits."""
    rows = {
        PlanCode.FREE: Plan(code=PlanCode.FREE, nickname="Free", price_eur=0),
        PlanCode.PRO: Plan(
            code=PlanCode.PRO, nickname="Pro", price_eur=19, stripe_price_id="price_pro"
        ),
        PlanCode.PREMIUM: Plan(
            code=PlanCode.PREMIUM, nickname="Premium", price_eur=49, stripe_price_id="price_premium"
        ),
    }
    db.add_all(rows.values())
    db.commit()
    return rows


@pytest.fixture
def test_tenant(db: Session) -> Tenant:
    tenant = Tenant(name="Club Olimpia")
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


@pytest.fixture
def test_user(db: Session, test_tenant: Tenant) -> Profile:
    """Owner profile of ``test_tenant``."""
    profile = Profile(
        user_id="user-owner-1",
        tenant_id=test_tenant.id,
        email="owner@example.com",
        name="Laura",
        role=UserRole.OWNER,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def test_academy(db: Session, test_tenant: Tenant, test_user: Profile) -> Academy:
    academy = Academy(
        tenant_id=test_tenant.id,
        owner_id=test_user.id,
        name="Olimpia Norte",
        country="ES",
    )
    db.add(academy)
    db.commit()
    db.refresh(academy)
    return academy


@pytest.fixture
def super_admin(db: Session) -> Profile:
    profile = Profile(user_id="user-root", role=UserRole.SUPER_ADMIN, name="Root")
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def auth_headers():
    """Build a Bearer header carrying a session token for a profile."""

    def _headers(profile: Profile) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_session_token(profile.user_id)}"}

    return _headers


@pytest.fixture
def authenticated_client(client: TestClient, test_user: Profile, auth_headers) -> TestClient:
    client.headers.update(auth_headers(test_user))
    return client


@pytest.fixture
def super_admin_client(client: TestClient, super_admin: Profile, auth_headers) -> TestClient:
    client.headers.update(auth_headers(super_admin))
    return client


@pytest.fixture
def subscribe(db: Session):
    """Attach a subscription on a plan to a tenant."""

    def _subscribe(tenant: Tenant, plan: Plan, **kwargs) -> Subscription:
        subscription = Subscription(tenant_id=tenant.id, plan_id=plan.id, **kwargs)
        db.add(subscription)
        db.commit()
        db.refresh(subscription)
        return subscription

    return _subscribe
