import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_x")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_x")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from esttetica.core.exceptions import BadRequestError, IntegrationError
from esttetica.database import get_db, init_db
from esttetica.main import app
from esttetica.models.subscription import Subscription, SubscriptionStatus
from esttetica.services.stripe_service import get_stripe_service
from esttetica.services.supabase_service import AuthUser, get_identity_service

USER_ID = "7f1d2c3b-0000-4000-8000-000000000001"
USER_EMAIL = "ana@clinica.com.br"
TOKEN = "valid-token"


class FakeIdentity:
    """In-process stand-in for the Supabase auth API"""

    def __init__(self):
        self.users = {TOKEN: AuthUser(id=USER_ID, email=USER_EMAIL)}

    def get_user(self, token):
        return self.users.get(token)

    def find_user_id_by_email(self, email):
        for user in self.users.values():
            if user.email == email:
                return user.id
        return None


class FakeStripe:
    """Records calls instead of reaching Stripe"""

    def __init__(self):
        self.portal_url = "https://billing.stripe.com/p/session/test_123"
        self.portal_calls = []
        self.subscriptions = {}
        self.cancelled = []
        self.fail_cancel = set()
        self.fail_portal = False

    def create_billing_portal_session(self, customer_id, return_url):
        if self.fail_portal:
            raise IntegrationError("Billing portal session failed: boom")
        self.portal_calls.append((customer_id, return_url))
        return self.portal_url

    def retrieve_subscription(self, subscription_id):
        if subscription_id not in self.subscriptions:
            raise IntegrationError(f"Subscription lookup failed: {subscription_id}")
        return self.subscriptions[subscription_id]

    def cancel_subscription(self, subscription_id):
        if subscription_id in self.fail_cancel:
            raise IntegrationError(f"Subscription cancellation failed: {subscription_id}")
        self.cancelled.append(subscription_id)
        return {"id": subscription_id, "status": "canceled"}

    def construct_event(self, payload, signature, secret):
        if signature != "t=1,v1=valid":
            raise BadRequestError("Invalid signature")
        return payload


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def fake_stripe():
    return FakeStripe()


@pytest.fixture
def client(db, identity, fake_stripe):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_service] = lambda: identity
    app.dependency_overrides[get_stripe_service] = lambda: fake_stripe
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def make_subscription(db):
    def _make(**overrides):
        values = {
            "user_id": USER_ID,
            "stripe_customer_id": "cus_123",
            "stripe_subscription_id": "sub_123",
            "status": SubscriptionStatus.ACTIVE.value,
            "plan_name": "Mensal",
            "plan_type": "monthly",
            "price_id": "price_1S9YdXBe0ycHroRB9sDH7MJO",
        }
        values.update(overrides)
        subscription = Subscription(**values)
        db.add(subscription)
        db.commit()
        db.refresh(subscription)
        return subscription

    return _make