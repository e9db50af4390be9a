from datetime import datetime, timedelta
from types import SimpleNamespace

from esttetica.services.entitlement import (
    SubscriptionState,
    billing_summary,
    debug_snapshot,
    is_entitled,
    pick_current_subscription,
    upgrade_prompt,
)
from esttetica.services.supabase_service import AuthUser

from conftest import USER_ID

SIMULATION = {"cost_per_hour": 60, "service_minutes": 30, "materials": []}


def row(status):
    return SimpleNamespace(status=status)


def test_entitled_statuses():
    assert is_entitled("active")
    assert is_entitled("cancellation_requested")
    for status in ("trialing", "past_due", "incomplete", "inactive", "canceled", None):
        assert not is_entitled(status)


def test_pick_current_subscription():
    assert pick_current_subscription([]) is None

    newest = row("canceled")
    assert pick_current_subscription([newest]) is newest

    entitled = row("active")
    assert pick_current_subscription([newest, entitled, row("active")]) is entitled

    inactive = [row("canceled"), row("past_due")]
    assert pick_current_subscription(inactive) is inactive[0]


def test_state_flags():
    assert not SubscriptionState(subscription=None).is_active

    state = SubscriptionState(subscription=row("cancellation_requested"))
    assert state.is_active
    assert state.is_premium == state.is_active
    assert not state.loading


def test_premium_route_renders_for_active_subscription(client, auth_headers, make_subscription):
    make_subscription(status="active")
    response = client.post("/api/tools/price-simulator", json=SIMULATION, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["labor_cost"] == 30.0


def test_premium_route_allows_pending_cancellation(client, auth_headers, make_subscription):
    make_subscription(status="cancellation_requested", cancellation_requested_at=datetime.utcnow())
    response = client.post("/api/tools/price-simulator", json=SIMULATION, headers=auth_headers)
    assert response.status_code == 200


def test_premium_route_redirects_without_subscription(client, auth_headers):
    response = client.post(
        "/api/tools/price-simulator",
        json=SIMULATION,
        headers=auth_headers,
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


def test_premium_route_redirects_for_canceled_subscription(client, auth_headers, make_subscription):
    make_subscription(status="canceled")
    response = client.post(
        "/api/tools/price-simulator",
        json=SIMULATION,
        headers=auth_headers,
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


def test_subscription_state_endpoint(client, auth_headers, make_subscription):
    make_subscription(status="active")
    response = client.get("/api/subscription/", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["is_active"] is True
    assert data["is_premium"] is True
    assert data["loading"] is False
    assert data["subscription"]["user_id"] == USER_ID
    assert data["subscription"]["plan_name"] == "Mensal"


def test_subscription_state_without_row(client, auth_headers):
    response = client.get("/api/subscription/", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["subscription"] is None
    assert response.json()["is_active"] is False


def test_subscription_state_requires_auth(client):
    response = client.get("/api/subscription/")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}


def test_debug_snapshot():
    subscription = SimpleNamespace(status="active", stripe_subscription_id="sub_1", plan_type="yearly")
    snapshot = debug_snapshot(AuthUser(id="u1"), SubscriptionState(subscription=subscription))
    assert snapshot == {
        "user_id": "u1",
        "loading": False,
        "subscription_found": True,
        "status": "active",
        "stripe_subscription_id": "sub_1",
        "plan": "yearly",
        "is_active": True,
        "is_premium": True,
    }

    empty = debug_snapshot(None, SubscriptionState(subscription=None))
    assert empty["user_id"] == "No user"
    assert empty["subscription_found"] is False


def test_debug_endpoint(client, auth_headers, make_subscription):
    make_subscription()
    response = client.get("/api/subscription/debug", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user_id"] == USER_ID
    assert response.json()["stripe_subscription_id"] == "sub_123"


def test_upgrade_prompt_defaults():
    prompt = upgrade_prompt()
    assert prompt["title"] == "Funcionalidade Premium"
    assert len(prompt["benefits"]) == 4
    assert prompt["upgrade_url"] == "/subscribe"
    assert prompt["plans_url"] == "/profile/billing"


def test_upgrade_prompt_endpoint(client):
    response = client.get("/api/subscription/upgrade-prompt", params={"feature": "Relatórios", "title": "Relatórios"})
    assert response.status_code == 200
    assert response.json()["feature"] == "Relatórios"
    assert response.json()["title"] == "Relatórios"


def test_billing_summary_deadlines():
    now = datetime(2026, 3, 10, 12, 0)
    subscription = SimpleNamespace(
        status="active",
        plan_name="Mensal",
        created_at=now - timedelta(days=3),
        current_period_end=now + timedelta(days=27),
    )
    summary = billing_summary(subscription, now)
    assert summary["within_refund_window"] is True
    assert summary["refund_deadline"] == now + timedelta(days=11)
    assert summary["cancellation_deadline"] == now + timedelta(days=13)


def test_billing_summary_hides_passed_cancellation_deadline():
    now = datetime(2026, 3, 10, 12, 0)
    subscription = SimpleNamespace(
        status="active",
        plan_name="Mensal",
        created_at=now - timedelta(days=40),
        current_period_end=now + timedelta(days=5),
    )
    summary = billing_summary(subscription, now)
    assert summary["cancellation_deadline"] is None
    assert summary["refund_deadline"] is None


def test_billing_summary_after_refund_window():
    now = datetime(2026, 3, 10, 12, 0)
    subscription = SimpleNamespace(
        status="active",
        plan_name="Anual",
        created_at=now - timedelta(days=40),
        current_period_end=None,
    )
    summary = billing_summary(subscription, now)
    assert summary["within_refund_window"] is False
    assert summary["refund_deadline"] is None
    assert summary["cancellation_deadline"] is None


def test_billing_endpoint(client, auth_headers, make_subscription):
    make_subscription(current_period_end=datetime.utcnow() + timedelta(days=30))
    response = client.get("/api/subscription/billing", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["within_refund_window"] is True
    assert response.json()["cancellation_deadline"] is not None


def test_billing_endpoint_without_subscription(client, auth_headers):
    response = client.get("/api/subscription/billing", headers=auth_headers)
    assert response.status_code == 404
