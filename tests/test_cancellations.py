from datetime import datetime, timedelta

import pytest

from esttetica.core.exceptions import BadRequestError, ConflictError, NotFoundError
from esttetica.models.subscription import Subscription
from esttetica.services.cancellation_service import CancellationService, process_pending_cancellations

from conftest import USER_ID


def test_request_within_refund_window(client, db, auth_headers, make_subscription):
    make_subscription()
    response = client.post(
        "/api/subscription/cancel",
        json={"reason": "Muito caro para o meu orçamento"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "cancellation_requested"
    assert data["cancellation_reason"] == "Muito caro para o meu orçamento"
    assert data["cancellation_requested_at"] is not None
    assert data["cancel_at_period_end"] is False


def test_request_after_refund_window(db, make_subscription):
    now = datetime(2026, 5, 1)
    make_subscription(created_at=now - timedelta(days=40))
    subscription = CancellationService(db).request_cancellation(USER_ID, "Problemas técnicos", now=now)
    assert subscription.cancel_at_period_end is True
    assert subscription.cancellation_requested_at == now


def test_request_with_custom_reason(db, make_subscription):
    make_subscription()
    subscription = CancellationService(db).request_cancellation(
        USER_ID, "Outro motivo", custom_reason="  Vou fechar a clínica  "
    )
    assert subscription.cancellation_reason == "Vou fechar a clínica"


def test_other_reason_requires_text(db, make_subscription):
    make_subscription()
    with pytest.raises(BadRequestError):
        CancellationService(db).request_cancellation(USER_ID, "Outro motivo", custom_reason=" ")


def test_unknown_reason_rejected(client, auth_headers, make_subscription):
    make_subscription()
    response = client.post("/api/subscription/cancel", json={"reason": "Porque sim"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid cancellation reason"}


def test_request_without_subscription(client, auth_headers):
    response = client.post(
        "/api/subscription/cancel",
        json={"reason": "Problemas técnicos"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_withdraw_cancellation(client, auth_headers, make_subscription):
    make_subscription(
        status="cancellation_requested",
        cancellation_requested_at=datetime.utcnow(),
        cancellation_reason="Problemas técnicos",
    )
    response = client.post("/api/subscription/withdraw-cancellation", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "active"
    assert data["cancellation_requested_at"] is None
    assert data["cancellation_reason"] is None


def test_withdraw_without_pending_request(db, make_subscription):
    make_subscription()
    with pytest.raises(ConflictError):
        CancellationService(db).withdraw_cancellation(USER_ID)


def test_withdraw_without_subscription(db):
    with pytest.raises(NotFoundError):
        CancellationService(db).withdraw_cancellation(USER_ID)


def test_cancellation_reasons(client):
    response = client.get("/api/subscription/cancellation-reasons")
    assert response.status_code == 200
    assert "Outro motivo" in response.json()["reasons"]


def test_process_pending_cancellations(db, fake_stripe, make_subscription):
    now = datetime(2026, 5, 20)
    old = now - timedelta(days=15)
    due = make_subscription(user_id="u1", stripe_subscription_id="sub_due",
                            status="cancellation_requested", cancellation_requested_at=old)
    local_only = make_subscription(user_id="u2", stripe_subscription_id=None,
                                   status="cancellation_requested", cancellation_requested_at=old)
    failing = make_subscription(user_id="u3", stripe_subscription_id="sub_fail",
                                status="cancellation_requested", cancellation_requested_at=old)
    recent = make_subscription(user_id="u4", stripe_subscription_id="sub_recent",
                               status="cancellation_requested", cancellation_requested_at=now - timedelta(days=3))
    fake_stripe.fail_cancel.add("sub_fail")

    result = process_pending_cancellations(db, fake_stripe, now=now)

    assert result["success"] is True
    assert result["processed"] == 2
    assert result["total"] == 3
    assert result["message"] == "Processed 2 cancellations"
    assert len(result["errors"]) == 1
    assert "sub_fail" in result["errors"][0]
    assert fake_stripe.cancelled == ["sub_due"]

    for subscription, status in ((due, "canceled"), (local_only, "canceled"),
                                 (failing, "cancellation_requested"), (recent, "cancellation_requested")):
        db.refresh(subscription)
        assert subscription.status == status
    assert due.canceled_at == now


def test_process_without_pending_rows(db, fake_stripe, make_subscription):
    make_subscription()
    result = process_pending_cancellations(db, fake_stripe)
    assert result == {
        "success": True,
        "message": "No pending cancellations to process",
        "processed": 0,
        "total": 0,
    }


def test_process_endpoint(client, db, fake_stripe, make_subscription):
    make_subscription(status="cancellation_requested",
                      cancellation_requested_at=datetime.utcnow() - timedelta(days=20))
    response = client.post("/api/billing/process-pending-cancellations")
    assert response.status_code == 200
    assert response.json()["processed"] == 1
    assert fake_stripe.cancelled == ["sub_123"]
    assert db.query(Subscription).one().status == "canceled"
