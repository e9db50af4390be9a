import pytest

from esttetica.services.help_service import get_contact_info, whatsapp_url
from esttetica.services.price_simulator import cost_per_hour_from_expenses, simulate_price


def test_simulate_price():
    result = simulate_price(60, 90, [10, 5], 30)
    assert result == {
        "cost_per_hour": 60.0,
        "labor_cost": 90.0,
        "total_materials_cost": 15.0,
        "minimum_price": 105.0,
        "profit_value": 31.5,
        "suggested_price": 136.5,
    }


def test_cost_per_hour_from_expenses():
    assert cost_per_hour_from_expenses(4330, 5, 8) == pytest.approx(25.0)
    assert cost_per_hour_from_expenses(4330, 0, 8) == 0.0
    assert cost_per_hour_from_expenses(4330, None, None) == 0.0


def test_price_simulator_from_monthly_expenses(client, auth_headers, make_subscription):
    make_subscription()
    response = client.post(
        "/api/tools/price-simulator",
        json={
            "service_minutes": 60,
            "monthly_expenses": 4330,
            "work_days_per_week": 5,
            "work_hours_per_day": 8,
            "materials": [{"name": "Luvas", "cost": 2.5}],
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["cost_per_hour"] == 25.0
    assert data["minimum_price"] == 27.5
    assert data["suggested_price"] == pytest.approx(35.75)


def test_price_simulator_requires_cost_basis(client, auth_headers, make_subscription):
    make_subscription()
    response = client.post("/api/tools/price-simulator", json={"service_minutes": 60}, headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["detail"] == "Validation error"


def test_whatsapp_url():
    url = whatsapp_url("5511999999999")
    assert url == "https://wa.me/5511999999999?text=Ol%C3%A1!%20Preciso%20de%20ajuda%20com%20o%20app%20Esttetica."


def test_contact_info():
    info = get_contact_info()
    assert info["email"] == "contato@estettica.com"
    assert info["email_url"] == "mailto:contato@estettica.com"
    assert info["whatsapp_number"] == "5511999999999"


def test_contact_endpoint(client):
    response = client.get("/api/help/contact")
    assert response.status_code == 200
    assert response.json()["whatsapp_url"].startswith("https://wa.me/5511999999999?text=")


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["success"] is True
