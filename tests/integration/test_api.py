"""Integration tests for API endpoints"""

from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient
from installment_ledger.infrastructure.database.models import PurchaseRow


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, seeded):
    """Test Prometheus metrics endpoint"""
    client.get("/v1/summary", params={"month": "2024-03"})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert 'ledger_summary_total{view="summary"}' in response.text


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_summary_endpoint(client: TestClient, seeded):
    """Test GET /v1/summary per-user and per-card figures"""
    response = client.get("/v1/summary", params={"month": "2024-03"})

    assert response.status_code == 200
    data = response.json()
    assert data["month"] == "2024-03"

    users = {u["name"]: u for u in data["users"]}
    assert set(users) == {"Alice", "Bob"}  # Carol is inactive
    assert users["Alice"]["month_total"] == "133.33"
    assert users["Alice"]["total_debt"] == "1066.67"
    assert users["Alice"]["remaining_installments"] == 12
    assert users["Alice"]["total_spending"] == "1300.00"
    assert users["Bob"]["month_total"] == "250.00"
    assert data["user_totals"] == {"month_total": "383.33", "total_debt": "1316.67", "total_spending": "1550.00"}

    cards = {c["name"]: c for c in data["cards"]}
    assert cards["Gold"]["month_total"] == "350.00"
    assert cards["Gold"]["total_debt"] == "1250.00"
    assert cards["Blue"]["month_total"] == "33.33"


def test_summary_card_filter(client: TestClient, seeded):
    response = client.get("/v1/summary", params={"month": "2024-03", "card_id": seeded["blue"]})

    data = response.json()
    assert [u["name"] for u in data["users"]] == ["Alice"]
    assert data["users"][0]["month_total"] == "33.33"


def test_summary_rejects_malformed_month(client: TestClient, seeded):
    response = client.get("/v1/summary", params={"month": "2024-3"})
    assert response.status_code == 422


def test_statement_endpoint(client: TestClient, seeded):
    """Test GET /v1/statement lists every installment due in the month"""
    response = client.get("/v1/statement", params={"month": "2024-03"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == "423.33"
    lines = {l["description"]: l for l in data["lines"]}
    assert lines["Tech Store - Phone"]["installment_number"] == 3
    assert lines["Tech Store - Phone"]["total_installments"] == 12
    assert lines["Shoes"]["amount"] == "33.33"
    assert lines["Market"]["amount"] == "250.00"


def test_statement_user_filter(client: TestClient, seeded):
    response = client.get("/v1/statement", params={"month": "2024-04", "user_id": seeded["alice"]})

    data = response.json()
    assert data["total"] == "133.34"
    assert sorted(l["amount"] for l in data["lines"]) == ["100.00", "33.34"]


def test_user_detail_endpoint(client: TestClient, seeded):
    """Test GET /v1/users/{id}: month residual and debt are reported separately"""
    response = client.get(f"/v1/users/{seeded['alice']}", params={"month": "2024-03"})

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Alice"
    assert data["month_total"] == "133.33"
    assert data["total_debt"] == "1066.67"
    assert data["remaining_installments"] == 12
    assert data["month_paid"] == "150.00"
    assert data["month_residual"] == "-16.67"
    assert len(data["payments"]) == 2
    assert data["net_position"] == {"outstanding_debt": "1066.67", "total_paid": "283.33", "net": "783.34"}
    assert len(data["installments"]) == 2

    progress = {p["purchase_id"]: p for p in data["purchases"]}
    phone = progress[seeded["phone"]]
    assert phone["paid_installments"] == 2
    assert phone["remaining_installments"] == 10
    assert phone["remaining_amount"] == "1000.00"
    assert phone["current_installment"]["installment_number"] == 3


def test_user_detail_settled_month(client: TestClient, seeded):
    """Test a month paid exactly leaves no residual"""
    response = client.get(f"/v1/users/{seeded['alice']}", params={"month": "2024-02"})

    data = response.json()
    assert data["month_total"] == "133.33"
    assert data["month_residual"] == "0.00"


def test_user_detail_unknown_user(client: TestClient, seeded):
    response = client.get("/v1/users/nobody", params={"month": "2024-03"})
    assert response.status_code == 404


def test_user_schedule_endpoint(client: TestClient, seeded):
    """Test GET /v1/users/{id}/schedule month-by-month totals"""
    response = client.get(
        f"/v1/users/{seeded['alice']}/schedule",
        params={"start": "2024-01", "count": 4},
    )

    assert response.status_code == 200
    months = response.json()["months"]
    assert [(m["month"], m["total"], m["line_count"]) for m in months] == [
        ("2024-01", "100.00", 1),
        ("2024-02", "133.33", 2),
        ("2024-03", "133.33", 2),
        ("2024-04", "133.34", 2),
    ]


def test_user_schedule_rejects_bad_input(client: TestClient, seeded):
    url = f"/v1/users/{seeded['alice']}/schedule"

    assert client.get(url, params={"start": "2024-1"}).status_code == 422
    assert client.get(url, params={"count": 0}).status_code == 422


def test_user_schedule_past_calendar_end(client: TestClient, seeded):
    """Test a schedule running beyond year 9999 is rejected, not a server error"""
    response = client.get(f"/v1/users/{seeded['alice']}/schedule", params={"start": "9999-06"})

    assert response.status_code == 422
    assert "out of range" in response.json()["detail"]

    fits = client.get(f"/v1/users/{seeded['alice']}/schedule", params={"start": "9999-06", "count": 7})
    assert fits.status_code == 200
    assert fits.json()["months"][-1]["month"] == "9999-12"


def test_invalid_stored_purchase_is_reported(client: TestClient, db, seeded):
    """Test a corrupt row fails the request instead of skewing totals"""
    db.add(
        PurchaseRow(
            id="corrupt",
            user_id=seeded["bob"],
            total_amount=Decimal("10.00"),
            installment_count=0,
            first_installment_date=date(2024, 3, 1),
        )
    )
    db.commit()

    response = client.get("/v1/statement", params={"month": "2024-03"})

    assert response.status_code == 422
    assert "corrupt" in response.json()["detail"]
