from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from gym_billing.api.deps import get_clock, get_session_factory
from gym_billing.main import create_app

API = "/api/v1"
GYM_ID = 1


@pytest.fixture
def client(session_factory, clock):
    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app, headers={"X-Gym-ID": str(GYM_ID), "X-Permissions": "*"})


def _create_subscription(client, seed, **overrides):
    payload = {
        "member_id": seed.member_id,
        "package_id": seed.basic_package_id,
        "start_date": "2024-03-15",
        "price_paid": "1000.00",
    }
    payload.update(overrides)
    response = client.post(f"{API}/subscriptions", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in response.headers


def test_account_money_travels_as_strings(client):
    response = client.post(
        f"{API}/accounts",
        json={"account_name": "Till", "account_type": "cash", "opening_balance": "250.5", "is_default": True},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["opening_balance"] == "250.50"
    assert body["current_balance"] == "250.50"
    assert body["is_default"] is True


def test_missing_gym_header_is_rejected(client):
    response = client.get(f"{API}/accounts", headers={"X-Gym-ID": ""})

    assert response.status_code == 422


def test_missing_permission_is_forbidden(client):
    response = client.post(
        f"{API}/accounts",
        json={"account_name": "Till", "account_type": "cash"},
        headers={"X-Permissions": "accounts.view"},
    )

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "PERMISSION_DENIED"
    assert error["kind"] == "permission"
    assert error["details"]["permission"] == "accounts.manage"


def test_subscription_payment_flow(client, seed, cash_account):
    created = _create_subscription(client, seed)
    invoice = created["invoice"]
    assert invoice["status"] == "unpaid"
    assert invoice["net_amount"] == "1000.00"
    assert invoice["due_date"] == "2024-03-22"

    paid = client.post(
        f"{API}/invoices/{invoice['id']}/payments",
        json={"account_id": cash_account.id, "amount": "400", "payment_method": "upi"},
    )
    assert paid.status_code == 201
    assert paid.json()["amount"] == "400.00"

    over = client.post(
        f"{API}/invoices/{invoice['id']}/payments",
        json={"account_id": cash_account.id, "amount": "700"},
    )
    assert over.status_code == 422
    assert over.json()["error"]["code"] == "OVERPAYMENT_REJECTED"
    assert over.json()["error"]["details"]["balance_due"] == "600.00"

    settled = client.post(f"{API}/invoices/{invoice['id']}/settle", json={"account_id": cash_account.id})
    assert settled.status_code == 201
    assert settled.json()["amount"] == "600.00"

    fetched = client.get(f"{API}/invoices/{invoice['id']}").json()
    assert fetched["status"] == "paid"
    assert fetched["balance_due"] == "0.00"

    account = client.get(f"{API}/accounts/{cash_account.id}").json()
    assert account["current_balance"] == "1500.00"

    ledger = client.get(f"{API}/accounts/{cash_account.id}/ledger", params={"reference_type": "fee"}).json()
    assert ledger["meta"]["total_items"] == 2


def test_delete_payment_returns_invoice(client, seed, cash_account):
    invoice = _create_subscription(client, seed)["invoice"]
    txn = client.post(
        f"{API}/invoices/{invoice['id']}/payments",
        json={"account_id": cash_account.id, "amount": "1000"},
    ).json()

    response = client.delete(f"{API}/payments/{txn['id']}")

    assert response.status_code == 200
    assert response.json()["status"] == "unpaid"
    assert client.get(f"{API}/accounts/{cash_account.id}/verify").json()["matches"] is True


def test_cancel_subscription_with_invoice(client, seed):
    created = _create_subscription(client, seed)

    response = client.post(
        f"{API}/subscriptions/{created['subscription']['id']}/cancel",
        json={"cancel_invoice": True},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert client.get(f"{API}/invoices/{created['invoice']['id']}").json()["status"] == "cancelled"


def test_unknown_invoice_is_404(client):
    response = client.get(f"{API}/invoices/999")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "INVOICE_NOT_FOUND"
    assert error["kind"] == "not_found"


def test_other_gym_sees_nothing(client, seed):
    invoice = _create_subscription(client, seed)["invoice"]

    response = client.get(f"{API}/invoices/{invoice['id']}", headers={"X-Gym-ID": "2"})

    assert response.status_code == 404


def test_salary_slip_flow(client, seed, bank_account):
    config = client.post(
        f"{API}/trainers/{seed.trainer_id}/salary-config",
        json={"base_salary": "5000", "per_member_incentive": "250", "effective_from": "2024-01-01"},
    )
    assert config.status_code == 201
    _create_subscription(
        client,
        seed,
        package_id=seed.package_id,
        price_paid="1500",
        trainer_id=seed.trainer_id,
        trainer_addon_price="500",
    )

    count = client.get(
        f"{API}/trainers/{seed.trainer_id}/active-members", params={"month": 3, "year": 2024}
    ).json()
    assert count["active_member_count"] == 1

    generated = client.post(
        f"{API}/salary-slips/generate", json={"trainer_id": seed.trainer_id, "month": 3, "year": 2024}
    )
    assert generated.status_code == 201
    slip = generated.json()
    assert slip["gross_salary"] == "5250.00"
    assert slip["payment_status"] == "unpaid"

    duplicate = client.post(
        f"{API}/salary-slips/generate", json={"trainer_id": seed.trainer_id, "month": 3, "year": 2024}
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "SLIP_ALREADY_EXISTS"
    assert duplicate.json()["error"]["kind"] == "state_conflict"

    paid = client.post(f"{API}/salary-slips/{slip['id']}/mark-paid", json={"account_id": bank_account.id})
    assert paid.status_code == 200
    assert paid.json()["payment_status"] == "paid"

    again = client.post(f"{API}/salary-slips/{slip['id']}/mark-paid", json={"account_id": bank_account.id})
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_PAID"

    summary = client.get(f"{API}/salary-slips/summary", params={"month": 3, "year": 2024}).json()
    assert summary == {
        "total_salary_payout": "5250.00",
        "total_incentives": "250.00",
        "total_base_salary": "5000.00",
        "slip_count": 1,
    }


def test_generate_for_all_over_http(client, seed):
    client.post(
        f"{API}/trainers/{seed.trainer_id}/salary-config",
        json={"base_salary": "5000", "per_member_incentive": "0", "effective_from": "2024-01-01"},
    )

    response = client.post(f"{API}/salary-slips/generate-all", json={"month": 3, "year": 2024})

    assert response.status_code == 200
    body = response.json()
    assert len(body["generated"]) == 1
    assert body["skipped_no_config"] == [seed.trainer2_id]


def test_invalid_period_is_422(client, seed):
    response = client.get(
        f"{API}/trainers/{seed.trainer_id}/active-members", params={"month": 13, "year": 2024}
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_PERIOD"


def test_gym_settings_drive_due_dates(client, seed):
    updated = client.patch(f"{API}/settings", json={"invoice_overdue_in_days": 10})
    assert updated.status_code == 200
    assert updated.json()["invoice_overdue_in_days"] == 10

    invoice = _create_subscription(client, seed)["invoice"]

    assert invoice["due_date"] == "2024-03-25"


def test_invalid_timezone_is_rejected(client):
    response = client.patch(f"{API}/settings", json={"timezone": "Mars/Olympus"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get(f"{API}/settings").json()["timezone"] == "UTC"


def test_expense_delete_returns_no_content(client, cash_account, utilities):
    created = client.post(
        f"{API}/expenses",
        json={
            "account_id": cash_account.id,
            "category_id": utilities.id,
            "amount": "120.00",
            "expense_date": "2024-03-15",
        },
    )
    assert created.status_code == 201

    response = client.delete(f"{API}/expenses/{created.json()['id']}")

    assert response.status_code == 204
    assert client.get(f"{API}/accounts/{cash_account.id}").json()["current_balance"] == str(Decimal("500.00"))


def test_expense_category_lifecycle(client):
    created = client.post(f"{API}/expense-categories", json={"name": "Repairs"})
    assert created.status_code == 201
    category_id = created.json()["id"]

    duplicate = client.post(f"{API}/expense-categories", json={"name": "repairs"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "EXPENSE_CATEGORY_EXISTS"

    client.patch(f"{API}/expense-categories/{category_id}", json={"is_active": False})
    assert client.get(f"{API}/expense-categories/active").json() == []
    assert len(client.get(f"{API}/expense-categories").json()) == 1

    assert client.delete(f"{API}/expense-categories/{category_id}").status_code == 204
    assert client.get(f"{API}/expense-categories/{category_id}").status_code == 404


def test_expense_edit_and_report(client, cash_account, utilities):
    created = client.post(
        f"{API}/expenses",
        json={"account_id": cash_account.id, "category_id": utilities.id, "amount": "100.00"},
    ).json()

    edited = client.patch(f"{API}/expenses/{created['id']}", json={"amount": "150.00"})

    assert edited.status_code == 200
    assert edited.json()["amount"] == "150.00"
    assert client.get(f"{API}/accounts/{cash_account.id}").json()["current_balance"] == "350.00"

    report = client.get(f"{API}/expenses/report").json()
    assert [(r["category_name"], r["total_amount"], r["expense_count"]) for r in report] == [
        ("Utilities", "150.00", 1)
    ]


def test_future_dated_expense_is_unprocessable(client, cash_account, utilities):
    response = client.post(
        f"{API}/expenses",
        json={
            "account_id": cash_account.id,
            "category_id": utilities.id,
            "amount": "10.00",
            "expense_date": "2024-03-20",
        },
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_POSTING_DATE"
