import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from backend.app import crud


TXN = {
    "amount": 25.75,
    "date": "2024-04-10T09:30:00",
    "description": "Weekly shop",
    "category": "Groceries",
    "type": "expense",
}


def test_root(client: TestClient):
    r = client.get("/")
    assert r.status_code == 200
    assert "running" in r.json()["message"]
    assert r.headers.get("X-Request-ID")


def test_transaction_lifecycle(client: TestClient):
    r = client.post("/transactions", json=TXN)
    assert r.status_code == 201, r.text
    created = r.json()
    assert isinstance(created["id"], int)
    for key in ("amount", "description", "category", "type"):
        assert created[key] == TXN[key]
    assert created["date"].startswith("2024-04-10T09:30:00")

    listing = client.get("/transactions").json()
    assert [t["id"] for t in listing] == [created["id"]]

    updated = dict(TXN, amount=30, description="Big shop")
    r = client.put(f"/transactions/{created['id']}", json=updated)
    assert r.status_code == 200, r.text
    assert r.json()["amount"] == 30 and r.json()["description"] == "Big shop"

    r = client.delete(f"/transactions/{created['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "Transaction deleted successfully"}

    r = client.delete(f"/transactions/{created['id']}")
    assert r.status_code == 404
    assert r.json() == {"error": "Transaction not found"}


def test_transactions_sorted_newest_first(client: TestClient):
    for day in ("2024-01-03", "2024-03-01", "2024-02-11"):
        client.post("/transactions", json=dict(TXN, date=f"{day}T00:00:00", description=day))
    dates = [t["description"] for t in client.get("/transactions").json()]
    assert dates == ["2024-03-01", "2024-02-11", "2024-01-03"]


def test_timezone_aware_dates_are_stored_as_utc(client: TestClient):
    r = client.post("/transactions", json=dict(TXN, date="2024-04-30T23:30:00-02:00"))
    assert r.status_code == 201
    assert r.json()["date"].startswith("2024-05-01T01:30:00")


@pytest.mark.parametrize(
    "override,field",
    [
        ({"amount": 0}, "amount"),
        ({"amount": -5}, "amount"),
        ({"description": "   "}, "description"),
        ({"category": ""}, "category"),
        ({"type": "transfer"}, "type"),
        ({"date": None}, "date"),
    ],
)
def test_create_transaction_validation(client: TestClient, override, field):
    r = client.post("/transactions", json=dict(TXN, **override))
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation failed"
    assert any(d["field"] == field for d in body["details"])
    assert client.get("/transactions").json() == []


def test_update_missing_and_invalid(client: TestClient):
    r = client.put("/transactions/9999", json=TXN)
    assert r.status_code == 404
    assert r.json()["error"] == "Transaction not found"

    created = client.post("/transactions", json=TXN).json()
    r = client.put(f"/transactions/{created['id']}", json=dict(TXN, amount=0))
    assert r.status_code == 400
    assert client.get("/transactions").json()[0]["amount"] == TXN["amount"]


def test_budget_upsert_via_api(client: TestClient):
    r1 = client.post("/budgets", json={"category": "Housing", "amount": 1200, "month": "2024-04"})
    r2 = client.post("/budgets", json={"category": "Housing", "amount": 1300, "month": "2024-04"})
    assert r1.status_code == 201 and r2.status_code == 201
    assert r1.json()["id"] == r2.json()["id"]

    client.post("/budgets", json={"category": "Housing", "amount": 900, "month": "2024-05"})
    april = client.get("/budgets", params={"month": "2024-04"}).json()
    assert len(april) == 1 and april[0]["amount"] == 1300
    assert len(client.get("/budgets").json()) == 2


@pytest.mark.parametrize(
    "payload",
    [
        {"category": "Housing", "amount": -1, "month": "2024-04"},
        {"category": "", "amount": 10, "month": "2024-04"},
        {"category": "Housing", "amount": 10, "month": "2024-4"},
        {"category": "Housing", "amount": 10, "month": "2024-13"},
        {"category": "Housing", "amount": 10},
    ],
)
def test_budget_validation(client: TestClient, payload):
    r = client.post("/budgets", json=payload)
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_budget_bad_month_filter(client: TestClient):
    assert client.get("/budgets", params={"month": "April"}).status_code == 400


def test_budget_delete(client: TestClient):
    b = client.post("/budgets", json={"category": "Travel", "amount": 50, "month": "2024-04"}).json()
    assert client.delete(f"/budgets/{b['id']}").status_code == 200
    r = client.delete(f"/budgets/{b['id']}")
    assert r.status_code == 404
    assert r.json() == {"error": "Budget not found"}


def test_categories(client: TestClient):
    expense = client.get("/categories", params={"type": "expense"}).json()
    income = client.get("/categories", params={"type": "income"}).json()
    assert "Groceries" in expense and "Salary" in income
    assert client.get("/categories").json() == {"expense": expense, "income": income}

    r = client.post("/categories", json={"name": "Pets", "type": "expense"})
    assert r.status_code == 201
    assert r.json() == {"message": "Category added successfully", "category": "Pets"}
    assert "Pets" in client.get("/categories", params={"type": "expense"}).json()

    r = client.post("/categories", json={"name": "Pets", "type": "savings"})
    assert r.status_code == 400


def test_database_failure_returns_500(client: TestClient, monkeypatch):
    def boom(db):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(crud, "list_transactions", boom)
    r = client.get("/transactions")
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Database error"
    assert "database is locked" in body["details"]


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_amounts_rejected(client: TestClient, literal):
    txn = (
        '{"amount": %s, "date": "2024-04-10T09:30:00", "description": "x", '
        '"category": "Groceries", "type": "expense"}' % literal
    )
    r = client.post("/transactions", content=txn, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert any(d["field"] == "amount" for d in r.json()["details"])

    budget = '{"category": "Groceries", "amount": %s, "month": "2024-04"}' % literal
    r = client.post("/budgets", content=budget, headers={"Content-Type": "application/json"})
    assert r.status_code == 400

    assert client.get("/transactions").json() == []
    assert client.get("/budgets").json() == []


def test_request_id_is_echoed(client: TestClient):
    r = client.get("/", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"
