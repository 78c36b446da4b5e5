from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)

snapshot = {
    "now": "2024-01-31T12:00:00",
    "transactions": [
        {"id": "t1", "type": "income", "amount": 3000, "category": "Salary", "date": "2024-01-15"},
        {"id": "t2", "type": "expense", "amount": 1000, "category": "Food", "date": "2024-01-20"},
    ],
    "budgets": [
        {"id": "b1", "category_id": "Food", "amount": 1000, "start_date": "2024-01-01", "end_date": "2024-01-31"},
    ],
    "goals": [
        {"id": "g1", "title": "Trip", "target_amount": 2000, "current_amount": 500, "target_date": "2024-06-30"},
    ],
}


def test_health_endpoint():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_trends_endpoint():
    response = client.post("/api/analytics/trends", json=snapshot)
    assert response.status_code == 200
    points = response.json()
    assert len(points) == 12
    assert points[-1] == {"date": "2024-01", "income": 3000.0, "expenses": 1000.0, "net": 2000.0}


def test_budgets_endpoint():
    response = client.post("/api/analytics/budgets", json=snapshot)
    assert response.status_code == 200
    (budget,) = response.json()["budgets"]
    assert budget["percentage_used"] == 100
    assert budget["status"] == "near"
    assert response.json()["alerts"] == ["b1"]


def test_health_score_endpoint():
    response = client.post("/api/analytics/health-score", json=snapshot)
    assert response.status_code == 200
    body = response.json()
    assert body["category"] in {"excellent", "good", "fair", "poor"}
    assert body["factors"]["goal_progress"]["score"] == 25


def test_invalid_record_returns_422_naming_the_field():
    bad = dict(snapshot, transactions=[{"id": "t9", "type": "expense", "amount": "abc", "category": "Food", "date": "2024-01-02"}])
    response = client.post("/api/analytics/trends", json=bad)
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["record_id"] == "t9"
    assert error["field"] == "amount"


def test_boolean_amount_returns_422():
    bad = dict(snapshot, transactions=[{"id": "t9", "type": "income", "amount": True, "category": "Salary", "date": "2024-01-02"}])
    response = client.post("/api/analytics/trends", json=bad)
    assert response.status_code == 422
    assert response.json()["error"]["field"] == "amount"
