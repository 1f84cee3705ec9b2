import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fastapi.testclient import TestClient

from landscape_calculator.api.main import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


def test_status(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_config(client):
    data = client.get("/config").json()

    assert data["size"]["min"] == 100
    assert data["size"]["max"] == 35000
    assert data["pricing"]["surcharge_multiplier"] == 1.96
    assert data["pricing"]["day_policy"] == "per_unit"


def test_features(client):
    features = client.get("/features").json()["features"]

    assert len(features) == 13
    assert features[0]["key"] == "custom_caves"


def test_quote_defaults(client):
    response = client.post("/quote", json={"width": 1000, "length": 1000})
    assert response.status_code == 200

    result = response.json()["result"]
    assert result["area"] == 1_000_000
    assert result["base_price"] == 30
    assert result["recommended_days"] == 5
    assert result["total_price"] == 30
    assert result["total_days"] == 5
    assert result["valid"] is True


def test_quote_with_features(client):
    response = client.post("/quote", json={
        "width": 1000,
        "length": 1000,
        "features": {"villages": {"enabled": True, "quantity": 1}},
    })
    result = response.json()["result"]

    assert result["total_price"] == 70
    assert result["total_days"] == 7
    assert result["feature_lines"][0]["key"] == "villages"


def test_quote_clamps_size(client):
    data = client.post("/quote", json={"width": 5, "length": 90000}).json()

    assert data["width"] == 100
    assert data["length"] == 35000
    assert data["result"]["valid"] is True


def test_disabled_selection_is_ignored(client):
    result = client.post("/quote", json={
        "width": 1000,
        "length": 1000,
        "features": {"custom_caves": {"enabled": False, "quantity": 4}},
    }).json()["result"]

    assert result["total_price"] == 30


def test_unknown_feature(client):
    response = client.post("/quote", json={"width": 1000, "length": 1000, "features": {"dragons": {}}})
    assert response.status_code == 400


def test_rename_rules(client):
    custom = client.post("/quote", json={
        "width": 1000,
        "length": 1000,
        "features": {"custom_feature": {"name": "Pirate Cove", "price_per_unit": 15}},
    })
    assert custom.status_code == 200
    assert custom.json()["result"]["feature_lines"][0]["name"] == "Pirate Cove"
    assert custom.json()["result"]["total_price"] == 45

    other = client.post("/quote", json={
        "width": 1000,
        "length": 1000,
        "features": {"villages": {"name": "Towns"}},
    })
    assert other.status_code == 400


def test_invalid_body(client):
    response = client.post("/quote", json={"width": 1000})
    assert response.status_code == 422


def test_orders_are_numbered(client):
    body = {"width": 1000, "length": 1000, "features": {"villages": {}}}

    first = client.post("/orders", json=body).json()
    second = client.post("/orders", json=body).json()

    assert second["order_number"] == first["order_number"] + 1
    assert "Total Price: $70" in first["summary"]
    assert first["summary"].startswith(f"=== Minecraft Map Order {first['order_id']} ===")
