import pytest
from fastapi.testclient import TestClient

from conftest import FakeLandmarkQuery, FakeQuoter
from ilp_price.main import create_app
from ilp_price.services.price import PriceEngine


@pytest.fixture
def client(transport, ildcp, landmark_query, quoter, settings):
    engine = PriceEngine(
        transport,
        {"test.": {"USD": ["$localhost"]}},
        settings=settings,
        ildcp=ildcp,
        landmark_query=landmark_query,
        quoter=quoter,
    )
    return TestClient(create_app(engine, settings_override=settings))


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["version"] == "0.1.0"


def test_price_for_foreign_currency(client):
    resp = client.get("/price/USD", params={"amount": "1"})
    assert resp.status_code == 200
    assert resp.json() == {
        "currency": "USD",
        "amount": "1",
        "native_amount": "1250000000",
    }
    assert resp.headers["x-request-id"]


def test_price_for_native_currency(client, landmark_query):
    resp = client.get("/price/XRP", params={"amount": "0.5"})
    assert resp.json()["native_amount"] == "500000000"
    assert landmark_query.calls == []


def test_bad_amount(client):
    resp = client.get("/price/USD", params={"amount": "lots"})
    assert resp.status_code == 400


def test_unknown_currency_is_not_found(client):
    resp = client.get("/price/EUR")
    assert resp.status_code == 404
    assert resp.json()["error"] == "no_landmarks"


def test_exhausted_landmarks_is_bad_gateway(transport, ildcp, settings):
    engine = PriceEngine(
        transport,
        {"test.": {"USD": ["$a.example"]}},
        settings=settings,
        ildcp=ildcp,
        landmark_query=FakeLandmarkQuery(default=ConnectionError("refused")),
        quoter=FakeQuoter(),
    )
    client = TestClient(create_app(engine, settings_override=settings))
    resp = client.get("/price/USD")
    assert resp.status_code == 502
    assert resp.json()["error"] == "all_landmarks_failed"


def test_request_id_is_echoed(client):
    resp = client.get("/", headers={"x-request-id": "abc-123"})
    assert resp.headers["x-request-id"] == "abc-123"


def test_landmarks_listing(client):
    body = client.get("/landmarks").json()
    assert body["sources"] == ["defaults", "constructor"]
    assert body["landmarks"]["test."] == {"USD": ["$localhost"]}
    assert "g." in body["landmarks"]
