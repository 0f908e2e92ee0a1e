from app.dependencies.services import get_rate_source
from app.main import app
from app.services.exceptions import RateSourceError
from app.services.shipping_service import usps_rate_source

from conftest import FakeRateSource


def rates_body(**overrides):
    body = {
        "originZip": "10001",
        "destinationZip": "94110",
        "items": [{"quantity": 1}],
    }
    body.update(overrides)
    return body


def test_returns_ranked_live_rates(client, rate_source):
    response = client.post("/api/shipping/rates", json=rates_body(items=[{"quantity": 2}]))

    assert response.status_code == 200
    data = response.json()
    assert [r["mailClass"] for r in data["rates"]] == [
        "USPS_GROUND_ADVANTAGE",
        "PRIORITY_MAIL",
        "PRIORITY_MAIL_EXPRESS",
    ]
    assert data["rates"][0]["mailClassName"] == "USPS Ground Advantage"
    assert "error" not in data
    assert set(data["rates"][0]) == {"mailClass", "mailClassName", "price", "deliveryDays", "deliveryDate"}
    assert data["rates"][0]["deliveryDate"] is None
    assert rate_source.calls == [("10001", "94110", 80)]


def test_carrier_failure_still_returns_fallback(client):
    app.dependency_overrides[get_rate_source] = lambda: FakeRateSource(
        error=RateSourceError("USPS unreachable")
    )

    response = client.post("/api/shipping/rates", json=rates_body())

    assert response.status_code == 200
    rates = response.json()["rates"]
    assert [(r["mailClass"], r["price"], r["deliveryDays"]) for r in rates] == [
        ("USPS_GROUND_ADVANTAGE", 11, 5),
        ("PRIORITY_MAIL", 17, 3),
        ("PRIORITY_MAIL_EXPRESS", 28, 1),
    ]


def test_short_zip_is_rejected(client):
    response = client.post("/api/shipping/rates", json=rates_body(destinationZip="941"))

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid shipping request data"}


def test_missing_items_is_rejected(client):
    body = rates_body()
    del body["items"]

    response = client.post("/api/shipping/rates", json=body)

    assert response.status_code == 400


def test_zero_quantity_is_rejected(client):
    response = client.post("/api/shipping/rates", json=rates_body(items=[{"quantity": 0}]))

    assert response.status_code == 400


def test_fallback_rates_keep_nullable_fields(client):
    app.dependency_overrides[get_rate_source] = lambda: FakeRateSource(error=RateSourceError("down"))

    rates = client.post("/api/shipping/rates", json=rates_body()).json()["rates"]

    assert all(rate["deliveryDate"] is None for rate in rates)
    assert all("deliveryDays" in rate for rate in rates)


def test_rate_source_is_shared_between_requests():
    assert get_rate_source() is get_rate_source() is usps_rate_source
