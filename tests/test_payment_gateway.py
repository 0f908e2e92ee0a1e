import pytest
import stripe

from app.services.exceptions import PaymentProviderError
from app.services.payment_service import PaymentGateway, build_intent_metadata
from app.services.pricing_service import PricedLine, PricingResult
from app.schemas.shipping_schemas import ShippingRate


def test_amount_is_sent_in_cents(monkeypatch):
    captured = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return {"id": "pi_123", "client_secret": "pi_123_secret", "status": "requires_payment_method"}

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

    intent = PaymentGateway("sk_test_abc", "usd").create_payment_intent(236, {"total": "236"})

    assert captured["amount"] == 23600
    assert captured["currency"] == "usd"
    assert captured["payment_method_types"] == ["card"]
    assert captured["metadata"] == {"total": "236"}
    assert captured["api_key"] == "sk_test_abc"
    assert intent.id == "pi_123"
    assert intent.client_secret == "pi_123_secret"
    assert intent.amount == 236


def test_stripe_errors_are_wrapped(monkeypatch):
    def fake_create(**kwargs):
        raise stripe.APIConnectionError("connection refused")

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

    with pytest.raises(PaymentProviderError):
        PaymentGateway("sk_test_abc").create_payment_intent(10, {})


def test_retrieve_converts_cents(monkeypatch):
    def fake_retrieve(payment_intent_id, **kwargs):
        return {"id": payment_intent_id, "client_secret": "s", "amount": 23600, "status": "succeeded"}

    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", fake_retrieve)

    intent = PaymentGateway("sk_test_abc").retrieve_payment_intent("pi_9")

    assert intent.amount == 236
    assert intent.status == "succeeded"


def test_intent_metadata_snapshot():
    pricing = PricingResult(
        lines=[PricedLine("art-1", "Low Tide", 100, 2)],
        rate=ShippingRate(mail_class="PRIORITY_MAIL", mail_class_name="Priority Mail", price=30),
        subtotal=200,
        shipping=30,
        tax=16,
        total=246,
    )

    assert build_intent_metadata(pricing, None) == {
        "customerId": "",
        "items": '[{"id":"art-1","qty":2}]',
        "subtotal": "200",
        "shipping": "30",
        "shippingMethod": "Priority Mail",
        "tax": "16",
        "total": "246",
    }
