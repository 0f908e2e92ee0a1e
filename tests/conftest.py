"""Pytest fixtures for the StudioDrop API tests."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["ENV"] = "test"

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

import app.models  # noqa: E402,F401
from app.database import get_session  # noqa: E402
from app.dependencies.services import get_payment_gateway, get_rate_source  # noqa: E402
from app.main import app  # noqa: E402
from app.models.artwork import Artwork  # noqa: E402
from app.models.customer import Customer  # noqa: E402
from app.models.drop import Drop  # noqa: E402
from app.schemas.shipping_schemas import ShippingRate  # noqa: E402
from app.services.exceptions import PaymentProviderError, RateSourceError  # noqa: E402
from app.services.payment_service import PaymentGateway, PaymentIntentResult  # noqa: E402
from app.services.shipping_service import RateSource  # noqa: E402


class FakeRateSource(RateSource):
    """Rate source returning canned rates, or failing when ``error`` is set."""

    def __init__(self, rates=None, error=None):
        self.rates = rates or []
        self.error = error
        self.calls = []

    def fetch_rates(self, origin_zip, destination_zip, weight_ounces):
        self.calls.append((origin_zip, destination_zip, weight_ounces))
        if self.error:
            raise self.error
        return list(self.rates)


class FakeGateway(PaymentGateway):
    """Records intents instead of calling Stripe."""

    def __init__(self, fail=False, status="succeeded"):
        super().__init__(secret_key="sk_test_fake")
        self.fail = fail
        self.status = status
        self.created = []
        self.intents = {}

    def create_payment_intent(self, amount, metadata):
        if self.fail:
            raise PaymentProviderError("Failed to create payment intent")
        intent = PaymentIntentResult(
            id=f"pi_test_{len(self.created) + 1}",
            client_secret=f"pi_test_{len(self.created) + 1}_secret",
            amount=amount,
            status="requires_payment_method",
        )
        self.created.append({"amount": amount, "metadata": metadata})
        self.intents[intent.id] = intent
        return intent

    def retrieve_payment_intent(self, payment_intent_id):
        intent = self.intents.get(payment_intent_id)
        if not intent:
            raise PaymentProviderError("Failed to retrieve payment intent")
        return PaymentIntentResult(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            status=self.status,
        )


def usps_rates():
    return [
        ShippingRate(mail_class="PRIORITY_MAIL", mail_class_name="Priority Mail", price=35, delivery_days=3),
        ShippingRate(mail_class="USPS_GROUND_ADVANTAGE", mail_class_name="USPS Ground Advantage", price=20, delivery_days=5),
        ShippingRate(mail_class="PRIORITY_MAIL_EXPRESS", mail_class_name="Priority Mail Express", price=60, delivery_days=1),
    ]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def rate_source():
    return FakeRateSource(rates=usps_rates())


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(session, rate_source, gateway):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_rate_source] = lambda: rate_source
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_artwork(session):
    def _make(**kwargs):
        fields = {"title": "Untitled", "price": 100, "type": "original"}
        fields.update(kwargs)
        artwork = Artwork(**fields)
        session.add(artwork)
        session.commit()
        session.refresh(artwork)
        return artwork
    return _make


@pytest.fixture
def make_customer(session):
    def _make(**kwargs):
        fields = {"name": "Ada Shopper", "email": "ada@example.com"}
        fields.update(kwargs)
        customer = Customer(**fields)
        session.add(customer)
        session.commit()
        session.refresh(customer)
        return customer
    return _make


def schedule(start, end=None):
    """Drop date/time fields for the given local datetimes."""
    fields = {
        "start_date": start.strftime("%Y-%m-%d"),
        "start_time": start.strftime("%H:%M"),
        "has_end_date": end is not None,
    }
    if end is not None:
        fields["end_date"] = end.strftime("%Y-%m-%d")
        fields["end_time"] = end.strftime("%H:%M")
    return fields


@pytest.fixture
def make_drop(session):
    def _make(start=None, end=None, **kwargs):
        start = start or datetime.now() - timedelta(days=1)
        fields = {"title": "Spring Drop", **schedule(start, end)}
        fields.update(kwargs)
        drop = Drop(**fields)
        session.add(drop)
        session.commit()
        session.refresh(drop)
        return drop
    return _make
