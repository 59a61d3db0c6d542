import base64
import threading
from datetime import date

import pytest
from fastapi.testclient import TestClient

from boutique.api.deps import get_today
from boutique.db.engine import get_engine, make_engine
from boutique.db.schema import metadata
from boutique.errors import StorageError
from boutique.main import app
from boutique.services.push import PushResult, get_push_sender
from boutique.services.storage import get_storage
from scripts.create_user import create_user

TODAY = date(2025, 3, 10)


class FakeStorage:
    """In-memory stand-in for S3Storage. Uploads whose bytes are in fail_on raise."""

    def __init__(self):
        self.objects = {}
        self.fail_on = set()

    def upload(self, path, data, content_type=None):
        if data in self.fail_on:
            raise StorageError(f"Upload of {path} failed: simulated outage")
        self.objects[path] = (data, content_type)
        return path

    def get_public_url(self, path, width=None, height=None, quality=None):
        url = f"https://cdn.test/design-references/{path}"
        if width:
            url += f"?width={width}&height={height}"
        return url


class FakeSender:
    """Records deliveries; outcomes per endpoint default to success."""

    def __init__(self):
        self.outcomes = {}
        self.calls = []
        self._lock = threading.Lock()

    def send(self, subscription_info, data):
        with self._lock:
            self.calls.append((subscription_info, data))
        outcome = self.outcomes.get(subscription_info["endpoint"], PushResult(success=True))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'boutique.sqlite'}")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def api_token(engine):
    return create_user(engine, "owner@allure-boutique.com")


@pytest.fixture
def anon_client(engine, storage, sender):
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_push_sender] = lambda: sender
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def client(anon_client, api_token):
    anon_client.headers["Authorization"] = f"Bearer {api_token}"
    return anon_client


@pytest.fixture
def customer(client):
    resp = client.post(
        "/customers/",
        json={"full_name": "Meera Nair", "phone": "+91 98765 43210", "bust": 34, "waist": 28},
    )
    assert resp.status_code == 201
    return resp.json()


def order_payload(customer_id, **overrides):
    payload = {
        "customer_id": customer_id,
        "delivery_date": "2025-03-20",
        "advance_paid": "1000",
        "items": [
            {
                "garment_type": "blouse",
                "description": "Boat neck, elbow sleeves",
                "measurements": {"bust": "34", "blouse_length": "14.5", "front_opening_style": "Back"},
                "quantity": 1,
                "price": "2500",
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_order(client, customer):
    def _make(**overrides):
        resp = client.post("/orders/", json=order_payload(customer["id"], **overrides))
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
