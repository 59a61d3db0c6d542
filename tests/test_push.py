import json

from sqlalchemy import select

from boutique.db.schema import push_subscriptions
from boutique.services.push import PushResult


def _subscription(endpoint, p256dh="key-1", auth="auth-1"):
    return {"endpoint": endpoint, "keys": {"p256dh": p256dh, "auth": auth}}


def _stored(engine):
    with engine.connect() as conn:
        return conn.execute(
            select(push_subscriptions).order_by(push_subscriptions.c.id)
        ).mappings().all()


def test_subscribe_twice_keeps_one_record(client, engine):
    endpoint = "https://push.example.com/abc"

    assert client.post("/api/push/subscribe", json=_subscription(endpoint)).json() == {"success": True}
    client.post("/api/push/subscribe", json=_subscription(endpoint, p256dh="key-2", auth="auth-2"))

    rows = _stored(engine)
    assert len(rows) == 1
    assert rows[0]["keys_p256dh"] == "key-2"
    assert rows[0]["keys_auth"] == "auth-2"


def test_subscribe_validation(client):
    assert client.post("/api/push/subscribe", json={"endpoint": "https://x"}).status_code == 400
    assert client.post("/api/push/subscribe").status_code == 400
    resp = client.post("/api/push/subscribe", json=_subscription("https://x", p256dh=""))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid subscription"


def test_unsubscribe(client, engine):
    client.post("/api/push/subscribe", json=_subscription("https://push.example.com/1"))
    client.post("/api/push/subscribe", json=_subscription("https://push.example.com/2"))

    resp = client.request("DELETE", "/api/push/subscribe", json={"endpoint": "https://push.example.com/1"})

    assert resp.status_code == 200
    assert [r["endpoint"] for r in _stored(engine)] == ["https://push.example.com/2"]

    # unknown endpoints are not an error
    resp = client.request("DELETE", "/api/push/subscribe", json={"endpoint": "https://gone"})
    assert resp.status_code == 200

    resp = client.request("DELETE", "/api/push/subscribe", json={})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing endpoint"


def test_send_fans_out_and_prunes_expired(client, engine, sender):
    endpoints = [f"https://push.example.com/{n}" for n in (1, 2, 3)]
    for endpoint in endpoints:
        client.post("/api/push/subscribe", json=_subscription(endpoint))
    sender.outcomes[endpoints[1]] = PushResult(success=False, expired=True)

    resp = client.post("/api/push/send", json={"title": "Order ready", "body": "ALR-0001 is ready"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "sent": 2, "total": 3}
    assert [r["endpoint"] for r in _stored(engine)] == [endpoints[0], endpoints[2]]

    delivered = json.loads(sender.calls[0][1])
    assert delivered == {"title": "Order ready", "body": "ALR-0001 is ready", "actions": []}


def test_send_survives_a_crashing_endpoint(client, engine, sender):
    for n in (1, 2):
        client.post("/api/push/subscribe", json=_subscription(f"https://push.example.com/{n}"))
    sender.outcomes["https://push.example.com/1"] = RuntimeError("network down")

    resp = client.post("/api/push/send", json={"title": "Hello"})

    assert resp.json() == {"success": True, "sent": 1, "total": 2}
    # failed but not expired: still subscribed
    assert len(_stored(engine)) == 2


def test_send_without_subscriptions(client):
    resp = client.post("/api/push/send", json={"title": "Hello"})

    assert resp.status_code == 404
    assert resp.json()["detail"] == "No subscriptions found"


def test_send_requires_title(client):
    client.post("/api/push/subscribe", json=_subscription("https://push.example.com/1"))

    resp = client.post("/api/push/send", json={"body": "no title"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing title"


def test_push_requires_token(anon_client):
    assert anon_client.post("/api/push/subscribe", json=_subscription("https://x")).status_code == 401
    assert anon_client.post("/api/push/send", json={"title": "Hello"}).status_code == 401


def test_vapid_public_key_is_public(anon_client):
    resp = anon_client.get("/api/push/vapid-public-key")

    assert resp.status_code == 200
    assert "public_key" in resp.json()


def test_non_json_body_is_400(client):
    headers = {"Content-Type": "application/json"}

    for method, url in (
        ("POST", "/api/push/subscribe"),
        ("DELETE", "/api/push/subscribe"),
        ("POST", "/api/push/send"),
    ):
        resp = client.request(method, url, content="{not json", headers=headers)
        assert resp.status_code == 400, (method, url)
        assert resp.json() == {"detail": "Malformed request body"}


def test_other_routes_keep_422(client):
    resp = client.post("/customers/", content="{not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 422
