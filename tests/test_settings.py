def test_defaults_before_first_save(client):
    body = client.get("/settings/").json()

    assert body["configured"] is False
    assert body["boutique_name"] == "Allure Boutique"
    assert body["order_prefix"] == "ALR"
    assert body["reminder_days"] == 2
    assert body["measurement_unit"] == "inches"


def test_save_and_overwrite(client):
    resp = client.put(
        "/settings/",
        json={"boutique_name": "Mira Couture", "phone": "080 4000 1234", "measurement_unit": "cm"},
    )

    assert resp.status_code == 200
    assert resp.json()["configured"] is True
    assert resp.json()["boutique_name"] == "Mira Couture"
    assert resp.json()["measurement_unit"] == "cm"

    resp = client.put("/settings/", json={"boutique_name": "Mira Couture", "phone": "  "})
    assert resp.json()["phone"] is None
    assert resp.json()["measurement_unit"] == "inches"

    assert client.get("/settings/").json()["boutique_name"] == "Mira Couture"


def test_blank_prefix_and_reminder_days_fall_back(client):
    body = client.put(
        "/settings/",
        json={"boutique_name": "Mira", "order_prefix": "", "reminder_days": 0},
    ).json()

    assert body["order_prefix"] == "ALR"
    assert body["reminder_days"] == 2


def test_invalid_settings(client):
    assert client.put("/settings/", json={"boutique_name": ""}).status_code == 422
    assert client.put("/settings/", json={"measurement_unit": "feet"}).status_code == 422


def test_prefix_used_for_new_orders(client, make_order):
    make_order()
    client.put("/settings/", json={"boutique_name": "Mira", "order_prefix": "MC"})

    assert make_order()["order_number"] == "MC-0002"
