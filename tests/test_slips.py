from decimal import Decimal
from urllib.parse import unquote

from boutique.models.settings import MeasurementUnit
from boutique.services.slips import format_inr, format_measurement, rupees


def test_format_inr_uses_indian_grouping():
    assert format_inr(0) == "0"
    assert format_inr(999) == "999"
    assert format_inr(1000) == "1,000"
    assert format_inr(150000) == "1,50,000"
    assert format_inr(12345678) == "1,23,45,678"
    assert format_inr(1234.5) == "1,234.5"
    assert format_inr(Decimal("3000.00")) == "3,000"
    assert rupees(Decimal("2500")) == "₹2,500"


def test_format_measurement():
    assert format_measurement(32, MeasurementUnit.inches) == '32"'
    assert format_measurement(14.5, MeasurementUnit.cm) == "14.5 cm"
    assert format_measurement("Back", MeasurementUnit.inches) == "Back"


def test_order_slip(client, make_order):
    order = make_order(notes="Urgent: wedding on the 22nd")

    resp = client.get(f"/orders/{order['id']}/slip")

    assert resp.status_code == 200
    slip = resp.json()
    assert slip["header"]["boutique_name"] == "Allure Boutique"
    assert slip["order_number"] == "ALR-0001"
    assert slip["delivery_display"] == "20 Mar 2025"
    assert slip["status_label"] == "Received"
    assert slip["customer"]["full_name"] == "Meera Nair"
    assert slip["notes"] == "Urgent: wedding on the 22nd"
    assert slip["footer"] == "Thank you for choosing us!"

    item = slip["items"][0]
    assert item["position"] == 1
    assert item["garment_label"] == "Blouse"
    assert item["price_display"] == "₹2,500"
    assert item["image_count"] == 0
    assert [(m["label"], m["value"]) for m in item["measurements"]] == [
        ("Bust / Chest", '34"'),
        ("Blouse Length", '14.5"'),
        ("Front Opening Style", "Back"),
    ]

    payment = slip["payment"]
    assert payment["total_display"] == "₹2,500"
    assert payment["advance_display"] == "₹1,000"
    assert payment["balance_display"] == "₹1,500"


def test_slip_follows_settings(client, make_order):
    client.put(
        "/settings/",
        json={
            "boutique_name": "Mira Couture",
            "measurement_unit": "cm",
            "pdf_footer_text": "Alterations free within 7 days",
        },
    )
    order = make_order(items=[{"price": "1200", "quantity": 3, "measurements": {"waist": 70}}])

    slip = client.get(f"/orders/{order['id']}/slip").json()

    assert slip["header"]["boutique_name"] == "Mira Couture"
    assert slip["measurement_unit"] == "cm"
    assert slip["footer"] == "Alterations free within 7 days"
    assert slip["items"][0]["price_display"] == "₹1,200 × 3"
    assert slip["items"][0]["measurements"][0]["value"] == "70 cm"


def test_customer_message(client, make_order):
    order = make_order()

    resp = client.get(f"/orders/{order['id']}/message")

    assert resp.status_code == 200
    body = resp.json()
    assert body["audience"] == "customer"
    assert body["phone"] == "919876543210"
    assert body["text"].startswith("Hello Meera Nair,\n\nYour order ALR-0001 has been confirmed.")
    assert "1. Blouse - Boat neck, elbow sleeves" in body["text"]
    assert "Delivery Date: 20 Mar 2025" in body["text"]
    assert "Balance: ₹1,500" in body["text"]
    assert body["link"].startswith("https://wa.me/919876543210?text=")
    assert unquote(body["link"].split("?text=", 1)[1]) == body["text"]


def test_tailor_message(client, make_order):
    order = make_order(items=[{"garment_type": "gown", "price": "8000"}])

    body = client.get(f"/orders/{order['id']}/message", params={"audience": "tailor"}).json()

    assert body["text"].startswith("Order: ALR-0001\nCustomer: Meera Nair\nDelivery: 20 Mar 2025")
    assert "1. Gown - No description" in body["text"]
    assert "Balance" not in body["text"]
    assert body["link"].startswith("https://wa.me/?text=")


def test_slip_and_message_for_missing_order(client):
    assert client.get("/orders/999/slip").status_code == 404
    assert client.get("/orders/999/message").status_code == 404
