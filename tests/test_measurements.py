from boutique.models.measurements import (
    CORE_MEASUREMENT_KEYS,
    GarmentType,
    allowed_keys,
    label_for,
    normalize_measurements,
    parse_measurement,
    unknown_keys,
)


def test_parse_measurement():
    assert parse_measurement("32") == 32
    assert isinstance(parse_measurement("32"), int)
    assert parse_measurement("32.0") == 32.0
    assert isinstance(parse_measurement("32.0"), float)
    assert parse_measurement(" 14.5 ") == 14.5
    assert parse_measurement("Churidar") == "Churidar"
    assert parse_measurement("nan") == "nan"
    assert parse_measurement("") is None
    assert parse_measurement(None) is None
    assert parse_measurement(28) == 28


def test_normalize_drops_blanks():
    assert normalize_measurements({"bust": "34", "waist": "", "hip": None}) == {"bust": 34}
    assert normalize_measurements(None) == {}


def test_allowed_keys_are_core_plus_garment():
    keys = allowed_keys(GarmentType.salwar_kameez)

    assert keys[: len(CORE_MEASUREMENT_KEYS)] == CORE_MEASUREMENT_KEYS
    assert "salwar_style" in keys
    assert "blouse_length" not in keys


def test_unknown_keys():
    assert unknown_keys(GarmentType.skirt, {"waist": 28, "skirt_length": 38}) == []
    assert unknown_keys(GarmentType.skirt, {"train_length": 10, "bodice_length": 12}) == [
        "bodice_length",
        "train_length",
    ]


def test_label_for():
    assert label_for(GarmentType.blouse, "cross_back") == "Cross Back"
    assert label_for(GarmentType.blouse, "mystery_key") == "mystery key"


def test_catalog_endpoint(client):
    resp = client.get("/measurements/catalog")

    assert resp.status_code == 200
    body = resp.json()
    assert [f["key"] for f in body["core"]] == CORE_MEASUREMENT_KEYS
    assert [g["garment_type"] for g in body["garments"]] == [gt.value for gt in GarmentType]
    blouse = body["garments"][0]
    assert blouse["label"] == "Blouse"
    assert blouse["fields"][0] == {
        "key": "blouse_length",
        "label": "Blouse Length",
        "hint": "Shoulder to hem",
    }


def test_parse_measurement_accepts_plain_decimals_only():
    assert parse_measurement("1_000") == "1_000"
    assert parse_measurement("٣٢") == "٣٢"
    assert parse_measurement("0x10") == "0x10"
    assert parse_measurement("inf") == "inf"
    assert parse_measurement("1e999") == "1e999"
    assert parse_measurement("-2") == -2
    assert parse_measurement(".5") == 0.5
    assert parse_measurement("2e1") == 20.0
