# boutique/models/measurements.py
"""
Garment types and the measurement catalogs an order item may carry.

An item's measurements are a flat ``{key: number | str}`` object in storage,
but the allowed keys are closed: the core body catalog plus the catalog of
that item's garment type.
"""

import math
import re
from enum import Enum
from typing import Dict, List, Mapping, NamedTuple, Optional, Union

from pydantic import BaseModel

MeasurementValue = Union[int, float, str]

# plain ASCII decimal: "32", "-1.5", ".5", "2e3"; no "1_000", "0x10" or "inf"
NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class GarmentType(str, Enum):
    blouse = "blouse"
    salwar_kameez = "salwar_kameez"
    lehenga = "lehenga"
    gown = "gown"
    dress = "dress"
    skirt = "skirt"
    top = "top"
    other = "other"


GARMENT_TYPE_LABELS: Dict[GarmentType, str] = {
    GarmentType.blouse: "Blouse",
    GarmentType.salwar_kameez: "Salwar Kameez",
    GarmentType.lehenga: "Lehenga",
    GarmentType.gown: "Gown",
    GarmentType.dress: "Dress",
    GarmentType.skirt: "Skirt",
    GarmentType.top: "Top",
    GarmentType.other: "Other",
}


class MeasurementField(NamedTuple):
    key: str
    label: str
    hint: Optional[str] = None


# Saved on the customer profile and pre-filled onto new order items.
CORE_MEASUREMENTS: List[MeasurementField] = [
    MeasurementField("bust", "Bust / Chest"),
    MeasurementField("under_bust", "Under Bust"),
    MeasurementField("waist", "Waist"),
    MeasurementField("hip", "Hip"),
    MeasurementField("shoulder_width", "Shoulder Width"),
    MeasurementField("arm_length", "Arm Length", "Shoulder to wrist"),
    MeasurementField("upper_arm", "Upper Arm", "Circumference"),
    MeasurementField("neck_round", "Neck Round"),
    MeasurementField("front_neck_depth", "Front Neck Depth"),
    MeasurementField("back_neck_depth", "Back Neck Depth"),
    MeasurementField("full_height", "Full Height"),
]

CORE_MEASUREMENT_KEYS = [f.key for f in CORE_MEASUREMENTS]

GARMENT_MEASUREMENTS: Dict[GarmentType, List[MeasurementField]] = {
    GarmentType.blouse: [
        MeasurementField("blouse_length", "Blouse Length", "Shoulder to hem"),
        MeasurementField("cross_front", "Cross Front", "Armhole to armhole (front)"),
        MeasurementField("cross_back", "Cross Back", "Armhole to armhole (back)"),
        MeasurementField("dart_point", "Dart Point", "Shoulder to bust point"),
        MeasurementField("armhole_depth", "Armhole Depth", "Shoulder to underarm"),
        MeasurementField("sleeve_length", "Sleeve Length"),
        MeasurementField("sleeve_opening", "Sleeve Opening / Cuff"),
        MeasurementField("front_opening_style", "Front Opening Style", "Center / Side / Back"),
    ],
    GarmentType.salwar_kameez: [
        MeasurementField("kameez_length", "Kameez Length", "Shoulder to desired length"),
        MeasurementField("slit_length", "Slit Length"),
        MeasurementField("salwar_length", "Salwar Length", "Waist to ankle"),
        MeasurementField("salwar_knee_round", "Knee Round"),
        MeasurementField("salwar_bottom", "Salwar Bottom / Mohri"),
        MeasurementField("crotch_depth", "Crotch Depth / Seat"),
        MeasurementField("salwar_style", "Salwar Style", "Churidar / Patiala / Straight"),
    ],
    GarmentType.lehenga: [
        MeasurementField("lehenga_length", "Lehenga Length", "Waist to floor"),
        MeasurementField("lehenga_waist", "Lehenga Waist"),
        MeasurementField("flare", "Flare / Kali", "Circle or panel count"),
        MeasurementField("can_can", "Can-Can Layers", "Underlayer preference"),
    ],
    GarmentType.gown: [
        MeasurementField("bodice_length", "Bodice Length", "Shoulder to waist"),
        MeasurementField("gown_full_length", "Full Length", "Shoulder to floor"),
        MeasurementField("train_length", "Train Length", "Floor extension"),
        MeasurementField("thigh_circumference", "Thigh Circumference"),
        MeasurementField("knee_circumference", "Knee Circumference"),
    ],
    GarmentType.dress: [
        MeasurementField("dress_length", "Dress Length", "Waist to hem"),
        MeasurementField("bodice_length", "Bodice Length", "Shoulder to waist"),
        MeasurementField("thigh_circumference", "Thigh Circumference"),
        MeasurementField("knee_circumference", "Knee Circumference"),
        MeasurementField("sleeve_length", "Sleeve Length"),
        MeasurementField("sleeve_opening", "Sleeve Opening"),
    ],
    GarmentType.skirt: [
        MeasurementField("skirt_length", "Skirt Length", "Waist to hem"),
        MeasurementField("skirt_waist", "Skirt Waist"),
        MeasurementField("thigh_circumference", "Thigh Circumference"),
        MeasurementField("knee_circumference", "Knee Circumference"),
        MeasurementField("flare", "Flare / Style"),
    ],
    GarmentType.top: [
        MeasurementField("top_length", "Top Length"),
        MeasurementField("sleeve_length", "Sleeve Length"),
        MeasurementField("sleeve_opening", "Sleeve Opening"),
        MeasurementField("cross_front", "Cross Front"),
        MeasurementField("cross_back", "Cross Back"),
    ],
    GarmentType.other: [
        MeasurementField("garment_length", "Garment Length"),
        MeasurementField("custom_1", "Custom Measurement 1"),
        MeasurementField("custom_2", "Custom Measurement 2"),
        MeasurementField("custom_3", "Custom Measurement 3"),
    ],
}


def fields_for(garment_type: GarmentType) -> List[MeasurementField]:
    """Core fields followed by the garment's own fields, in catalog order."""
    return CORE_MEASUREMENTS + GARMENT_MEASUREMENTS[GarmentType(garment_type)]


def allowed_keys(garment_type: GarmentType) -> List[str]:
    return [f.key for f in fields_for(garment_type)]


def label_for(garment_type: GarmentType, key: str) -> str:
    for f in fields_for(garment_type):
        if f.key == key:
            return f.label
    return key.replace("_", " ")


def parse_measurement(value) -> Optional[MeasurementValue]:
    """
    Numbers stay numbers; strings are parsed as a number when they look like
    one and otherwise kept (trimmed). Blank input yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value

    text = str(value).strip()
    if not text:
        return None

    if not NUMBER_RE.fullmatch(text):
        return text

    if "." not in text and "e" not in text.lower():
        return int(text)

    num = float(text)
    if math.isinf(num):
        return text
    return num


def normalize_measurements(raw: Optional[Mapping]) -> Dict[str, MeasurementValue]:
    cleaned: Dict[str, MeasurementValue] = {}
    for key, value in (raw or {}).items():
        parsed = parse_measurement(value)
        if parsed is not None:
            cleaned[key] = parsed
    return cleaned


def unknown_keys(garment_type: GarmentType, measurements: Mapping) -> List[str]:
    allowed = set(allowed_keys(garment_type))
    return sorted(k for k in measurements if k not in allowed)


class MeasurementFieldOut(BaseModel):
    key: str
    label: str
    hint: Optional[str] = None


class GarmentCatalogOut(BaseModel):
    garment_type: GarmentType
    label: str
    fields: List[MeasurementFieldOut]


class MeasurementCatalogOut(BaseModel):
    core: List[MeasurementFieldOut]
    garments: List[GarmentCatalogOut]


def catalog() -> MeasurementCatalogOut:
    return MeasurementCatalogOut(
        core=[MeasurementFieldOut(**f._asdict()) for f in CORE_MEASUREMENTS],
        garments=[
            GarmentCatalogOut(
                garment_type=gt,
                label=GARMENT_TYPE_LABELS[gt],
                fields=[MeasurementFieldOut(**f._asdict()) for f in GARMENT_MEASUREMENTS[gt]],
            )
            for gt in GarmentType
        ],
    )
