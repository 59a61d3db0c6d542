# boutique/services/settings.py

from sqlalchemy import func, select

from boutique.db.schema import boutique_settings
from boutique.db.upsert import upsert
from boutique.models.settings import BoutiqueSettings, BoutiqueSettingsIn

SETTINGS_ID = 1

SETTINGS_FIELDS = (
    "boutique_name",
    "phone",
    "address",
    "measurement_unit",
    "reminder_days",
    "pdf_footer_text",
    "order_prefix",
)


def load_settings(conn) -> BoutiqueSettings:
    """The saved settings row, or the defaults when none exists yet."""
    row = conn.execute(
        select(boutique_settings).where(boutique_settings.c.id == SETTINGS_ID)
    ).mappings().first()

    if row is None:
        return BoutiqueSettings()

    return BoutiqueSettings(**{name: row[name] for name in SETTINGS_FIELDS}, configured=True)


def save_settings(conn, data: BoutiqueSettingsIn) -> BoutiqueSettings:
    """Insert or overwrite the singleton row. Last write wins."""
    values = data.model_dump()
    values["measurement_unit"] = data.measurement_unit.value

    upsert(
        conn,
        boutique_settings,
        {"id": SETTINGS_ID, **values},
        index_elements=["id"],
        update_cols=SETTINGS_FIELDS,
        extra_set={"updated_at": func.now()},
    )

    return load_settings(conn)
