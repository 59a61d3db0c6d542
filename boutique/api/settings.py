# boutique/api/settings.py

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from boutique.api.deps import get_boutique_settings, get_current_user
from boutique.db.engine import get_engine
from boutique.models.settings import BoutiqueSettings, BoutiqueSettingsIn
from boutique.services.settings import save_settings

router = APIRouter(
    prefix="/settings",
    tags=["settings"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/", response_model=BoutiqueSettings)
def get_settings(
    settings: BoutiqueSettings = Depends(get_boutique_settings),
) -> BoutiqueSettings:
    return settings


@router.put("/", response_model=BoutiqueSettings)
def put_settings(
    payload: BoutiqueSettingsIn,
    engine: Engine = Depends(get_engine),
) -> BoutiqueSettings:
    """
    Save the boutique's settings, creating the record on first save.
    """
    with engine.begin() as conn:
        return save_settings(conn, payload)
