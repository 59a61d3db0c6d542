# boutique/api/measurements.py

from fastapi import APIRouter, Depends

from boutique.api.deps import get_current_user
from boutique.models.measurements import MeasurementCatalogOut, catalog

router = APIRouter(
    prefix="/measurements",
    tags=["measurements"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/catalog", response_model=MeasurementCatalogOut)
def measurement_catalog() -> MeasurementCatalogOut:
    """
    Core body measurements and the extra fields of each garment type.
    """
    return catalog()
