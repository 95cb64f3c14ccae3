"""
Endpoints de unidades.
"""
from typing import Optional

from fastapi import APIRouter, Query

from ...services.units import UnitType, default_iva_settings

router = APIRouter(prefix="/units", tags=["Unidades"])


@router.get("/iva-defaults")
async def iva_defaults(
    unit_type: UnitType = Query(..., alias="unitType"),
    aplica_iva_alquiler: Optional[bool] = Query(None, alias="aplicaIvaAlquiler"),
    iva_rate_percent: Optional[float] = Query(None, alias="ivaRatePercent", ge=0, le=100)
):
    """IVA sugerido al dar de alta una unidad según su tipo."""
    applies, rate = default_iva_settings(
        unit_type, aplica_iva_alquiler, iva_rate_percent
    )
    return {"aplicaIvaAlquiler": applies, "ivaRatePercent": rate}
