"""
Endpoints de períodos de alquiler.
"""
from fastapi import APIRouter, HTTPException, status

from ...schemas.schemas import ConflictCheckRequest, ConflictCheckResponse
from ...services.rental_periods import (
    RentalPeriodConflictError, ensure_no_conflicts, find_conflicts
)

router = APIRouter(prefix="/rental-periods", tags=["Alquileres"])


def _check_date_order(data: ConflictCheckRequest) -> None:
    if data.end_date < data.start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="La fecha de fin no puede ser anterior a la de inicio"
        )


@router.post("/conflicts", response_model=ConflictCheckResponse)
async def check_conflicts(data: ConflictCheckRequest):
    """
    Alquileres no cancelados de la unidad que se superponen con las fechas.
    """
    _check_date_order(data)

    conflicts = find_conflicts(
        [period.to_period() for period in data.rental_periods],
        data.unit_id,
        data.start_date,
        data.end_date,
        exclude_id=data.exclude_id,
    )
    return ConflictCheckResponse(
        has_conflicts=bool(conflicts),
        conflict_ids=[period.id for period in conflicts],
    )


@router.post("/validate")
async def validate_dates(data: ConflictCheckRequest):
    """
    Verifica que las fechas puedan usarse para un alquiler nuevo o editado.
    Responde 409 si se superponen con otro alquiler no cancelado.
    """
    _check_date_order(data)

    try:
        ensure_no_conflicts(
            [period.to_period() for period in data.rental_periods],
            data.unit_id,
            data.start_date,
            data.end_date,
            exclude_id=data.exclude_id,
        )
    except RentalPeriodConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    return {"available": True}
