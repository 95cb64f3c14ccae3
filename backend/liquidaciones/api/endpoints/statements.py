"""
Endpoints de liquidaciones mensuales.
Exponen el motor de cálculo sin persistencia: el llamador guarda el resultado.
"""
import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from ...core.config import settings
from ...schemas.schemas import (
    AggregateRequest, ComputeStatementRequest, ComputedTotalsResponse,
    DraftStatementRequest, DraftStatementResponse, GroupTotalsResponse,
    ValidateStatementRequest, ValidationResponse
)
from ...services.payments import draft_received_statement
from ...services.rental_periods import InvalidPeriodError
from ...services.statement_calculator import (
    aggregate_by_group, compute_statement, validate_statement_input
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/statements", tags=["Liquidaciones"])


def _allow_negatives(requested):
    return settings.ALLOW_NEGATIVE_AMOUNTS if requested is None else requested


@router.post("/compute", response_model=ComputedTotalsResponse)
async def compute(data: ComputeStatementRequest):
    """
    Calcula los totales de una liquidación.
    Con strict=true rechaza la entrada si no pasa la validación.
    """
    statement_input = data.to_input()

    if data.strict:
        validation = validate_statement_input(
            statement_input, _allow_negatives(data.allow_negatives)
        )
        if not validation.valid:
            logger.info(f"Liquidación rechazada: {', '.join(validation.errors)}")
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "message": "Errores de validación",
                    "errors": validation.errors,
                }
            )

    totals = compute_statement(statement_input)
    return ComputedTotalsResponse.from_totals(totals)


@router.post("/validate", response_model=ValidationResponse)
async def validate(data: ValidateStatementRequest):
    """Valida la entrada y retorna todos los errores encontrados."""
    result = validate_statement_input(
        data.to_input(), _allow_negatives(data.allow_negatives)
    )
    return ValidationResponse(valid=result.valid, errors=result.errors)


@router.post("/aggregate", response_model=List[GroupTotalsResponse])
async def aggregate(data: AggregateRequest):
    """
    Totales por grupo de propiedades y Total General (al final).
    """
    groups = aggregate_by_group(item.to_summary() for item in data.statements)
    return [GroupTotalsResponse.from_group(group) for group in groups]


@router.post("/draft", response_model=DraftStatementResponse)
async def draft(data: DraftStatementRequest):
    """
    Liquidación que corresponde guardar al marcar el alquiler del mes
    como cobrado.
    """
    try:
        result = draft_received_statement(
            data.unit.to_config(),
            [period.to_period() for period in data.rental_periods],
            data.unit_id,
            data.period,
        )
    except InvalidPeriodError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    totals = compute_statement(result.statement_input)
    return DraftStatementResponse.from_draft(result, totals)
