"""
Endpoints de estimación de impuestos.
"""
import logging

from fastapi import APIRouter

from ...schemas.schemas import TaxEstimateRequest, TaxEstimateResponse
from ...services.tax_estimator import calculate_taxes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/taxes", tags=["Impuestos"])


@router.post("/estimate", response_model=TaxEstimateResponse)
async def estimate(data: TaxEstimateRequest):
    """
    Estima ingresos, gastos, IVA, Ingresos Brutos y Ganancias del año
    o del mes indicado.
    """
    estimate = calculate_taxes(
        data.profile.to_profile(),
        [period.to_period() for period in data.rental_periods],
        [expense.to_record() for expense in data.expenses],
        data.unit_monthly_expenses,
        data.year,
        data.month,
    )
    logger.debug(f"Estimación {data.year}-{data.month or 'anual'}: ingresos {estimate.income}")
    return TaxEstimateResponse.from_estimate(estimate)
