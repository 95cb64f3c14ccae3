"""
Endpoints de pagos.
"""
from typing import List

from fastapi import APIRouter

from ...schemas.schemas import PaymentStatusItem, PaymentStatusRequest
from ...services.payments import payment_status_by_period

router = APIRouter(prefix="/payments", tags=["Pagos"])


@router.post("/status", response_model=List[PaymentStatusItem])
async def status_by_period(data: PaymentStatusRequest):
    """Estado de cobro del período para cada unidad."""
    rows = payment_status_by_period(
        data.unit_ids, data.statement_unit_ids, data.payment_unit_ids
    )
    return [PaymentStatusItem(period=data.period, **row) for row in rows]
