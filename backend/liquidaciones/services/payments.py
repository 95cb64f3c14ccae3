"""
Pagos mensuales: liquidación que se genera al marcar un alquiler como
cobrado y estado de cobro por unidad.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..core.config import settings
from ..utils.numbers import to_number
from .rental_periods import RentalPeriod, active_period_for_month
from .statement_calculator import StatementInput
from .units import UnitTaxConfig, iva_rate_for_unit

logger = logging.getLogger(__name__)


@dataclass
class ReceivedStatementDraft:
    """Liquidación a guardar al registrar el cobro del mes."""
    unit_id: str
    period: str
    statement_input: StatementInput
    currency: str
    tenant_id: Optional[str] = None
    rental_period_id: Optional[str] = None


def draft_received_statement(
    unit_config: UnitTaxConfig,
    rental_periods: Iterable[RentalPeriod],
    unit_id: str,
    period: str
) -> ReceivedStatementDraft:
    """
    Arma la liquidación del mes a partir del alquiler activo.
    Sin alquiler activo el monto es 0 y la moneda la de configuración.
    """
    active = active_period_for_month(rental_periods, unit_id, period)

    if active is None:
        logger.warning(f"Unidad {unit_id} sin alquiler activo en {period}; alquiler = 0")

    statement_input = StatementInput(
        alquiler=to_number(active.price_amount) if active else 0.0,
        expensas=to_number(unit_config.monthly_expenses_amount),
        aplica_iva_alquiler=bool(unit_config.aplica_iva_alquiler),
        iva_rate=iva_rate_for_unit(unit_config),
    )

    return ReceivedStatementDraft(
        unit_id=unit_id,
        period=period,
        statement_input=statement_input,
        currency=active.currency if active else settings.DEFAULT_CURRENCY,
        tenant_id=active.tenant_id if active else None,
        rental_period_id=active.id if active else None,
    )


def payment_status_by_period(
    unit_ids: Iterable[str],
    statement_unit_ids: Iterable[str],
    payment_unit_ids: Iterable[str]
) -> List[Dict[str, object]]:
    """
    Estado de cobro de cada unidad en un período.
    Una unidad está cobrada si tiene liquidación o algún pago del mes.
    """
    received = set(statement_unit_ids) | set(payment_unit_ids)
    return [
        {"unit_id": unit_id, "received": unit_id in received}
        for unit_id in unit_ids
    ]
