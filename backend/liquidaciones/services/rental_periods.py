"""
Períodos de alquiler: solapamientos y período activo de un mes.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ..utils.validators import validate_period

logger = logging.getLogger(__name__)


class BillingFrequency(str, Enum):
    MONTHLY = "MONTHLY"
    WEEKLY = "WEEKLY"
    DAILY = "DAILY"
    ONE_TIME = "ONE_TIME"


class RentalStatus(str, Enum):
    RESERVED = "RESERVED"
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"


class InvalidPeriodError(ValueError):
    """El período no tiene formato YYYY-MM."""


class RentalPeriodConflictError(ValueError):
    """Ya existe un alquiler no cancelado que se superpone."""

    def __init__(self, conflicts: List["RentalPeriod"]):
        super().__init__("Conflicto: Ya existe un alquiler activo en este período")
        self.conflicts = conflicts


@dataclass
class RentalPeriod:
    """Período de alquiler de una unidad (fechas inclusivas)."""
    unit_id: str
    start_date: date
    end_date: date
    price_amount: float = 0
    currency: str = "ARS"
    billing_frequency: BillingFrequency = BillingFrequency.MONTHLY
    status: RentalStatus = RentalStatus.ACTIVE
    id: Optional[str] = None
    tenant_id: Optional[str] = None

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


def parse_period(period: str) -> Tuple[date, date]:
    """
    Convierte "YYYY-MM" en (primer día, último día) del mes.
    """
    if not validate_period(period):
        raise InvalidPeriodError(f"Período inválido: {period!r} (formato YYYY-MM)")

    year, month = (int(part) for part in period.split("-"))

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def find_conflicts(
    periods: Iterable[RentalPeriod],
    unit_id: str,
    start: date,
    end: date,
    exclude_id: Optional[str] = None
) -> List[RentalPeriod]:
    """
    Períodos no cancelados de la unidad que se superponen con [start, end].
    exclude_id permite ignorar el propio período al editarlo.
    """
    return [
        period for period in periods
        if period.unit_id == unit_id
        and period.status != RentalStatus.CANCELLED
        and (exclude_id is None or period.id != exclude_id)
        and period.overlaps(start, end)
    ]


def ensure_no_conflicts(
    periods: Iterable[RentalPeriod],
    unit_id: str,
    start: date,
    end: date,
    exclude_id: Optional[str] = None
) -> None:
    """Lanza RentalPeriodConflictError si hay superposición."""
    conflicts = find_conflicts(periods, unit_id, start, end, exclude_id)
    if conflicts:
        logger.info(
            f"Conflicto de alquiler en unidad {unit_id}: "
            f"{start.isoformat()} - {end.isoformat()} ({len(conflicts)} períodos)"
        )
        raise RentalPeriodConflictError(conflicts)


def active_period_for_month(
    periods: Iterable[RentalPeriod],
    unit_id: str,
    period: str
) -> Optional[RentalPeriod]:
    """Primer período ACTIVE de la unidad que cubre algún día del mes."""
    first_day, last_day = parse_period(period)
    for rental in periods:
        if (
            rental.unit_id == unit_id
            and rental.status == RentalStatus.ACTIVE
            and rental.overlaps(first_day, last_day)
        ):
            return rental
    return None
