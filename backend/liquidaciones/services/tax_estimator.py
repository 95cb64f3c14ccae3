"""
Estimación de impuestos (IVA, Ingresos Brutos y Ganancias) para un año
o un mes, a partir de los alquileres, los gastos registrados y las
expensas mensuales de las unidades.
"""
import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..utils.numbers import round_to, to_number
from .rental_periods import BillingFrequency, RentalPeriod, RentalStatus

logger = logging.getLogger(__name__)

WEEKS_PER_MONTH = 4.33
DAYS_PER_MONTH = 30


@dataclass
class TaxProfile:
    """Perfil impositivo del propietario. Las tasas se expresan en %."""
    iva_enabled: bool = False
    iva_rate_percent: float = 21
    iibb_enabled: bool = False
    iibb_rate_percent: float = 0
    ig_estimate_percent: float = 0


@dataclass
class ExpenseRecord:
    """Gasto mensual registrado para una unidad."""
    month: str
    amount: float
    deductible: bool = False


@dataclass
class TaxEstimate:
    income: float
    expenses: float
    deductible_expenses: float
    net_result: float
    iva_amount: float
    iibb_amount: float
    ig_estimate: float
    income_by_month: Dict[str, float] = field(default_factory=dict)
    expenses_by_month: Dict[str, Dict[str, float]] = field(default_factory=dict)


def month_key(value: date) -> str:
    return f"{value.year}-{value.month:02d}"


def _months_in_range(start: date, end: date) -> List[date]:
    months = []
    current = date(start.year, start.month, 1)
    while current <= end:
        months.append(current)
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return months


def monthly_equivalent(rental: RentalPeriod) -> float:
    """
    Monto mensual equivalente según la frecuencia de cobro.
    ONE_TIME se reparte en meses de 30 días a lo largo del período.
    """
    price = to_number(rental.price_amount)
    frequency = BillingFrequency(rental.billing_frequency)

    if frequency == BillingFrequency.MONTHLY:
        return price
    if frequency == BillingFrequency.WEEKLY:
        return price * WEEKS_PER_MONTH
    if frequency == BillingFrequency.DAILY:
        return price * DAYS_PER_MONTH

    total_days = (rental.end_date - rental.start_date).days + 1
    if total_days <= 0:
        return 0.0
    return price / (total_days / DAYS_PER_MONTH)


def prorate_income(
    rental: RentalPeriod,
    range_start: date,
    range_end: date
) -> Dict[str, float]:
    """
    Ingreso del período de alquiler por mes calendario dentro del rango,
    proporcional a los días cubiertos de cada mes: un mes completo
    aporta el monto mensual entero.
    """
    start = max(rental.start_date, range_start)
    end = min(rental.end_date, range_end)
    if start > end:
        return {}

    monthly = monthly_equivalent(rental)
    income: Dict[str, float] = {}

    for first_day in _months_in_range(start, end):
        days_in_month = calendar.monthrange(first_day.year, first_day.month)[1]
        last_day = date(first_day.year, first_day.month, days_in_month)
        covered = (min(last_day, end) - max(first_day, start)).days + 1
        income[month_key(first_day)] = monthly * covered / days_in_month

    return income


def calculate_taxes(
    profile: TaxProfile,
    rental_periods: Iterable[RentalPeriod],
    expenses: Iterable[ExpenseRecord],
    unit_monthly_expenses: Iterable[float],
    year: int,
    month: Optional[int] = None
) -> TaxEstimate:
    """
    Estima ingresos, gastos e impuestos de un año (o de un mes si se indica).

    - IVA = ingresos * iva% (si está habilitado)
    - IIBB = ingresos * iibb% (si está habilitado)
    - Ganancias = resultado neto * ig% (si el porcentaje es positivo)
    """
    if month is not None and not 1 <= month <= 12:
        raise ValueError(f"Mes inválido: {month}")

    if month is None:
        range_start, range_end = date(year, 1, 1), date(year, 12, 31)
    else:
        range_start = date(year, month, 1)
        range_end = date(year, month, calendar.monthrange(year, month)[1])

    keys = [month_key(first_day) for first_day in _months_in_range(range_start, range_end)]

    # Ingresos
    income_by_month: Dict[str, float] = {}
    for rental in rental_periods:
        if rental.status == RentalStatus.CANCELLED:
            logger.debug(f"Alquiler {rental.id} cancelado; no suma ingresos")
            continue
        for key, amount in prorate_income(rental, range_start, range_end).items():
            income_by_month[key] = income_by_month.get(key, 0.0) + amount

    total_income = sum(income_by_month.values())

    # Gastos
    expenses_by_month: Dict[str, Dict[str, float]] = {}
    total_expenses = 0.0
    deductible_expenses = 0.0

    for expense in expenses:
        if expense.month not in keys:
            continue
        amount = to_number(expense.amount)
        bucket = expenses_by_month.setdefault(expense.month, {"total": 0.0, "deductible": 0.0})
        bucket["total"] += amount
        total_expenses += amount
        if expense.deductible:
            bucket["deductible"] += amount
            deductible_expenses += amount

    # Expensas mensuales de cada unidad: una sola vez en el total (como el
    # balance mensual) y en cada mes del detalle
    for monthly_amount in unit_monthly_expenses:
        amount = to_number(monthly_amount)
        if amount <= 0:
            continue
        total_expenses += amount
        for key in keys:
            bucket = expenses_by_month.setdefault(key, {"total": 0.0, "deductible": 0.0})
            bucket["total"] += amount

    net_result = total_income - total_expenses

    iva_amount = total_income * to_number(profile.iva_rate_percent) / 100 if profile.iva_enabled else 0.0
    iibb_amount = total_income * to_number(profile.iibb_rate_percent) / 100 if profile.iibb_enabled else 0.0
    ig_percent = to_number(profile.ig_estimate_percent)
    ig_estimate = net_result * ig_percent / 100 if ig_percent > 0 else 0.0

    return TaxEstimate(
        income=round_to(total_income),
        expenses=round_to(total_expenses),
        deductible_expenses=round_to(deductible_expenses),
        net_result=round_to(net_result),
        iva_amount=round_to(iva_amount),
        iibb_amount=round_to(iibb_amount),
        ig_estimate=round_to(ig_estimate),
        income_by_month={key: round_to(value) for key, value in sorted(income_by_month.items())},
        expenses_by_month={
            key: {"total": round_to(value["total"]), "deductible": round_to(value["deductible"])}
            for key, value in sorted(expenses_by_month.items())
        },
    )
