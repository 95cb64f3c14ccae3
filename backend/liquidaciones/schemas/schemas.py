"""
Esquemas Pydantic para validación de datos de la API.
Los cuerpos JSON usan camelCase; los montos aceptan números o strings.
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..services.payments import ReceivedStatementDraft
from ..services.rental_periods import BillingFrequency, RentalPeriod, RentalStatus
from ..services.statement_calculator import (
    ComputedTotals, GroupTotals, ItemType, StatementInput, StatementItem, StatementSummary
)
from ..services.tax_estimator import ExpenseRecord, TaxEstimate, TaxProfile
from ..services.units import UnitTaxConfig, UnitType
from ..utils.numbers import to_number, to_optional_number
from ..utils.validators import PERIOD_REGEX


# ===================== FUNCIONES DE VALIDACIÓN REUTILIZABLES =====================

def coerce_amount(value: Any) -> float:
    """Montos de formulario: vacío o no numérico vale 0."""
    return to_number(value)


def coerce_optional_amount(value: Any) -> Optional[float]:
    return to_optional_number(value)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===================== ENUMS =====================

class CurrencyEnum(str, Enum):
    ARS = "ARS"
    USD = "USD"


# ===================== LIQUIDACIONES =====================

class StatementItemSchema(CamelModel):
    """Ítem adicional de la liquidación."""
    type: ItemType
    label: str = ""
    amount: float = 0
    is_deduction: bool = False

    @field_validator("amount", mode="before")
    @classmethod
    def amount_number(cls, v):
        return coerce_amount(v)

    def to_item(self) -> StatementItem:
        return StatementItem(
            type=self.type,
            label=self.label,
            amount=self.amount,
            is_deduction=self.is_deduction,
        )


class StatementInputSchema(CamelModel):
    """
    Rubros de la liquidación mensual de una unidad.
    iva es el monto cargado directamente; iva_rate solo se usa si falta.
    """
    alquiler: float = 0
    osse: float = 0
    inmob: float = 0
    tsu: float = 0
    obras: float = 0
    otros_total: float = 0
    iva: Optional[float] = None
    expensas: float = 0
    aplica_iva_alquiler: bool = False
    iva_rate: float = 0
    items: List[StatementItemSchema] = Field(default_factory=list)

    @field_validator(
        "alquiler", "osse", "inmob", "tsu", "obras", "otros_total",
        "expensas", "iva_rate", mode="before"
    )
    @classmethod
    def amounts_number(cls, v):
        return coerce_amount(v)

    @field_validator("iva", mode="before")
    @classmethod
    def iva_number(cls, v):
        return coerce_optional_amount(v)

    def to_input(self) -> StatementInput:
        return StatementInput(
            alquiler=self.alquiler,
            osse=self.osse,
            inmob=self.inmob,
            tsu=self.tsu,
            obras=self.obras,
            otros_total=self.otros_total,
            iva=self.iva,
            expensas=self.expensas,
            aplica_iva_alquiler=self.aplica_iva_alquiler,
            iva_rate=self.iva_rate,
            items=[item.to_item() for item in self.items],
        )


class ComputeStatementRequest(StatementInputSchema):
    """Solicitud de cálculo; strict valida antes de calcular."""
    strict: bool = False
    allow_negatives: Optional[bool] = None


class ValidateStatementRequest(StatementInputSchema):
    allow_negatives: Optional[bool] = None


class ComputedTotalsResponse(CamelModel):
    """Totales calculados de la liquidación."""
    iva_alquiler: float
    total_mes: float
    neto: float
    gastos: float
    neteado: float

    @classmethod
    def from_totals(cls, totals: ComputedTotals) -> "ComputedTotalsResponse":
        return cls(
            iva_alquiler=totals.iva_alquiler,
            total_mes=totals.total_mes,
            neto=totals.neto,
            gastos=totals.gastos,
            neteado=totals.neteado,
        )


class ValidationResponse(CamelModel):
    valid: bool
    errors: List[str]


class StatementSummarySchema(CamelModel):
    """Liquidación guardada con su grupo de propiedades."""
    unit_id: Optional[str] = None
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    alquiler: float = 0
    osse: float = 0
    inmob: float = 0
    tsu: float = 0
    obras: float = 0
    otros_total: float = 0
    iva_alquiler: float = 0
    total_mes: float = 0
    expensas: float = 0
    neto: float = 0
    gastos: float = 0
    neteado: float = 0

    @field_validator(
        "alquiler", "osse", "inmob", "tsu", "obras", "otros_total", "iva_alquiler",
        "total_mes", "expensas", "neto", "gastos", "neteado", mode="before"
    )
    @classmethod
    def amounts_number(cls, v):
        return coerce_amount(v)

    def to_summary(self) -> StatementSummary:
        return StatementSummary(**self.model_dump())


class AggregateRequest(CamelModel):
    statements: List[StatementSummarySchema] = Field(default_factory=list)


class GroupTotalsResponse(CamelModel):
    group_id: Optional[str]
    group_name: str
    alquiler: float
    osse: float
    inmob: float
    tsu: float
    obras: float
    otros_total: float
    iva_alquiler: float
    total_mes: float
    expensas: float
    neto: float
    gastos: float
    neteado: float
    count: int

    @classmethod
    def from_group(cls, group: GroupTotals) -> "GroupTotalsResponse":
        return cls(**vars(group))


# ===================== UNIDADES Y ALQUILERES =====================

class UnitTaxConfigSchema(CamelModel):
    unit_type: UnitType = UnitType.OTRO
    aplica_iva_alquiler: bool = False
    iva_rate_percent: Optional[float] = None
    monthly_expenses_amount: Optional[float] = None

    @field_validator("iva_rate_percent", "monthly_expenses_amount", mode="before")
    @classmethod
    def optional_number(cls, v):
        return coerce_optional_amount(v)

    def to_config(self) -> UnitTaxConfig:
        return UnitTaxConfig(
            unit_type=self.unit_type,
            aplica_iva_alquiler=self.aplica_iva_alquiler,
            iva_rate_percent=self.iva_rate_percent,
            monthly_expenses_amount=self.monthly_expenses_amount,
        )


class RentalPeriodSchema(CamelModel):
    """Período de alquiler de una unidad (fechas inclusivas)."""
    id: Optional[str] = None
    unit_id: str
    tenant_id: Optional[str] = None
    start_date: date
    end_date: date
    price_amount: float = 0
    currency: CurrencyEnum = CurrencyEnum.ARS
    billing_frequency: BillingFrequency = BillingFrequency.MONTHLY
    status: RentalStatus = RentalStatus.ACTIVE

    @field_validator("price_amount", mode="before")
    @classmethod
    def price_number(cls, v):
        return coerce_amount(v)

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.end_date < self.start_date:
            raise ValueError("La fecha de fin no puede ser anterior a la de inicio")
        return self

    def to_period(self) -> RentalPeriod:
        return RentalPeriod(
            id=self.id,
            unit_id=self.unit_id,
            tenant_id=self.tenant_id,
            start_date=self.start_date,
            end_date=self.end_date,
            price_amount=self.price_amount,
            currency=self.currency.value,
            billing_frequency=self.billing_frequency,
            status=self.status,
        )


class ConflictCheckRequest(CamelModel):
    unit_id: str
    start_date: date
    end_date: date
    exclude_id: Optional[str] = None
    rental_periods: List[RentalPeriodSchema] = Field(default_factory=list)


class ConflictCheckResponse(CamelModel):
    has_conflicts: bool
    conflict_ids: List[Optional[str]]


class DraftStatementRequest(CamelModel):
    """Datos para generar la liquidación al marcar el cobro del mes."""
    unit_id: str
    period: str = Field(..., pattern=PERIOD_REGEX)
    unit: UnitTaxConfigSchema = Field(default_factory=UnitTaxConfigSchema)
    rental_periods: List[RentalPeriodSchema] = Field(default_factory=list)


class DraftStatementResponse(CamelModel):
    unit_id: str
    period: str
    currency: str
    tenant_id: Optional[str]
    rental_period_id: Optional[str]
    alquiler: float
    expensas: float
    aplica_iva_alquiler: bool
    iva_rate: float
    totals: ComputedTotalsResponse

    @classmethod
    def from_draft(
        cls,
        draft: ReceivedStatementDraft,
        totals: ComputedTotals
    ) -> "DraftStatementResponse":
        data = draft.statement_input
        return cls(
            unit_id=draft.unit_id,
            period=draft.period,
            currency=draft.currency,
            tenant_id=draft.tenant_id,
            rental_period_id=draft.rental_period_id,
            alquiler=data.alquiler,
            expensas=data.expensas,
            aplica_iva_alquiler=data.aplica_iva_alquiler,
            iva_rate=data.iva_rate,
            totals=ComputedTotalsResponse.from_totals(totals),
        )


# ===================== PAGOS =====================

class PaymentStatusRequest(CamelModel):
    period: str = Field(..., pattern=PERIOD_REGEX)
    unit_ids: List[str]
    statement_unit_ids: List[str] = Field(default_factory=list)
    payment_unit_ids: List[str] = Field(default_factory=list)


class PaymentStatusItem(CamelModel):
    unit_id: str
    period: str
    received: bool


# ===================== IMPUESTOS =====================

class TaxProfileSchema(CamelModel):
    iva_enabled: bool = False
    iva_rate_percent: float = Field(21, ge=0, le=100)
    iibb_enabled: bool = False
    iibb_rate_percent: float = Field(0, ge=0, le=100)
    ig_estimate_percent: float = Field(0, ge=0, le=100)

    def to_profile(self) -> TaxProfile:
        return TaxProfile(**self.model_dump())


class ExpenseSchema(CamelModel):
    month: str = Field(..., pattern=PERIOD_REGEX)
    amount: float = 0
    deductible: bool = False

    @field_validator("amount", mode="before")
    @classmethod
    def amount_number(cls, v):
        return coerce_amount(v)

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(month=self.month, amount=self.amount, deductible=self.deductible)


class TaxEstimateRequest(CamelModel):
    year: int = Field(..., ge=2000, le=2100)
    month: Optional[int] = Field(None, ge=1, le=12)
    profile: TaxProfileSchema = Field(default_factory=TaxProfileSchema)
    rental_periods: List[RentalPeriodSchema] = Field(default_factory=list)
    expenses: List[ExpenseSchema] = Field(default_factory=list)
    unit_monthly_expenses: List[float] = Field(default_factory=list)


class TaxEstimateResponse(CamelModel):
    income: float
    expenses: float
    deductible_expenses: float
    net_result: float
    iva_amount: float
    iibb_amount: float
    ig_estimate: float
    income_by_month: Dict[str, float]
    expenses_by_month: Dict[str, Dict[str, float]]

    @classmethod
    def from_estimate(cls, estimate: TaxEstimate) -> "TaxEstimateResponse":
        return cls(**vars(estimate))
