"""
Motor de cálculo de liquidaciones mensuales.
Implementa las reglas de cálculo de la planilla de liquidación por unidad.

Funciones puras: sin I/O, sin estado compartido. La persistencia del
resultado como liquidación mensual es responsabilidad del llamador.
"""
import unicodedata
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..utils.numbers import round_to, to_number, to_optional_number
from ..utils.validators import validate_rate_fraction


TOTAL_GENERAL = "Total General"
SIN_GRUPO = "Sin Grupo"


class ItemType(str, Enum):
    """Tipo de ítem adicional de una liquidación."""
    CHARGE = "CHARGE"
    DEDUCTION = "DEDUCTION"
    INFO = "INFO"


@dataclass
class StatementItem:
    """Ítem adicional (cargo, deducción o informativo)."""
    type: ItemType
    label: str
    amount: float = 0
    is_deduction: bool = False

    @property
    def deducts(self) -> bool:
        return self.type == ItemType.DEDUCTION or self.is_deduction

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "StatementItem":
        is_deduction = raw.get("is_deduction", raw.get("isDeduction", False))
        return cls(
            type=ItemType(raw.get("type", ItemType.INFO)),
            label=str(raw.get("label") or ""),
            amount=to_number(raw.get("amount")),
            is_deduction=bool(is_deduction),
        )


@dataclass
class StatementInput:
    """
    Datos de entrada de una liquidación.
    Los rubros opcionales valen 0 cuando no se informan.
    `iva` es el monto cargado directamente; None significa "no informado".
    `iva_rate` es fraccional (0.21 = 21%) y solo se usa como respaldo.
    """
    alquiler: float
    osse: float = 0
    inmob: float = 0
    tsu: float = 0
    obras: float = 0
    otros_total: float = 0
    iva: Optional[float] = None
    expensas: float = 0
    aplica_iva_alquiler: bool = False
    iva_rate: float = 0
    items: List[StatementItem] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "StatementInput":
        """
        Construye la entrada a partir de valores crudos (strings de
        formulario, Decimal de la base). Acepta claves snake_case o camelCase.
        """
        def pick(snake: str, camel: str) -> Any:
            if snake in raw:
                return raw[snake]
            return raw.get(camel)

        items = [
            item if isinstance(item, StatementItem) else StatementItem.from_raw(item)
            for item in (raw.get("items") or [])
        ]
        return cls(
            alquiler=to_number(raw.get("alquiler")),
            osse=to_number(raw.get("osse")),
            inmob=to_number(raw.get("inmob")),
            tsu=to_number(raw.get("tsu")),
            obras=to_number(raw.get("obras")),
            otros_total=to_number(pick("otros_total", "otrosTotal")),
            iva=to_optional_number(raw.get("iva")),
            expensas=to_number(raw.get("expensas")),
            aplica_iva_alquiler=bool(pick("aplica_iva_alquiler", "aplicaIvaAlquiler")),
            iva_rate=to_number(pick("iva_rate", "ivaRate")),
            items=items,
        )


@dataclass(frozen=True)
class ComputedTotals:
    """Totales calculados de una liquidación, redondeados a 2 decimales."""
    iva_alquiler: float
    total_mes: float
    neto: float
    gastos: float
    neteado: float


@dataclass
class StatementSummary:
    """
    Liquidación ya calculada, tal como la entrega la capa de persistencia
    para los reportes por grupo de propiedades.
    """
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

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "StatementSummary":
        values: Dict[str, Any] = {}
        for name in ("unit_id", "group_id", "group_name"):
            value = raw.get(name, raw.get(_camel(name)))
            values[name] = str(value) if value not in (None, "") else None
        for name in AGGREGATED_FIELDS:
            values[name] = to_number(raw.get(name, raw.get(_camel(name))))
        return cls(**values)


@dataclass
class GroupTotals:
    """Totales acumulados de un grupo; group_id None es el Total General."""
    group_id: Optional[str]
    group_name: str
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
    count: int = 0

    def add(self, statement: StatementSummary) -> None:
        for name in AGGREGATED_FIELDS:
            setattr(self, name, getattr(self, name) + getattr(statement, name))
        self.count += 1

    def rounded(self) -> "GroupTotals":
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for name in AGGREGATED_FIELDS:
            values[name] = round_to(values[name])
        return GroupTotals(**values)


@dataclass
class ValidationResult:
    """Resultado de validación: todos los errores, no solo el primero."""
    valid: bool
    errors: List[str]


AGGREGATED_FIELDS = (
    "alquiler", "osse", "inmob", "tsu", "obras", "otros_total",
    "iva_alquiler", "total_mes", "expensas", "neto", "gastos", "neteado",
)

# (campo, etiqueta) en el orden en que se reportan los negativos
_NON_NEGATIVE_FIELDS = (
    ("alquiler", "Alquiler"),
    ("osse", "OSSE"),
    ("inmob", "Inmob"),
    ("tsu", "TSU"),
    ("obras", "Obras"),
    ("iva", "IVA"),
    ("expensas", "Expensas"),
)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _group_sort_key(name: str) -> tuple:
    """Orden alfabético que ignora acentos y mayúsculas, como localeCompare."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), name)


class StatementCalculator:
    """
    Motor de cálculo de la liquidación mensual.

    Reglas:
    - IVA_ALQUILER = IVA cargado; si no hay, ALQUILER * iva_rate
      (solo si aplica_iva_alquiler)
    - TOTAL_MES = ALQUILER + OSSE + INMOB + IVA_ALQUILER
      (+ cargos, - deducciones). TSU no suma al total del mes.
    - NETO = TOTAL_MES - EXPENSAS
    - GASTOS = OSSE + TSU + INMOB + OBRAS + OTROS (+ deducciones)
    - NETEADO = NETO - GASTOS
    """

    @staticmethod
    def calculate_iva_alquiler(data: StatementInput) -> float:
        """IVA del alquiler: el monto directo tiene precedencia sobre la tasa."""
        iva = to_number(data.iva)
        if iva != 0:
            return iva

        iva_rate = to_number(data.iva_rate)
        if data.aplica_iva_alquiler and iva_rate > 0:
            return to_number(data.alquiler) * iva_rate

        return 0.0

    @classmethod
    def compute_statement(cls, data: StatementInput) -> ComputedTotals:
        """
        Calcula los totales de una liquidación mensual.
        No valida: los negativos se aceptan (ver validate_statement_input).
        """
        alquiler = to_number(data.alquiler)
        osse = to_number(data.osse)
        inmob = to_number(data.inmob)
        tsu = to_number(data.tsu)
        obras = to_number(data.obras)
        otros_total = to_number(data.otros_total)
        expensas = to_number(data.expensas)
        items = data.items or []

        iva_alquiler = cls.calculate_iva_alquiler(data)

        total_mes = alquiler + osse + inmob + iva_alquiler

        for item in items:
            if item.type == ItemType.CHARGE:
                total_mes += to_number(item.amount)

        for item in items:
            if item.deducts:
                total_mes -= to_number(item.amount)

        neto = total_mes - expensas

        gastos = osse + tsu + inmob + obras + otros_total
        # Las deducciones restan del total del mes y además suman a gastos
        for item in items:
            if item.deducts:
                gastos += to_number(item.amount)

        neteado = neto - gastos

        return ComputedTotals(
            iva_alquiler=round_to(iva_alquiler),
            total_mes=round_to(total_mes),
            neto=round_to(neto),
            gastos=round_to(gastos),
            neteado=round_to(neteado),
        )

    @staticmethod
    def aggregate_by_group(
        statements: Iterable[Union[StatementSummary, Mapping[str, Any]]]
    ) -> List[GroupTotals]:
        """
        Agrega liquidaciones por grupo de propiedades.
        Retorna un registro por grupo, ordenado por nombre, y el
        Total General (group_id None) al final.
        """
        total_general = GroupTotals(group_id=None, group_name=TOTAL_GENERAL)
        groups: Dict[Optional[str], GroupTotals] = {None: total_general}

        for raw in statements:
            statement = raw if isinstance(raw, StatementSummary) else StatementSummary.from_raw(raw)
            group_id = statement.group_id or None

            group = groups.get(group_id)
            if group is None:
                group = GroupTotals(
                    group_id=group_id,
                    group_name=statement.group_name or SIN_GRUPO,
                )
                groups[group_id] = group

            group.add(statement)

            # Sin grupo ya acumuló directamente en el Total General
            if group_id is not None:
                total_general.add(statement)

        named = sorted(
            (group.rounded() for key, group in groups.items() if key is not None),
            key=lambda group: _group_sort_key(group.group_name),
        )
        return named + [total_general.rounded()]

    @staticmethod
    def validate_statement_input(
        data: StatementInput,
        allow_negatives: bool = False
    ) -> ValidationResult:
        """
        Valida que los montos no sean negativos (salvo que se permita)
        y que la tasa de IVA esté entre 0 y 1.
        """
        errors: List[str] = []

        if not allow_negatives:
            for name, label in _NON_NEGATIVE_FIELDS:
                value = to_optional_number(getattr(data, name))
                if value is not None and value < 0:
                    errors.append(f"{label} no puede ser negativo")

        iva_rate = to_number(data.iva_rate)
        if not validate_rate_fraction(iva_rate):
            errors.append("IVA rate debe estar entre 0 y 1 (ej: 0.21 para 21%)")

        return ValidationResult(valid=not errors, errors=errors)


# Instancia global del motor
statement_calculator = StatementCalculator()

compute_statement = statement_calculator.compute_statement
aggregate_by_group = statement_calculator.aggregate_by_group
validate_statement_input = statement_calculator.validate_statement_input
