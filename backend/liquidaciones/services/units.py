"""
Reglas de IVA por tipo de unidad.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..core.config import settings
from ..utils.numbers import to_optional_number


class UnitType(str, Enum):
    DEPTO = "DEPTO"
    CASA = "CASA"
    COCHERA = "COCHERA"
    VIVIENDA = "VIVIENDA"
    LOCAL_COMERCIAL = "LOCAL_COMERCIAL"
    OTRO = "OTRO"


DWELLING_TYPES = (UnitType.VIVIENDA, UnitType.DEPTO, UnitType.CASA)


@dataclass
class UnitTaxConfig:
    """Configuración impositiva de una unidad."""
    unit_type: UnitType = UnitType.OTRO
    aplica_iva_alquiler: bool = False
    iva_rate_percent: Optional[float] = None
    monthly_expenses_amount: Optional[float] = None


def default_iva_settings(
    unit_type: UnitType,
    aplica_iva_alquiler: Optional[bool] = None,
    iva_rate_percent: Optional[float] = None
) -> Tuple[bool, Optional[float]]:
    """
    IVA por defecto al dar de alta una unidad.
    Local comercial aplica IVA (21% salvo tasa explícita); vivienda no.
    Retorna (aplica_iva_alquiler, iva_rate_percent).
    """
    unit_type = UnitType(unit_type)

    if unit_type == UnitType.LOCAL_COMERCIAL:
        default_applies = True
    elif unit_type in DWELLING_TYPES:
        default_applies = False
    else:
        default_applies = bool(aplica_iva_alquiler)

    applies = default_applies if aplica_iva_alquiler is None else aplica_iva_alquiler

    if not default_applies:
        return applies, None

    rate = to_optional_number(iva_rate_percent)
    return applies, rate if rate else settings.DEFAULT_IVA_RATE_PERCENT


def iva_rate_for_unit(config: UnitTaxConfig) -> float:
    """Tasa fraccional de IVA de la unidad (0.21 para 21%)."""
    percent = to_optional_number(config.iva_rate_percent)
    if not percent:
        percent = settings.DEFAULT_IVA_RATE_PERCENT
    return percent / 100
