"""
Utilidades de validación de formatos.
"""
import re

# Período mensual de una liquidación o gasto: YYYY-MM
PERIOD_REGEX = r"^\d{4}-(0[1-9]|1[0-2])$"


def validate_period(period: str) -> bool:
    """Valida un período con formato YYYY-MM y mes entre 01 y 12."""
    if not period:
        return False
    return bool(re.match(PERIOD_REGEX, period))


def validate_rate_fraction(rate: float) -> bool:
    """
    Valida una tasa fraccional (0.21 para 21%).
    """
    return 0 <= rate <= 1
