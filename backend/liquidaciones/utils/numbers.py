"""
Utilidades numéricas.
Frontera única de conversión: los formularios envían strings y la capa de
persistencia entrega Decimal; el motor de cálculo opera solo con float.
"""
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional


def to_optional_number(value: Any) -> Optional[float]:
    """
    Convierte un valor crudo a float.
    Retorna None si el valor está ausente o no es numérico.

    - None, NaN, "" , "null", "undefined" -> None
    - Decimal / int / float -> float
    - str -> float del texto (se aceptan espacios alrededor)
    """
    if value is None:
        return None

    if isinstance(value, bool):
        return float(value)

    if isinstance(value, Decimal):
        if value.is_nan():
            return None
        return float(value)

    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number

    if isinstance(value, str):
        text = value.strip()
        if text in ("", "null", "undefined"):
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return None if math.isnan(number) else number

    # Objetos tipo Decimal de otras librerías
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def to_number(value: Any) -> float:
    """Igual que to_optional_number, pero los valores ausentes valen 0."""
    number = to_optional_number(value)
    return 0.0 if number is None else number


def round_to(value: float, places: int = 2) -> float:
    """
    Redondea alejándose de cero en el empate, sobre la representación
    decimal del valor: round_to(100.005) == 100.01.
    """
    if math.isnan(value) or math.isinf(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    try:
        rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return value
    result = float(rounded)
    # Evita -0.0 en las salidas
    return 0.0 if result == 0 else result
