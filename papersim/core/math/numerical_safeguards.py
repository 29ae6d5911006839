"""
Numerical Safeguards — Safe Math Primitives для симулятора

Модуль обеспечивает численную устойчивость ценового процесса и расчётов счёта:
- Безопасное деление с защитой от деления на ноль (EMA, last_close, span)
- NaN/Inf санитизация пользовательского ввода и цен
- Ограничение значений (clamp) и min-max нормализация спарклайнов

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не происходит (знаменатель не меньше eps)
2. NaN/Inf не пропагируют в состояние инструментов и счёта
3. Все операции детерминированы
"""

import math
from typing import Final, Sequence

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Знаменатель для относительных изменений цены (EMA, last_close)
EPS_PRICE: Final[float] = 1e-9

# Минимальный размах при нормализации спарклайна
EPS_SPAN: Final[float] = 1e-6


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def denom_safe_unsigned(value: float, eps: float = EPS_PRICE) -> float:
    """
    Безопасный беззнаковый делитель.

    Args:
        value: Исходное значение
        eps: Минимальный порог (должен быть > 0)

    Returns:
        max(abs(value), eps)

    Examples:
        >>> denom_safe_unsigned(10.0)
        10.0
        >>> denom_safe_unsigned(0.0, 1e-6)
        1e-06
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")
    return max(abs(value), eps)


def relative_change(new: float, base: float, eps: float = EPS_PRICE) -> float:
    """
    Относительное изменение (new - base) / max(base, eps).

    Используется для отклонения цены от EMA и дневного изменения.
    """
    return (new - base) / denom_safe_unsigned(base, eps)


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """True если значение конечное (не NaN и не Inf)"""
    return isinstance(value, (int, float)) and math.isfinite(value)


def parse_quantity(raw: object) -> int:
    """
    Приведение пользовательского количества к целому (floor).

    Нечисловой, NaN или бесконечный ввод даёт 0. Строки парсятся как числа.

    Examples:
        >>> parse_quantity(10.9)
        10
        >>> parse_quantity("7")
        7
        >>> parse_quantity("abc")
        0
    """
    if isinstance(raw, bool):
        return int(raw)
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    return math.floor(value)


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в диапазоне [min_value, max_value].

    Examples:
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
        >>> clamp(15.0, 0.0, 10.0)
        10.0
    """
    result = value
    if min_value is not None:
        result = max(result, min_value)
    if max_value is not None:
        result = min(result, max_value)
    return result


def min_max_normalize(values: Sequence[float], eps: float = EPS_SPAN) -> list[float]:
    """
    Min-max нормализация ряда в [0, 1].

    Размах ограничен снизу eps, поэтому константный ряд даёт нули.

    Raises:
        ValueError: Если ряд пуст
    """
    if not values:
        raise ValueError("values must be non-empty")
    lo = min(values)
    hi = max(values)
    span = max(eps, hi - lo)
    return [(v - lo) / span for v in values]
