"""
Ranking — Кросс-секционные перцентильные ранги и композитный скор

Ранг значения x в отсортированном массиве s — индекс последнего элемента
s[i] <= x (бинарный поиск), делённый на max(1, N - 1). Минимум популяции
получает 0, максимум — 1.

Скор = clamp(round_half_up(scale * (w_trend * rank_trend + w_mom * rank_mom)), 0, scale).
"""

import math
from bisect import bisect_right
from typing import Sequence


def percentile_rank(value: float, sorted_values: Sequence[float]) -> float:
    """
    Перцентильный ранг value в отсортированном массиве.

    Args:
        value: Оцениваемое значение
        sorted_values: Массив, отсортированный по возрастанию

    Returns:
        Ранг в [0, 1] для value из популяции

    Examples:
        >>> percentile_rank(3.0, [1.0, 2.0, 3.0])
        1.0
        >>> percentile_rank(1.0, [1.0, 2.0, 3.0])
        0.0
    """
    n = max(1, len(sorted_values) - 1)
    idx = max(0, bisect_right(sorted_values, value) - 1)
    return idx / n


def round_half_up(value: float) -> int:
    """Округление .5 вверх (round() в Python банковское)"""
    return math.floor(value + 0.5)


def composite_score(
    trend_rank: float,
    momentum_rank: float,
    trend_weight: float = 0.6,
    momentum_weight: float = 0.4,
    scale: int = 30,
) -> int:
    """
    Композитный скор по двум рангам.

    Returns:
        Целый скор в [0, scale]
    """
    composite = trend_weight * trend_rank + momentum_weight * momentum_rank
    return int(max(0, min(scale, round_half_up(scale * composite))))
