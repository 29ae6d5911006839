"""
RandomStream — Детерминированный поток псевдослучайных чисел

Сид-строка хэшируется 32-битным FNV-1a, далее состояние продвигается
xorshift32. Каждый вызов возвращает равномерное значение в [0, 1).

Поток НЕ криптографический. Его задача — воспроизводимость: одинаковый сид и
одинаковая последовательность вызовов дают одинаковую вселенную после прогрева
в любом процессе.
"""

from typing import Final

FNV_OFFSET_BASIS: Final[int] = 2166136261
FNV_PRIME: Final[int] = 16777619
UINT32_MASK: Final[int] = 0xFFFFFFFF
UINT32_RANGE: Final[float] = 4294967296.0


def fnv1a_32(text: str) -> int:
    """
    32-битный FNV-1a хэш строки (по UTF-16 code units).

    Examples:
        >>> fnv1a_32("")
        2166136261
    """
    h = FNV_OFFSET_BASIS
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        h ^= encoded[i] | (encoded[i + 1] << 8)
        h = (h * FNV_PRIME) & UINT32_MASK
    return h


def xorshift32(state: int) -> int:
    """Один шаг xorshift32 (13, 17, 5)"""
    state ^= (state << 13) & UINT32_MASK
    state ^= state >> 17
    state ^= (state << 5) & UINT32_MASK
    return state & UINT32_MASK


class RandomStream:
    """
    Сидируемый генератор равномерных значений в [0, 1).

    Экземпляр вызываемый: ``r = RandomStream("seed"); x = r()``.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._state = fnv1a_32(seed)

    def __call__(self) -> float:
        self._state = xorshift32(self._state)
        return self._state / UINT32_RANGE
