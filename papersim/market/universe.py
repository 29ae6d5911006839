"""
Universe — Вселенная синтетических инструментов

Создание фиксированного числа инструментов из детерминированного потока,
прогрев ценовым процессом и добавление инструментов по запросу (когда
пользователь ссылается на неизвестный тикер).

Порядок вызовов генератора фиксирован: от него зависит воспроизводимость
стартового распределения между процессами.
"""

import math
import string
from typing import Iterable, Iterator, Optional

from loguru import logger

from papersim.config import SimConfig
from papersim.core.domain.instrument import Instrument
from papersim.core.math.numerical_safeguards import clamp, min_max_normalize
from papersim.core.math.random_stream import RandomStream

LETTERS = string.ascii_uppercase


def generate_symbol(index: int) -> str:
    """
    Трёхбуквенный символ из индекса (base-26, младшая цифра первой).

    Без коллизий для index < 26**3.

    Examples:
        >>> generate_symbol(0)
        'AAA'
        >>> generate_symbol(27)
        'BBA'
    """
    if index < 0:
        raise ValueError(f"index must be non-negative, got {index}")
    return (
        LETTERS[index % 26]
        + LETTERS[(index // 26) % 26]
        + LETTERS[(index // 676) % 26]
    )


def normalize_symbol(raw: object) -> str:
    """Тикер без пробелов по краям, в верхнем регистре ('' для None)"""
    if raw is None:
        return ""
    return str(raw).strip().upper()


def _draw_base_params(r: RandomStream, config: SimConfig) -> tuple[str, float, float, int]:
    """Сектор, базовая цена, стартовая цена и число акций (в этом порядке)"""
    sectors = config.sectors
    sector = sectors[math.floor(r() * len(sectors))]
    base = 10 + math.floor(r() * 290)
    price = base + r() * base * 0.2
    shares = 50_000_000 + math.floor(r() * 950_000_000)
    return sector, base, price, shares


def _draw_dynamics(r: RandomStream) -> tuple[float, float, float]:
    """drift ∈ [0.0002, 0.0008), vol ∈ [0.012, 0.042), beta ∈ [0.5, 1.2)"""
    drift = 0.0002 + r() * 0.0006
    vol = 0.012 + r() * 0.03
    beta = 0.5 + r() * 0.7
    return drift, vol, beta


class Universe:
    """
    Упорядоченная коллекция инструментов с индексом по символу.

    Инструменты никогда не удаляются.
    """

    def __init__(self, instruments: Iterable[Instrument] = ()):
        self._rows: list[Instrument] = []
        self._by_symbol: dict[str, Instrument] = {}
        for row in instruments:
            self.add(row)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._rows)

    def __contains__(self, symbol: object) -> bool:
        return normalize_symbol(symbol) in self._by_symbol

    def get(self, symbol: object) -> Optional[Instrument]:
        """Инструмент по (нормализуемому) символу, None если нет"""
        return self._by_symbol.get(normalize_symbol(symbol))

    def add(self, instrument: Instrument) -> None:
        if instrument.symbol in self._by_symbol:
            raise ValueError(f"duplicate symbol: {instrument.symbol}")
        self._rows.append(instrument)
        self._by_symbol[instrument.symbol] = instrument

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(row.symbol for row in self._rows)


# =============================================================================
# ГЕНЕРАЦИЯ
# =============================================================================


def build_instrument(index: int, r: RandomStream, config: SimConfig) -> Instrument:
    """
    Генерация инструмента вселенной с индексом index.

    Спарклайн засевается небольшим независимым случайным блужданием и
    нормализуется в [0, 1].
    """
    sector, base, price, shares = _draw_base_params(r, config)

    walk: list[float] = []
    p = price
    for _ in range(config.spark_length):
        step = (r() - 0.5) * 0.02 * base
        p = max(1.0, p + step)
        walk.append(p)

    drift, vol, beta = _draw_dynamics(r)

    return Instrument(
        symbol=generate_symbol(index),
        name=f"{sector} Co {index + 1}",
        sector=sector,
        shares=shares,
        drift=drift,
        vol=vol,
        beta=beta,
        price=price,
        ema200=price,
        last_close=price,
        change_pct=0.0,
        bars=min_max_normalize(walk),
    )


def build_custom_instrument(symbol: str, r: RandomStream, config: SimConfig) -> Instrument:
    """
    Инструмент для произвольного тикера, добавляемого по запросу.

    Не прогревается: EMA равна стартовой цене.
    """
    sector, _base, price, shares = _draw_base_params(r, config)
    bars = [
        clamp(0.4 + (r() - 0.5) * 0.2, config.spark_floor, 1.0)
        for _ in range(config.spark_length)
    ]
    drift, vol, beta = _draw_dynamics(r)

    return Instrument(
        symbol=symbol,
        name=f"{sector} Co",
        sector=sector,
        shares=shares,
        drift=drift,
        vol=vol,
        beta=beta,
        price=price,
        ema200=price,
        last_close=price,
        change_pct=0.0,
        bars=bars,
    )


def init_universe(r: RandomStream, config: SimConfig) -> Universe:
    """Создание вселенной из config.universe_size инструментов"""
    universe = Universe(
        build_instrument(i, r, config) for i in range(config.universe_size)
    )
    logger.debug("Universe initialized: {} instruments", len(universe))
    return universe
