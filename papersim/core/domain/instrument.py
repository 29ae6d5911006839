"""
Instrument — Синтетический торгуемый инструмент

Статические параметры (drift, vol, beta, сектор, число акций) задаются один
раз при создании. Изменяемое состояние (цена, EMA-200, last_close, дневное
изменение, спарклайн) обновляется только шагом ценового процесса.

Инварианты:
1. price > 0 и ema200 > 0
2. len(bars) == фиксированной длине спарклайна; старое значение вытесняется новым
"""

from dataclasses import dataclass, field


@dataclass
class Instrument:
    """Член вселенной инструментов"""

    # Идентификация
    symbol: str
    name: str
    sector: str

    # Статические параметры
    shares: int
    drift: float  # средний дневной сдвиг доходности
    vol: float  # дневная волатильность
    beta: float  # чувствительность к рыночному фактору

    # Изменяемое состояние
    price: float
    ema200: float
    last_close: float
    change_pct: float = 0.0
    bars: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("symbol must be non-empty")
        if self.price <= 0 or self.ema200 <= 0:
            raise ValueError(
                f"{self.symbol}: price and ema200 must be positive "
                f"(price={self.price}, ema200={self.ema200})"
            )

    def push_bar(self, value: float) -> None:
        """Добавление точки спарклайна с вытеснением самой старой"""
        if self.bars:
            self.bars.pop(0)
        self.bars.append(value)

    @property
    def rel_to_ema_pct(self) -> float:
        """Отклонение цены от EMA в процентах (трендовый сигнал)"""
        return (self.price - self.ema200) / max(1e-9, self.ema200) * 100.0
