"""
MarketState — Сессии, котировки и возможности (opportunities)

Immutable Pydantic модели производных рыночных значений. Котировка и
opportunity вычисляются по запросу из текущего состояния инструментов и часов
рынка и нигде не хранятся.
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Session(str, Enum):
    """
    Торговая сессия.

    Цикл: RTH → POST → PRE → RTH.
    """

    RTH = "RTH"  # Основная сессия
    POST = "POST"  # После закрытия
    PRE = "PRE"  # До открытия

    def next(self) -> "Session":
        """Следующая сессия в цикле"""
        order = SESSION_CYCLE
        return order[(order.index(self) + 1) % len(order)]

    @property
    def is_regular(self) -> bool:
        return self == Session.RTH


SESSION_CYCLE: tuple[Session, ...] = (Session.RTH, Session.POST, Session.PRE)


# =============================================================================
# QUOTE
# =============================================================================


class Quote(BaseModel):
    """
    Котировка инструмента.

    Эфемерное значение: bid/ask вокруг last с учётом сессии.
    """

    bid: float = Field(..., gt=0, description="Цена покупателя")
    ask: float = Field(..., gt=0, description="Цена продавца")
    last: float = Field(..., gt=0, description="Последняя цена")
    spread: float = Field(..., gt=0, description="Абсолютный спред")
    session: Session = Field(..., description="Текущая сессия")

    model_config = {"frozen": True}


# =============================================================================
# OPPORTUNITY
# =============================================================================


class Opportunity(BaseModel):
    """Строка скринера: инструмент с кросс-секционным скором 0–30"""

    symbol: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    change_pct: float = Field(..., alias="changePct")
    score: int = Field(..., ge=0)
    bars: tuple[float, ...] = Field(..., description="Спарклайн, значения в [0, 1]")

    model_config = {"frozen": True, "populate_by_name": True}
