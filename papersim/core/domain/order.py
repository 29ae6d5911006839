"""
Order — Запись исполненной paper-заявки

Immutable Pydantic модель. Создаётся в момент успешного Buy/Sell и
добавляется в начало журнала. После создания может меняться только заметка
(note), и только через PaperLedger.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OrderSide(str, Enum):
    """Сторона рыночной заявки"""

    BUY = "BUY"
    SELL = "SELL"


class Order(BaseModel):
    """Исполненная заявка (fill)"""

    id: str = Field(..., min_length=1, description="Уникальный id: '<ts_ms>.<suffix>'")
    side: OrderSide = Field(..., description="BUY/SELL")
    symbol: str = Field(..., min_length=1, description="Тикер")
    qty: int = Field(..., gt=0, description="Исполненное количество")
    price: float = Field(..., gt=0, description="Цена исполнения (worst-case)")
    ts: int = Field(..., ge=0, description="Время исполнения (UTC, миллисекунды)")
    fee: Optional[float] = Field(default=None, ge=0, description="Комиссия заявки")
    r: Optional[float] = Field(default=None, description="Результат в R (заполняет журнал)")
    note: Optional[str] = Field(default=None, description="Заметка пользователя")

    model_config = {"frozen": True}

    def with_note(self, note: Optional[str]) -> "Order":
        """Копия заявки с новой заметкой (пустая строка очищает заметку)"""
        return self.model_copy(update={"note": note or None})
