"""
Position — Модель открытой long-позиции paper-счёта

Immutable Pydantic модель. Все изменения позиции (докупка, частичная продажа,
переоценка) создают новый экземпляр; владелец записей — PaperLedger.

Инвариант: qty > 0. Позиция с нулевым количеством в счёте не хранится.
"""

from pydantic import BaseModel, Field


class Position(BaseModel):
    """
    Открытая позиция.

    Сериализуется в camelCase (avgPrice) для совместимости с хранилищем
    устройства.
    """

    symbol: str = Field(..., min_length=1, description="Тикер")
    qty: int = Field(..., gt=0, description="Количество акций (только long)")
    avg_price: float = Field(
        ..., gt=0, alias="avgPrice", description="Средневзвешенная цена входа"
    )
    last: float = Field(..., gt=0, description="Последняя цена переоценки")
    pnl: float = Field(default=0.0, description="Нереализованный PnL: (last - avg) * qty")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def market_value(self) -> float:
        """Рыночная стоимость позиции: qty * last"""
        return self.qty * self.last

    def marked(self, price: float) -> "Position":
        """
        Переоценка по текущей цене.

        Returns:
            Новая позиция с last = price и пересчитанным pnl
        """
        return self.model_copy(
            update={"last": price, "pnl": (price - self.avg_price) * self.qty}
        )

    def add(self, qty: int, fill: float) -> "Position":
        """
        Докупка с пересчётом средневзвешенной цены.

        avg = (avg * qty_old + fill * qty) / (qty_old + qty)
        """
        new_qty = self.qty + qty
        new_avg = (self.avg_price * self.qty + fill * qty) / max(1, new_qty)
        return Position(
            symbol=self.symbol,
            qty=new_qty,
            avg_price=new_avg,
            last=fill,
            pnl=(fill - new_avg) * new_qty,
        )

    def reduce(self, qty: int, fill: float) -> "Position | None":
        """
        Частичная или полная продажа.

        Returns:
            Новая позиция с остатком, либо None если позиция закрыта
        """
        remaining = self.qty - qty
        if remaining <= 0:
            return None
        return Position(
            symbol=self.symbol,
            qty=remaining,
            avg_price=self.avg_price,
            last=fill,
            pnl=(fill - self.avg_price) * remaining,
        )
