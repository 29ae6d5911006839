"""
PaperState — Снапшот paper-счёта

Immutable Pydantic модель: кэш, стартовый капитал, открытые позиции и журнал
заявок (новые первыми). Полная совместимость с JSON Schema
(papersim/core/contracts/schema/paper_state.json).

Инварианты:
1. cash >= 0
2. Символы позиций уникальны
3. Стоимость счёта = cash + Σ qty * last
"""

from pydantic import BaseModel, Field, field_validator

from .order import Order
from .position import Position


class AccountSummary(BaseModel):
    """Сводка счёта для экрана прогресса"""

    cash: float = Field(..., ge=0)
    positions_value: float = Field(..., ge=0)
    equity: float = Field(..., ge=0, description="cash + positions_value")
    starting_cash: float = Field(..., gt=0)
    pnl: float = Field(..., description="equity - starting_cash")
    pnl_pct: float = Field(..., description="pnl / starting_cash * 100")

    model_config = {"frozen": True}


class PaperState(BaseModel):
    """Полное состояние paper-счёта"""

    cash: float = Field(..., ge=0, description="Свободные средства (USD)")
    starting_cash: float = Field(
        ..., gt=0, alias="startingCash", description="Стартовый капитал для отчётности"
    )
    positions: tuple[Position, ...] = Field(default=(), description="Открытые позиции")
    orders: tuple[Order, ...] = Field(default=(), description="Журнал заявок, новые первыми")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("positions")
    @classmethod
    def validate_unique_symbols(cls, v: tuple[Position, ...]) -> tuple[Position, ...]:
        """Проверка уникальности символов позиций"""
        symbols = [p.symbol for p in v]
        if len(symbols) != len(set(symbols)):
            raise ValueError(f"duplicate position symbols: {symbols}")
        return v

    @classmethod
    def fresh(cls, starting_cash: float) -> "PaperState":
        """Пустой счёт с заданным капиталом"""
        return cls(cash=starting_cash, starting_cash=starting_cash)

    def position(self, symbol: str) -> Position | None:
        """Позиция по символу (None если нет)"""
        for p in self.positions:
            if p.symbol == symbol:
                return p
        return None

    @property
    def positions_value(self) -> float:
        """Σ qty * last по открытым позициям"""
        return sum(p.market_value for p in self.positions)

    @property
    def total_value(self) -> float:
        """Полная стоимость счёта: cash + стоимость позиций"""
        return self.cash + self.positions_value

    def summary(self) -> AccountSummary:
        """Сводка: equity и результат относительно стартового капитала"""
        equity = self.total_value
        pnl = equity - self.starting_cash
        return AccountSummary(
            cash=self.cash,
            positions_value=self.positions_value,
            equity=equity,
            starting_cash=self.starting_cash,
            pnl=pnl,
            pnl_pct=pnl / self.starting_cash * 100.0,
        )

    def to_json_dict(self) -> dict:
        """Сериализация в формат хранилища (camelCase, без пустых опций)"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
