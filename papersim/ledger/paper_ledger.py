"""
PaperLedger — Paper-счёт: кэш, позиции и журнал заявок

Единственный владелец записей Position и Order. Наружу отдаются только
immutable снапшоты (PaperState, кортежи моделей); все изменения проходят через
buy / sell / reset / mark_to_market / set_order_note.

Состояния позиции по символу:
    нет позиции → (Buy) → long (qty > 0) → (частичный Sell) → long
                                         → (полный Sell) → нет позиции

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. cash >= 0: покупка, стоимость которой превышает кэш, отклоняется целиком
2. Позиции с qty <= 0 в счёте не хранятся
3. Новые заявки добавляются в начало журнала
"""

import time
import uuid
from typing import Callable, Optional, Protocol

from loguru import logger

from papersim.config import SimConfig
from papersim.core.domain.order import Order, OrderSide
from papersim.core.domain.paper_state import PaperState
from papersim.core.domain.position import Position
from papersim.core.math.numerical_safeguards import is_valid_float, parse_quantity
from papersim.ledger.results import OrderResult, RejectReason
from papersim.market.universe import normalize_symbol


class FillPricer(Protocol):
    """Источник worst-case цен и комиссий для ledger"""

    def worst_case_fill(self, side: OrderSide, symbol: str, qty: int) -> Optional[float]: ...

    def fee_estimate(self, qty: int) -> float: ...


def _now_ms() -> int:
    return int(time.time() * 1000)


def make_order_id(ts_ms: int) -> str:
    """Id заявки: '<ts_ms>.<случайный суффикс>'"""
    return f"{ts_ms}.{uuid.uuid4().hex[:8]}"


def resolve_starting_cash(raw: object, config: SimConfig) -> float:
    """
    Стартовый капитал для reset.

    Нечисловое, NaN/Inf или нулевое значение заменяется дефолтом, затем
    применяется нижняя граница min_starting_cash (отрицательная сумма даёт
    минимум, а не дефолт).
    """
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        value = 0.0
    if not is_valid_float(value) or value == 0:
        value = config.default_starting_cash
    return max(config.min_starting_cash, value)


class PaperLedger:
    """Paper-счёт с рыночными заявками по worst-case ценам"""

    def __init__(
        self,
        pricer: FillPricer,
        config: Optional[SimConfig] = None,
        state: Optional[PaperState] = None,
        clock_fn: Callable[[], int] = _now_ms,
    ):
        """
        Args:
            pricer: Источник worst-case цен и комиссий
            config: Конфигурация (default SimConfig())
            state: Начальное состояние (default — пустой счёт с дефолтным капиталом)
            clock_fn: Источник времени в миллисекундах (для timestamp заявок)
        """
        self.config = config or SimConfig()
        self._pricer = pricer
        self._clock_fn = clock_fn
        self._state = state or PaperState.fresh(self.config.default_starting_cash)

    # -------------------------------------------------------------------------
    # Чтение
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PaperState:
        return self._state

    @property
    def cash(self) -> float:
        return self._state.cash

    @property
    def positions(self) -> tuple[Position, ...]:
        return self._state.positions

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._state.orders

    def position(self, symbol: str) -> Optional[Position]:
        return self._state.position(normalize_symbol(symbol))

    def replace_state(self, state: PaperState) -> None:
        """Замена состояния целиком (загрузка из хранилища)"""
        self._state = state

    # -------------------------------------------------------------------------
    # Заявки
    # -------------------------------------------------------------------------

    def buy(self, symbol: str, qty: object) -> OrderResult:
        """
        Рыночная покупка по worst-case цене.

        qty приводится к целому >= 1. Отказы: NO_QUOTE, INSUFFICIENT_CASH.
        """
        sym = normalize_symbol(symbol)
        q = max(1, parse_quantity(qty))
        fill = self._pricer.worst_case_fill(OrderSide.BUY, sym, q)
        fee = self._pricer.fee_estimate(q)

        if fill is None or not is_valid_float(fill) or fill <= 0:
            return OrderResult.rejected(RejectReason.NO_QUOTE)

        cost = fill * q + fee
        if cost > self._state.cash + self.config.cash_epsilon:
            return OrderResult.rejected(RejectReason.INSUFFICIENT_CASH)

        existing = self._state.position(sym)
        if existing is not None:
            updated = existing.add(q, fill)
            positions = tuple(updated if p.symbol == sym else p for p in self._state.positions)
        else:
            updated = Position(symbol=sym, qty=q, avg_price=fill, last=fill, pnl=0.0)
            positions = self._state.positions + (updated,)

        order = self._make_order(OrderSide.BUY, sym, q, fill, fee)
        self._state = self._state.model_copy(
            update={
                "cash": max(0.0, self._state.cash - cost),
                "positions": positions,
                "orders": (order,) + self._state.orders,
            }
        )
        logger.info(
            "[PAPER] BUY {} x{} @ {:.4f} fee={:.4f} cash={:.2f}",
            sym, q, fill, fee, self._state.cash,
        )
        return OrderResult.filled(fill, fee)

    def sell(self, symbol: str, qty: object) -> OrderResult:
        """
        Рыночная продажа по worst-case цене.

        qty ограничивается диапазоном [1, qty позиции]. Отказы: NO_POSITION,
        INVALID_QUANTITY, NO_QUOTE. Комиссия может обнулить зачисление, но не
        сделать его отрицательным.
        """
        sym = normalize_symbol(symbol)
        existing = self._state.position(sym)
        if existing is None:
            return OrderResult.rejected(RejectReason.NO_POSITION)

        q = max(1, min(existing.qty, parse_quantity(qty)))
        if q <= 0:
            return OrderResult.rejected(RejectReason.INVALID_QUANTITY)

        fill = self._pricer.worst_case_fill(OrderSide.SELL, sym, q)
        fee = self._pricer.fee_estimate(q)
        if fill is None or not is_valid_float(fill) or fill <= 0:
            return OrderResult.rejected(RejectReason.NO_QUOTE)

        proceeds = fill * q
        remaining = existing.reduce(q, fill)
        if remaining is None:
            positions = tuple(p for p in self._state.positions if p.symbol != sym)
        else:
            positions = tuple(remaining if p.symbol == sym else p for p in self._state.positions)

        order = self._make_order(OrderSide.SELL, sym, q, fill, fee)
        self._state = self._state.model_copy(
            update={
                "cash": self._state.cash + max(0.0, proceeds - fee),
                "positions": positions,
                "orders": (order,) + self._state.orders,
            }
        )
        logger.info(
            "[PAPER] SELL {} x{} @ {:.4f} fee={:.4f} cash={:.2f}",
            sym, q, fill, fee, self._state.cash,
        )
        return OrderResult.filled(fill, fee)

    # -------------------------------------------------------------------------
    # Прочие изменения
    # -------------------------------------------------------------------------

    def reset(self, starting_cash: object) -> PaperState:
        """Полная замена счёта: пустые позиции и журнал, новый капитал"""
        cash = resolve_starting_cash(starting_cash, self.config)
        self._state = PaperState.fresh(cash)
        logger.info("[PAPER] Account reset, starting cash {:.2f}", cash)
        return self._state

    def mark_to_market(self, price_fn: Callable[[str], Optional[float]]) -> None:
        """
        Переоценка открытых позиций по текущим ценам.

        Позиции без цены (символ пропал из вселенной) остаются как есть.
        """
        marked = []
        for p in self._state.positions:
            px = price_fn(p.symbol)
            if px is None or not is_valid_float(px) or px <= 0:
                marked.append(p)
            else:
                marked.append(p.marked(px))
        self._state = self._state.model_copy(update={"positions": tuple(marked)})

    def set_order_note(self, order_id: str, note: Optional[str]) -> bool:
        """
        Заметка к заявке журнала.

        Returns:
            False если заявки с таким id нет
        """
        orders = list(self._state.orders)
        for i, order in enumerate(orders):
            if order.id == order_id:
                orders[i] = order.with_note(note)
                self._state = self._state.model_copy(update={"orders": tuple(orders)})
                return True
        return False

    def _make_order(
        self, side: OrderSide, symbol: str, qty: int, fill: float, fee: float
    ) -> Order:
        ts = self._clock_fn()
        return Order(
            id=make_order_id(ts),
            side=side,
            symbol=symbol,
            qty=qty,
            price=fill,
            fee=fee,
            ts=ts,
        )
