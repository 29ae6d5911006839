"""
SimEngine — Фасад симулятора рынка и paper-счёта

Явный экземпляр, которым владеет хост-приложение (без глобального синглтона):
несколько независимых симуляций могут жить в одном процессе.

Модель исполнения: один логический вызывающий (UI event loop), без внутренних
блокировок. Изменения состояния (tick, buy, sell, reset, add_to_universe,
set_order_note) выполняются синхронно в памяти, затем запускается best-effort
асинхронное сохранение, и подписчики уведомляются синхронно в порядке
подписки. Исключение подписчика логируется и не мешает остальным.
"""

import asyncio
import json
import time
from typing import Any, Callable, Optional

import jsonschema
from loguru import logger
from pydantic import ValidationError

from papersim.config import SimConfig
from papersim.core.contracts import validate_paper_state, validate_watchlist
from papersim.core.domain.market_state import Opportunity, Quote, Session
from papersim.core.domain.order import Order, OrderSide
from papersim.core.domain.paper_state import AccountSummary, PaperState
from papersim.core.domain.position import Position
from papersim.core.math import effective_prices
from papersim.core.math.numerical_safeguards import parse_quantity
from papersim.core.math.random_stream import RandomStream
from papersim.ledger.paper_ledger import PaperLedger
from papersim.ledger.results import OrderResult
from papersim.market.clock import MarketClock
from papersim.market.price_step import tick_one_day, warm_up
from papersim.market.scoring import score_universe
from papersim.market.universe import (
    Universe,
    build_custom_instrument,
    init_universe,
    normalize_symbol,
)
from papersim.persistence.storage import (
    InMemoryKeyValueStore,
    KeyValueStore,
    PersistenceFailure,
)

Listener = Callable[[], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


class SimEngine:
    """
    Симулятор рынка + paper-счёт.

    Все методы присутствуют всегда; до load() (или initialize_universe())
    вселенная пуста: snapshot() возвращает [], котировки — None.
    """

    def __init__(
        self,
        config: Optional[SimConfig] = None,
        store: Optional[KeyValueStore] = None,
        clock_fn: Callable[[], int] = _now_ms,
    ):
        """
        Args:
            config: Конфигурация (default SimConfig())
            store: Key-value хранилище (default InMemoryKeyValueStore())
            clock_fn: Источник времени в миллисекундах для timestamp заявок
        """
        self.config = config or SimConfig()
        self._store: KeyValueStore = store if store is not None else InMemoryKeyValueStore()
        self._stream = RandomStream(self.config.seed)
        self._universe = Universe()
        self._clock = MarketClock(self.config.session_period_days)
        self._ledger = PaperLedger(pricer=self, config=self.config, clock_fn=clock_fn)
        self._watchlist: tuple[str, ...] = tuple(self.config.default_watchlist)
        self._listeners: dict[Listener, None] = {}
        self._pending: set[asyncio.Task] = set()
        self._dirty = False
        self._loaded = False

    # =========================================================================
    # ЖИЗНЕННЫЙ ЦИКЛ
    # =========================================================================

    def initialize_universe(self, force: bool = False) -> None:
        """
        Создание и прогрев вселенной (если пуста или force=True).

        force=True пересоздаёт генератор из сида и сбрасывает часы рынка.
        """
        if len(self._universe) and not force:
            return
        if force:
            self._stream = RandomStream(self.config.seed)
            self._clock.reset()
        self._universe = init_universe(self._stream, self.config)
        warm_up(self._universe, self._clock, self._stream, self.config)
        logger.info(
            "Universe ready: {} instruments after {} warm-up steps",
            len(self._universe),
            self.config.warmup_steps,
        )

    async def load(self) -> None:
        """
        Инициализация вселенной и загрузка счёта/watchlist из хранилища.

        Идемпотентна по вселенной. Любая ошибка чтения, разбора или контракта
        даёт откат к текущим (дефолтным) значениям. Всегда уведомляет подписчиков.
        """
        self.initialize_universe()

        try:
            saved = await self._read_json(self.config.paper_key)
            if saved is not None:
                self._ledger.replace_state(self._parse_paper_state(saved))
        except PersistenceFailure as e:
            logger.warning("Paper state not restored, using defaults: {}", e)

        try:
            saved_watchlist = await self._read_json(self.config.watchlist_key)
            if isinstance(saved_watchlist, list) and saved_watchlist:
                self._watchlist = self._parse_watchlist(saved_watchlist)
        except PersistenceFailure as e:
            logger.warning("Watchlist not restored, using defaults: {}", e)

        self._loaded = True
        self._emit()

    async def persist(self) -> None:
        """Best-effort сохранение счёта и watchlist; ошибки подавляются"""
        payloads = (
            (self.config.paper_key, json.dumps(self._ledger.state.to_json_dict())),
            (self.config.watchlist_key, json.dumps(list(self._watchlist))),
        )
        for key, payload in payloads:
            try:
                await self._write(key, payload)
            except PersistenceFailure as e:
                logger.warning("Persist failed: {}", e)

    async def flush(self) -> None:
        """Ожидание завершения запущенных фоновых сохранений"""
        while self._pending:
            await asyncio.gather(*list(self._pending))
            self._pending.difference_update([t for t in self._pending if t.done()])

    # =========================================================================
    # ПОДПИСКИ
    # =========================================================================

    def on(self, callback: Listener) -> Callable[[], None]:
        """
        Подписка на изменения состояния.

        Returns:
            Функция отписки
        """
        self._listeners[callback] = None

        def unsubscribe() -> None:
            self._listeners.pop(callback, None)

        return unsubscribe

    def _emit(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("State listener {!r} failed", callback)

    # =========================================================================
    # РЫНОК
    # =========================================================================

    def tick_all(self, days: object = 1) -> None:
        """Продвижение рынка на days дней, переоценка позиций, уведомление"""
        for _ in range(max(0, parse_quantity(days))):
            step = tick_one_day(self._universe, self._clock, self._stream, self.config)
            if step.market_shock:
                logger.info(
                    "Market shock at day {}: {:+.2%} (market move {:+.2%})",
                    step.clock.day_count,
                    step.market_shock,
                    step.market_move,
                )
        self._ledger.mark_to_market(self.price)
        self._emit()

    def snapshot(self) -> list[Opportunity]:
        """Топ возможностей по кросс-секционному скору (не более 60)"""
        return score_universe(self._universe, self.config)

    def quote(self, symbol: str) -> Optional[Quote]:
        """Котировка; None если символа нет во вселенной"""
        row = self._universe.get(symbol)
        if row is None:
            return None
        session = self._clock.session
        spread = effective_prices.compute_spread(
            row.price,
            session,
            bps_rth=self.config.spread_bps_rth,
            bps_off_hours=self.config.spread_bps_off_hours,
        )
        bid, ask = effective_prices.bid_ask(row.price, spread, min_bid=self.config.min_bid)
        return Quote(bid=bid, ask=ask, last=row.price, spread=spread, session=session)

    def worst_case_fill(self, side: OrderSide | str, symbol: str, qty: object = 1) -> Optional[float]:
        """Консервативная цена исполнения; None если символа нет во вселенной"""
        q = self.quote(symbol)
        if q is None:
            return None
        return effective_prices.worst_case_price(
            OrderSide(side),
            bid=q.bid,
            ask=q.ask,
            spread=q.spread,
            slippage_frac=self.config.slippage_spread_frac,
        )

    def fee_estimate(self, qty: object) -> float:
        """Комиссия за qty акций"""
        return effective_prices.fee_estimate(qty, fee_per_share=self.config.fee_per_share)

    def price(self, symbol: str) -> Optional[float]:
        """Текущая цена; None если символа нет во вселенной"""
        row = self._universe.get(symbol)
        return row.price if row is not None else None

    def add_to_universe(self, symbol: object) -> None:
        """
        Добавление тикера во вселенную (если неизвестен) и в начало watchlist.

        Пустой символ — no-op.
        """
        sym = normalize_symbol(symbol)
        if not sym:
            return
        if sym not in self._universe:
            self._universe.add(build_custom_instrument(sym, self._stream, self.config))
            logger.info("Added {} to universe ({} instruments)", sym, len(self._universe))
        if sym not in self._watchlist:
            self._watchlist = ((sym,) + self._watchlist)[: self.config.watchlist_cap]
        self._after_mutation()

    # =========================================================================
    # PAPER-СЧЁТ
    # =========================================================================

    def buy(self, symbol: str, qty: object) -> OrderResult:
        """Рыночная покупка по worst-case цене"""
        result = self._ledger.buy(symbol, qty)
        if result.ok:
            self._after_mutation()
        return result

    def sell(self, symbol: str, qty: object) -> OrderResult:
        """Рыночная продажа по worst-case цене"""
        result = self._ledger.sell(symbol, qty)
        if result.ok:
            self._after_mutation()
        return result

    def reset_paper(self, starting_cash: object) -> None:
        """Сброс счёта с новым стартовым капиталом (с нижней границей)"""
        self._ledger.reset(starting_cash)
        self._after_mutation()

    def set_order_note(self, order_id: str, note: Optional[str]) -> bool:
        """Заметка к заявке; False если id не найден"""
        updated = self._ledger.set_order_note(order_id, note)
        if updated:
            self._after_mutation()
        return updated

    def account_summary(self) -> AccountSummary:
        return self._ledger.state.summary()

    # =========================================================================
    # READ-ONLY СНАПШОТЫ
    # =========================================================================

    @property
    def paper(self) -> PaperState:
        return self._ledger.state

    @property
    def positions(self) -> tuple[Position, ...]:
        return self._ledger.positions

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._ledger.orders

    @property
    def watchlist(self) -> tuple[str, ...]:
        return self._watchlist

    @property
    def session(self) -> Session:
        return self._clock.session

    @property
    def day_count(self) -> int:
        return self._clock.day_count

    @property
    def universe_size(self) -> int:
        return len(self._universe)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _after_mutation(self) -> None:
        self._schedule_persist()
        self._emit()

    def _schedule_persist(self) -> None:
        """
        Fire-and-forget сохранение.

        Внутри работающего event loop изменения помечают состояние грязным, и
        одна фоновая задача сохраняет его, пока оно снова не станет чистым:
        записи в хранилище никогда не пересекаются. Без loop — синхронный
        прогон корутины.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.persist())
            return
        self._dirty = True
        # задача уже вышла из цикла, но done-callback ещё не отработал
        if any(not t.done() for t in self._pending):
            return
        task = loop.create_task(self._drain_persist())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _drain_persist(self) -> None:
        while self._dirty:
            self._dirty = False
            await self.persist()

    async def _read_json(self, key: str) -> Any:
        try:
            raw = await self._store.get_item(key)
        except Exception as e:
            raise PersistenceFailure(key, f"read failed: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise PersistenceFailure(key, f"invalid JSON: {e}") from e

    async def _write(self, key: str, payload: str) -> None:
        try:
            await self._store.set_item(key, payload)
        except Exception as e:
            raise PersistenceFailure(key, f"write failed: {e}") from e

    def _parse_paper_state(self, saved: Any) -> PaperState:
        """Сохранённый счёт поверх текущего, с проверкой контракта"""
        if not isinstance(saved, dict):
            raise PersistenceFailure(self.config.paper_key, "expected a JSON object")
        merged = {**self._ledger.state.to_json_dict(), **saved}
        try:
            validate_paper_state(merged)
            return PaperState.model_validate(merged)
        except (jsonschema.ValidationError, ValidationError) as e:
            raise PersistenceFailure(self.config.paper_key, f"contract violation: {e}") from e

    def _parse_watchlist(self, saved: list) -> tuple[str, ...]:
        try:
            validate_watchlist(saved)
        except jsonschema.ValidationError as e:
            raise PersistenceFailure(self.config.watchlist_key, f"contract violation: {e}") from e
        return tuple(saved)
