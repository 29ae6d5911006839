"""
Тесты для доменных моделей: Instrument, Quote, Position, Order, PaperState

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Immutability (frozen=True) и копирование при изменениях
3. Средневзвешенную цену и частичное/полное закрытие позиции
4. Сериализацию в camelCase формат хранилища
"""

import pytest
from pydantic import ValidationError

from papersim.core.domain import (
    Instrument,
    Opportunity,
    Order,
    OrderSide,
    PaperState,
    Position,
    Quote,
    Session,
)


# =============================================================================
# INSTRUMENT / SESSION / QUOTE
# =============================================================================


def make_instrument(**overrides) -> Instrument:
    params = dict(
        symbol="AAA",
        name="Technology Co 1",
        sector="Technology",
        shares=100_000_000,
        drift=0.0005,
        vol=0.02,
        beta=1.0,
        price=100.0,
        ema200=100.0,
        last_close=100.0,
        bars=[0.5] * 24,
    )
    params.update(overrides)
    return Instrument(**params)


class TestInstrument:
    """Тесты модели Instrument"""

    def test_rejects_non_positive_price(self) -> None:
        with pytest.raises(ValueError):
            make_instrument(price=0.0)
        with pytest.raises(ValueError):
            make_instrument(ema200=-1.0)

    def test_push_bar_keeps_length(self) -> None:
        row = make_instrument(bars=[float(i) for i in range(24)])
        row.push_bar(99.0)
        assert len(row.bars) == 24
        assert row.bars[0] == 1.0
        assert row.bars[-1] == 99.0

    def test_rel_to_ema(self) -> None:
        assert make_instrument(price=110.0).rel_to_ema_pct == pytest.approx(10.0)


class TestSession:
    """Тесты цикла сессий"""

    def test_cycle(self) -> None:
        assert Session.RTH.next() == Session.POST
        assert Session.POST.next() == Session.PRE
        assert Session.PRE.next() == Session.RTH

    def test_is_regular(self) -> None:
        assert Session.RTH.is_regular
        assert not Session.PRE.is_regular


class TestQuote:
    """Тесты модели Quote"""

    def test_frozen(self) -> None:
        q = Quote(bid=99.96, ask=100.04, last=100.0, spread=0.08, session=Session.RTH)
        with pytest.raises(ValidationError):
            q.bid = 1.0  # type: ignore[misc]

    def test_opportunity_alias(self) -> None:
        o = Opportunity(symbol="AAA", price=10.0, changePct=1.5, score=20, bars=(0.1, 0.2))
        assert o.change_pct == 1.5
        assert o.model_dump(by_alias=True)["changePct"] == 1.5


# =============================================================================
# POSITION
# =============================================================================


class TestPosition:
    """Тесты для модели Position"""

    @pytest.fixture
    def position(self) -> Position:
        return Position(symbol="AAA", qty=10, avg_price=100.0, last=100.0, pnl=0.0)

    def test_qty_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Position(symbol="AAA", qty=0, avg_price=100.0, last=100.0)

    def test_frozen(self, position: Position) -> None:
        with pytest.raises(ValidationError):
            position.qty = 5  # type: ignore[misc]

    def test_add_reaverages(self, position: Position) -> None:
        """avg = (100*10 + 110*10) / 20 = 105"""
        updated = position.add(10, 110.0)
        assert updated.qty == 20
        assert updated.avg_price == pytest.approx(105.0)
        assert updated.last == pytest.approx(110.0)
        assert updated.pnl == pytest.approx(100.0)
        assert position.qty == 10  # оригинал не изменён

    def test_reduce_partial(self, position: Position) -> None:
        remaining = position.reduce(4, 90.0)
        assert remaining is not None
        assert remaining.qty == 6
        assert remaining.avg_price == pytest.approx(100.0)
        assert remaining.pnl == pytest.approx(-60.0)

    def test_reduce_full_closes(self, position: Position) -> None:
        assert position.reduce(10, 90.0) is None

    def test_marked(self, position: Position) -> None:
        marked = position.marked(120.0)
        assert marked.last == 120.0
        assert marked.pnl == pytest.approx(200.0)
        assert marked.market_value == pytest.approx(1200.0)

    def test_alias_roundtrip(self, position: Position) -> None:
        data = position.model_dump(by_alias=True)
        assert "avgPrice" in data
        assert Position.model_validate(data) == position


# =============================================================================
# ORDER
# =============================================================================


class TestOrder:
    """Тесты для модели Order"""

    @pytest.fixture
    def order(self) -> Order:
        return Order(
            id="1700000000000.ab12cd34",
            side=OrderSide.BUY,
            symbol="AAA",
            qty=10,
            price=100.07,
            fee=0.05,
            ts=1700000000000,
        )

    def test_with_note(self, order: Order) -> None:
        noted = order.with_note("breakout entry")
        assert noted.note == "breakout entry"
        assert order.note is None
        assert noted.id == order.id

    def test_empty_note_clears(self, order: Order) -> None:
        assert order.with_note("x").with_note("").note is None

    def test_invalid_side(self) -> None:
        with pytest.raises(ValidationError):
            Order(id="1", side="HOLD", symbol="AAA", qty=1, price=1.0, ts=0)

    def test_frozen(self, order: Order) -> None:
        with pytest.raises(ValidationError):
            order.note = "x"  # type: ignore[misc]


# =============================================================================
# PAPER STATE
# =============================================================================


class TestPaperState:
    """Тесты для модели PaperState"""

    def test_fresh(self) -> None:
        state = PaperState.fresh(10_000.0)
        assert state.cash == 10_000.0
        assert state.starting_cash == 10_000.0
        assert state.positions == ()
        assert state.orders == ()

    def test_negative_cash_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PaperState(cash=-1.0, starting_cash=10_000.0)

    def test_duplicate_positions_rejected(self) -> None:
        p = Position(symbol="AAA", qty=1, avg_price=10.0, last=10.0)
        with pytest.raises(ValidationError):
            PaperState(cash=0.0, starting_cash=1000.0, positions=(p, p))

    def test_total_value(self) -> None:
        state = PaperState(
            cash=500.0,
            starting_cash=1000.0,
            positions=(
                Position(symbol="AAA", qty=2, avg_price=100.0, last=110.0),
                Position(symbol="BBB", qty=10, avg_price=20.0, last=15.0),
            ),
        )
        assert state.positions_value == pytest.approx(370.0)
        assert state.total_value == pytest.approx(870.0)
        assert state.position("BBB").qty == 10
        assert state.position("ZZZ") is None

    def test_summary(self) -> None:
        state = PaperState(
            cash=500.0,
            starting_cash=1000.0,
            positions=(Position(symbol="AAA", qty=6, avg_price=100.0, last=100.0),),
        )
        summary = state.summary()
        assert summary.equity == pytest.approx(1100.0)
        assert summary.pnl == pytest.approx(100.0)
        assert summary.pnl_pct == pytest.approx(10.0)

    def test_json_dict_uses_store_keys(self) -> None:
        order = Order(id="1.a", side=OrderSide.SELL, symbol="AAA", qty=1, price=9.5, fee=0.005, ts=1)
        state = PaperState(
            cash=100.0,
            starting_cash=1000.0,
            positions=(Position(symbol="AAA", qty=1, avg_price=10.0, last=9.5, pnl=-0.5),),
            orders=(order,),
        )
        data = state.to_json_dict()
        assert set(data) == {"cash", "startingCash", "positions", "orders"}
        assert data["positions"][0]["avgPrice"] == 10.0
        assert data["orders"][0]["side"] == "SELL"
        assert "note" not in data["orders"][0]
        assert PaperState.model_validate(data) == state
