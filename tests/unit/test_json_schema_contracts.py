"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов сохранённого состояния:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей, типов и constraints
- Интеграция с Pydantic моделями
"""

import pytest
from jsonschema import ValidationError

from papersim.core.contracts import (
    PaperStateValidator,
    SchemaLoader,
    WatchlistValidator,
    validate_paper_state,
    validate_watchlist,
)
from papersim.core.domain import Order, OrderSide, PaperState, Position


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_paper_state():
    """Валидный paper_state в формате хранилища."""
    return {
        "cash": 8999.25,
        "startingCash": 10000,
        "positions": [
            {"symbol": "AAA", "qty": 10, "avgPrice": 100.07, "last": 100.07, "pnl": 0},
        ],
        "orders": [
            {
                "id": "1700000000000.ab12",
                "side": "BUY",
                "symbol": "AAA",
                "qty": 10,
                "price": 100.07,
                "fee": 0.05,
                "ts": 1700000000000,
                "note": "first trade",
            }
        ],
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем"""

    def test_schemas_load_and_pass_meta_validation(self) -> None:
        loader = SchemaLoader()
        for name in ("paper_state", "watchlist"):
            schema = loader.load_schema(name)
            assert schema["title"] == name

    def test_schema_cached(self) -> None:
        loader = SchemaLoader()
        assert loader.load_schema("paper_state") is loader.load_schema("paper_state")

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_dir(self, tmp_path) -> None:
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")


# =============================================================================
# PAPER STATE CONTRACT
# =============================================================================


class TestPaperStateContract:
    """Тесты контракта paper_state"""

    def test_valid(self, valid_paper_state) -> None:
        validate_paper_state(valid_paper_state)

    @pytest.mark.parametrize("field", ["cash", "startingCash", "positions", "orders"])
    def test_required_fields(self, valid_paper_state, field) -> None:
        del valid_paper_state[field]
        with pytest.raises(ValidationError):
            validate_paper_state(valid_paper_state)

    def test_negative_cash(self, valid_paper_state) -> None:
        valid_paper_state["cash"] = -0.01
        with pytest.raises(ValidationError):
            validate_paper_state(valid_paper_state)

    def test_zero_qty_position(self, valid_paper_state) -> None:
        valid_paper_state["positions"][0]["qty"] = 0
        with pytest.raises(ValidationError):
            PaperStateValidator().validate(valid_paper_state)

    def test_unknown_side(self, valid_paper_state) -> None:
        valid_paper_state["orders"][0]["side"] = "HOLD"
        with pytest.raises(ValidationError) as exc_info:
            validate_paper_state(valid_paper_state)
        assert exc_info.value.validator == "enum"

    def test_wrong_type(self, valid_paper_state) -> None:
        valid_paper_state["cash"] = "lots"
        with pytest.raises(ValidationError):
            validate_paper_state(valid_paper_state)

    def test_model_dump_satisfies_contract(self) -> None:
        """Сериализованная модель проходит контракт"""
        state = PaperState(
            cash=10.0,
            starting_cash=1000.0,
            positions=(Position(symbol="AAA", qty=3, avg_price=5.0, last=6.0, pnl=3.0),),
            orders=(
                Order(id="1.x", side=OrderSide.BUY, symbol="AAA", qty=3, price=5.0, fee=0.015, ts=1),
            ),
        )
        validate_paper_state(state.to_json_dict())

    def test_contract_roundtrip_into_model(self, valid_paper_state) -> None:
        state = PaperState.model_validate(valid_paper_state)
        assert state.positions[0].avg_price == pytest.approx(100.07)
        assert state.orders[0].note == "first trade"


# =============================================================================
# WATCHLIST CONTRACT
# =============================================================================


class TestWatchlistContract:
    """Тесты контракта watchlist"""

    def test_valid(self) -> None:
        validate_watchlist(["AAPL", "NVDA"])
        WatchlistValidator().validate(["AAPL"])

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_watchlist([])

    def test_non_string_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_watchlist(["AAPL", 42])

    def test_not_a_list(self) -> None:
        with pytest.raises(ValidationError):
            validate_watchlist({"AAPL": True})
