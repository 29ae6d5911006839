"""
PriceStep — Один симулированный торговый день для всей вселенной

Доходность инструмента за день:
    ret = drift + vol * (u - 0.5) + beta * market + reversion + shock

- market: общий рыночный фактор, тянется ОДИН раз на шаг и разделяется всеми
  инструментами (коррелированные "рыночные" дни)
- reversion: возврат к EMA-200, clamp((ema - price) / ema * k, ±cap)
- shock: редкий идиосинкратический шок

Порядок (фактор → инструменты по порядку) обязателен: он даёт и общие
движения, и кросс-секционный разброс, на котором держится скоринг.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. price >= price_floor > 0 и ema200 > 0 после любого шага
2. Длина спарклайна не меняется
"""

from dataclasses import dataclass

from loguru import logger

from papersim.config import SimConfig
from papersim.core.domain.instrument import Instrument
from papersim.core.math.numerical_safeguards import clamp, relative_change
from papersim.core.math.random_stream import RandomStream
from papersim.market.clock import ClockAdvanceResult, MarketClock
from papersim.market.universe import Universe


@dataclass(frozen=True)
class StepResult:
    """Результат шага ценового процесса"""

    market_move: float
    market_shock: float
    clock: ClockAdvanceResult


def draw_market_factor(r: RandomStream, config: SimConfig) -> tuple[float, float]:
    """
    Общий рыночный фактор дня.

    Returns:
        (market_move, market_shock)
    """
    shock = 0.0
    if r() < config.market_shock_prob:
        shock = (r() - 0.5) * config.market_shock_size
    move = config.market_drift + config.market_vol * (r() - 0.5) + shock
    return move, shock


def reversion_term(row: Instrument, config: SimConfig) -> float:
    """Ограниченный возврат к EMA: clamp((ema - price) / ema * k, ±cap)"""
    pull = -relative_change(row.price, row.ema200) * config.reversion_strength
    return clamp(pull, -config.reversion_cap, config.reversion_cap)


def apply_return(row: Instrument, ret: float, config: SimConfig) -> None:
    """
    Применение дневной доходности к инструменту.

    Обновляет price, ema200 (span = config.ema_span), change_pct, last_close
    и сдвигает спарклайн.
    """
    new_price = max(config.price_floor, row.price * (1.0 + ret))
    row.ema200 = row.ema200 + (new_price - row.ema200) / config.ema_span
    row.change_pct = relative_change(new_price, row.last_close) * 100.0
    row.last_close = new_price
    row.price = new_price

    last_bar = row.bars[-1] if row.bars else 0.5
    next_bar = clamp(
        last_bar + (row.change_pct / 100.0) * config.spark_gain,
        config.spark_floor,
        1.0,
    )
    row.push_bar(next_bar)


def tick_one_day(
    universe: Universe,
    clock: MarketClock,
    r: RandomStream,
    config: SimConfig,
) -> StepResult:
    """Один шаг ценового процесса для всей вселенной."""
    market_move, market_shock = draw_market_factor(r, config)

    for row in universe:
        reversion = reversion_term(row, config)
        shock = 0.0
        if r() < config.idio_shock_prob:
            shock = (r() - 0.5) * config.idio_shock_size
        ret = row.drift + row.vol * (r() - 0.5) + row.beta * market_move + reversion + shock
        apply_return(row, ret, config)

    advance = clock.advance()
    if advance.session_changed:
        logger.debug(
            "Session {} -> {} at day {}",
            advance.previous_session.value,
            advance.session.value,
            advance.day_count,
        )
    return StepResult(market_move=market_move, market_shock=market_shock, clock=advance)


def warm_up(
    universe: Universe,
    clock: MarketClock,
    r: RandomStream,
    config: SimConfig,
    steps: int | None = None,
) -> int:
    """
    Прогрев вселенной: steps шагов (default config.warmup_steps).

    Нужен, чтобы EMA-якоря ушли от стартовой цены до первого использования.

    Returns:
        Число дней с рыночным шоком
    """
    steps = config.warmup_steps if steps is None else steps
    shocks = 0
    for _ in range(steps):
        if tick_one_day(universe, clock, r, config).market_shock:
            shocks += 1
    logger.debug(
        "Warm-up complete: {} steps, day {}, {} market shocks",
        steps, clock.day_count, shocks,
    )
    return shocks
