"""Market — синтетическая вселенная инструментов, часы рынка, ценовой процесс и скоринг.

- Детерминированная генерация вселенной и прогрев
- Общий рыночный фактор + идиосинкратика + возврат к EMA + редкие шоки
- Кросс-секционный скор 0–30
"""

from .clock import ClockAdvanceResult, MarketClock
from .price_step import StepResult, tick_one_day, warm_up
from .scoring import score_universe
from .universe import (
    Universe,
    build_custom_instrument,
    build_instrument,
    generate_symbol,
    init_universe,
    normalize_symbol,
)

__all__ = [
    "ClockAdvanceResult",
    "MarketClock",
    "StepResult",
    "tick_one_day",
    "warm_up",
    "score_universe",
    "Universe",
    "build_custom_instrument",
    "build_instrument",
    "generate_symbol",
    "init_universe",
    "normalize_symbol",
]
