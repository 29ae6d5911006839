"""
SimConfig — Конфигурация симулятора рынка и paper-счёта

Все числовые константы движка собраны здесь: параметры генерации вселенной,
ценового процесса, сессий, спреда/проскальзывания/комиссий, скоринга и
хранилища. Константы подобраны "на ощущение" и не откалиброваны по реальному
рынку, поэтому являются конфигурацией, а не контрактом.

Инварианты:
1. warmup_steps >= ema_span (EMA должна успеть сойтись до первого использования)
2. Веса скоринга неотрицательны и в сумме дают 1.0
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# LOGGING
# =============================================================================


class LogConfig(BaseModel):
    """Параметры логирования (loguru)"""

    level: str = Field(default="INFO", description="Минимальный уровень логов")
    file_path: Optional[str] = Field(
        default=None, description="Файл для логов (None — только stderr)"
    )
    rotation: str = Field(default="1 day", description="Ротация файла логов")
    retention: str = Field(default="30 days", description="Срок хранения логов")

    model_config = {"frozen": True}


# =============================================================================
# SIM CONFIG
# =============================================================================


DEFAULT_SECTORS: tuple[str, ...] = (
    "Technology",
    "Financial",
    "Healthcare",
    "Energy",
    "Consumer",
    "Industrial",
    "Utilities",
)

DEFAULT_WATCHLIST: tuple[str, ...] = (
    "AAPL",
    "NVDA",
    "MSFT",
    "TSLA",
    "AMZN",
    "META",
    "GOOGL",
    "AMD",
    "AVGO",
    "NFLX",
    "SHOP",
    "SMCI",
)


class SimConfig(BaseModel):
    """
    Полная конфигурация движка.

    Immutable модель (frozen=True). Значения по умолчанию задают
    стандартный учебный режим.
    """

    # Генератор и вселенная
    seed: str = Field(default="TRADE-AUTOPILOT-SIM", min_length=1)
    universe_size: int = Field(default=80, ge=1, le=26**3)
    sectors: tuple[str, ...] = Field(default=DEFAULT_SECTORS, min_length=1)
    spark_length: int = Field(default=24, ge=2)

    # Прогрев и EMA
    ema_span: int = Field(default=200, ge=1)
    warmup_steps: int = Field(default=250, ge=0)

    # Рыночный фактор (общий для всех инструментов)
    market_drift: float = 0.0001
    market_vol: float = Field(default=0.008, ge=0)
    market_shock_prob: float = Field(default=0.02, ge=0, le=1)
    market_shock_size: float = Field(default=0.08, ge=0)

    # Идиосинкратическая часть
    idio_shock_prob: float = Field(default=0.01, ge=0, le=1)
    idio_shock_size: float = Field(default=0.15, ge=0)
    reversion_strength: float = Field(default=0.05, ge=0)
    reversion_cap: float = Field(default=0.02, ge=0)
    price_floor: float = Field(default=0.5, gt=0)
    spark_gain: float = Field(default=0.2, ge=0)
    spark_floor: float = Field(default=0.05, ge=0, le=1)

    # Сессии
    session_period_days: int = Field(default=30, ge=1)

    # Спред, проскальзывание, комиссии
    spread_bps_rth: float = Field(default=8.0, ge=0)
    spread_bps_off_hours: float = Field(default=18.0, ge=0)
    min_bid: float = Field(default=0.01, gt=0)
    slippage_spread_frac: float = Field(default=0.25, ge=0)
    fee_per_share: float = Field(default=0.005, ge=0)

    # Paper-счёт
    default_starting_cash: float = Field(default=10_000.0, gt=0)
    min_starting_cash: float = Field(default=1_000.0, gt=0)
    cash_epsilon: float = Field(default=1e-8, ge=0)

    # Скоринг
    score_trend_weight: float = Field(default=0.6, ge=0, le=1)
    score_momentum_weight: float = Field(default=0.4, ge=0, le=1)
    score_scale: int = Field(default=30, ge=1)
    score_top_n: int = Field(default=60, ge=1)

    # Watchlist и хранилище
    default_watchlist: tuple[str, ...] = DEFAULT_WATCHLIST
    watchlist_cap: int = Field(default=50, ge=1)
    paper_key: str = "paper.state.v3"
    watchlist_key: str = "watchlist.v1"

    log: LogConfig = Field(default_factory=LogConfig)

    model_config = {"frozen": True}

    @field_validator("sectors")
    @classmethod
    def validate_sectors(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Пустые названия секторов запрещены"""
        if any(not s.strip() for s in v):
            raise ValueError("sector names must be non-empty")
        return v

    @model_validator(mode="after")
    def validate_consistency(self) -> "SimConfig":
        """Проверка согласованности прогрева и весов скоринга"""
        if self.warmup_steps < self.ema_span:
            raise ValueError(
                f"warmup_steps {self.warmup_steps} must be >= ema_span {self.ema_span}"
            )
        weights = self.score_trend_weight + self.score_momentum_weight
        if abs(weights - 1.0) > 1e-9:
            raise ValueError(f"score weights must sum to 1.0, got {weights}")
        if self.min_starting_cash > self.default_starting_cash:
            raise ValueError("min_starting_cash cannot exceed default_starting_cash")
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SimConfig":
        """
        Построение конфигурации из обычного dict (например, распарсенного JSON).

        Списки приводятся к кортежам автоматически.
        """
        return cls.model_validate(dict(data))
