"""
Core math modules для papersim

Детерминированный генератор, численные защиты, микроструктура котировок и
кросс-секционное ранжирование.
"""

# Numerical Safeguards
from papersim.core.math.numerical_safeguards import (
    EPS_PRICE,
    EPS_SPAN,
    clamp,
    denom_safe_unsigned,
    is_valid_float,
    min_max_normalize,
    parse_quantity,
    relative_change,
)

# Random Stream
from papersim.core.math.random_stream import RandomStream, fnv1a_32, xorshift32

# Effective Prices
from papersim.core.math.effective_prices import (
    DEFAULT_FEE_PER_SHARE,
    DEFAULT_MIN_BID,
    DEFAULT_SLIPPAGE_SPREAD_FRAC,
    DEFAULT_SPREAD_BPS_OFF_HOURS,
    DEFAULT_SPREAD_BPS_RTH,
    OrderSide,
    bid_ask,
    bps_to_fraction,
    compute_spread,
    fee_estimate,
    min_tick,
    worst_case_price,
)

# Ranking
from papersim.core.math.ranking import composite_score, percentile_rank, round_half_up

__all__ = [
    # Numerical safeguards
    "EPS_PRICE",
    "EPS_SPAN",
    "clamp",
    "denom_safe_unsigned",
    "is_valid_float",
    "min_max_normalize",
    "parse_quantity",
    "relative_change",
    # Random stream
    "RandomStream",
    "fnv1a_32",
    "xorshift32",
    # Effective prices
    "DEFAULT_FEE_PER_SHARE",
    "DEFAULT_MIN_BID",
    "DEFAULT_SLIPPAGE_SPREAD_FRAC",
    "DEFAULT_SPREAD_BPS_OFF_HOURS",
    "DEFAULT_SPREAD_BPS_RTH",
    "OrderSide",
    "bid_ask",
    "bps_to_fraction",
    "compute_spread",
    "fee_estimate",
    "min_tick",
    "worst_case_price",
    # Ranking
    "composite_score",
    "percentile_rank",
    "round_half_up",
]
