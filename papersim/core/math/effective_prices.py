"""
EffectivePrices — Спред, котировки и worst-case цены исполнения

Модуль вычисляет микроструктуру синтетического рынка:
- spread: базовый спред в bps (шире вне основной сессии), ограниченный снизу
  минимальным тиком, который растёт с ценовым уровнем
- bid/ask: last ± half-spread (bid не ниже min_bid)
- worst-case fill: ask + slippage для BUY, bid - slippage для SELL,
  slippage = доля спреда
- fee: фиксированная комиссия за акцию

Worst-case цена намеренно пессимистична: это не mid и не last. Она не даёт
"обыграть" симулятор нереалистично выгодными исполнениями.
"""

from typing import Final

from papersim.core.domain.market_state import Session
from papersim.core.domain.order import OrderSide
from papersim.core.math.numerical_safeguards import parse_quantity


# =============================================================================
# ПАРАМЕТРЫ ПО УМОЛЧАНИЮ
# =============================================================================

DEFAULT_SPREAD_BPS_RTH: Final[float] = 8.0
DEFAULT_SPREAD_BPS_OFF_HOURS: Final[float] = 18.0
DEFAULT_MIN_BID: Final[float] = 0.01
DEFAULT_SLIPPAGE_SPREAD_FRAC: Final[float] = 0.25
DEFAULT_FEE_PER_SHARE: Final[float] = 0.005

# Ценовые ярусы минимального тика: (верхняя граница цены, тик)
MIN_TICK_TIERS: Final[tuple[tuple[float, float], ...]] = (
    (5.0, 0.005),
    (50.0, 0.01),
)
MIN_TICK_TOP: Final[float] = 0.02


# =============================================================================
# СПРЕД И КОТИРОВКИ
# =============================================================================


def bps_to_fraction(bps: float) -> float:
    """
    Конверсия basis points в дробь.

    Examples:
        >>> bps_to_fraction(8)
        0.0008
    """
    return bps / 10000.0


def min_tick(price: float) -> float:
    """
    Минимальный тик для ценового яруса.

    Ярусы: < $5 → 0.005, < $50 → 0.01, иначе 0.02.
    """
    for upper, tick in MIN_TICK_TIERS:
        if price < upper:
            return tick
    return MIN_TICK_TOP


def compute_spread(
    price: float,
    session: Session,
    bps_rth: float = DEFAULT_SPREAD_BPS_RTH,
    bps_off_hours: float = DEFAULT_SPREAD_BPS_OFF_HOURS,
) -> float:
    """
    Абсолютный спред bid-ask.

    spread = max(min_tick(price), bps / 10000 * price),
    где bps = bps_rth для RTH и bps_off_hours для PRE/POST.

    Args:
        price: Текущая цена инструмента
        session: Текущая торговая сессия
        bps_rth: Спред в основной сессии (bps)
        bps_off_hours: Спред вне основной сессии (bps)

    Returns:
        Спред в долларах (всегда > 0)
    """
    bps = bps_rth if session.is_regular else bps_off_hours
    return max(min_tick(price), bps_to_fraction(bps) * price)


def bid_ask(
    last: float, spread: float, min_bid: float = DEFAULT_MIN_BID
) -> tuple[float, float]:
    """
    Котировка вокруг last.

    Returns:
        (bid, ask), bid = max(min_bid, last - spread/2), ask = last + spread/2
    """
    half = spread / 2.0
    return max(min_bid, last - half), last + half


def worst_case_price(
    side: OrderSide,
    bid: float,
    ask: float,
    spread: float,
    slippage_frac: float = DEFAULT_SLIPPAGE_SPREAD_FRAC,
) -> float:
    """
    Консервативная цена исполнения рыночной заявки.

    BUY:  ask + slippage_frac * spread
    SELL: bid - slippage_frac * spread

    Raises:
        ValueError: Если slippage_frac отрицательный
    """
    if slippage_frac < 0:
        raise ValueError("slippage_frac cannot be negative")

    slip = spread * slippage_frac
    if side == OrderSide.BUY:
        return ask + slip
    return bid - slip


def fee_estimate(qty: object, fee_per_share: float = DEFAULT_FEE_PER_SHARE) -> float:
    """
    Комиссия за заявку: fee_per_share * max(0, int(qty)).

    Examples:
        >>> fee_estimate(10)
        0.05
        >>> fee_estimate(-3)
        0.0
    """
    return fee_per_share * max(0, parse_quantity(qty))
