"""
Domain models and value objects.

Contains fundamental domain entities like Instrument, Quote, Position, Order, PaperState.
"""

from papersim.core.domain.instrument import Instrument
from papersim.core.domain.market_state import SESSION_CYCLE, Opportunity, Quote, Session
from papersim.core.domain.order import Order, OrderSide
from papersim.core.domain.paper_state import AccountSummary, PaperState
from papersim.core.domain.position import Position

__all__ = [
    # Market
    "Instrument",
    "Opportunity",
    "Quote",
    "Session",
    "SESSION_CYCLE",
    # Paper account
    "AccountSummary",
    "Order",
    "OrderSide",
    "PaperState",
    "Position",
]
