"""Ledger — paper-счёт и результаты рыночных заявок."""

from .paper_ledger import FillPricer, PaperLedger, make_order_id, resolve_starting_cash
from .results import REJECT_MESSAGES, OrderResult, RejectReason

__all__ = [
    "FillPricer",
    "PaperLedger",
    "make_order_id",
    "resolve_starting_cash",
    "REJECT_MESSAGES",
    "OrderResult",
    "RejectReason",
]
