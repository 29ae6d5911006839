"""
Contract Validation Module

Модуль для валидации JSON контрактов сохранённого состояния papersim.
"""

from .validators import (
    ContractValidator,
    PaperStateValidator,
    SchemaLoader,
    WatchlistValidator,
    validate_paper_state,
    validate_watchlist,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PaperStateValidator",
    "WatchlistValidator",
    # Functions
    "validate_paper_state",
    "validate_watchlist",
]
