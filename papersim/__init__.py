"""
papersim — синтетический рынок и paper-трейдинг для обучающего режима

Популяция синтетических инструментов под стохастическим ценовым процессом,
bid/ask микроструктура и worst-case исполнение, кэш/позиции/журнал заявок и
кросс-секционный скор 0–30.
"""

from papersim.config import LogConfig, SimConfig
from papersim.engine import SimEngine
from papersim.ledger import OrderResult, RejectReason
from papersim.persistence import InMemoryKeyValueStore, JsonFileKeyValueStore

__version__ = "0.3.0"

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "LogConfig",
    "OrderResult",
    "RejectReason",
    "SimConfig",
    "SimEngine",
]
