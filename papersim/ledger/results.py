"""
Order results — Результаты paper-заявок и таксономия отказов

Все отказы Buy/Sell восстановимы: они возвращаются как значение
OrderResult(ok=False, reason=...), а не выбрасываются, чтобы UI мог показать
сообщение и дать пользователю повторить заявку с другими параметрами.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RejectReason(str, Enum):
    """Причина отказа в исполнении заявки"""

    NO_QUOTE = "NO_QUOTE"  # Символ неизвестен или цена невалидна
    INSUFFICIENT_CASH = "INSUFFICIENT_CASH"  # Стоимость покупки больше кэша
    NO_POSITION = "NO_POSITION"  # Продажа без открытой позиции
    INVALID_QUANTITY = "INVALID_QUANTITY"  # Количество <= 0 после ограничения

    @property
    def message(self) -> str:
        """Сообщение для пользователя"""
        return REJECT_MESSAGES[self]


REJECT_MESSAGES: dict[RejectReason, str] = {
    RejectReason.NO_QUOTE: "No quote for symbol.",
    RejectReason.INSUFFICIENT_CASH: "Insufficient cash.",
    RejectReason.NO_POSITION: "No position to sell.",
    RejectReason.INVALID_QUANTITY: "Quantity must be > 0.",
}


@dataclass(frozen=True)
class OrderResult:
    """Результат Buy/Sell"""

    ok: bool
    fill_price: Optional[float] = None
    fee: Optional[float] = None
    reject_reason: Optional[RejectReason] = None

    @property
    def reason(self) -> Optional[str]:
        """Текст отказа (None для успешной заявки)"""
        return self.reject_reason.message if self.reject_reason else None

    @classmethod
    def filled(cls, fill_price: float, fee: float) -> "OrderResult":
        return cls(ok=True, fill_price=fill_price, fee=fee)

    @classmethod
    def rejected(cls, reason: RejectReason) -> "OrderResult":
        return cls(ok=False, reject_reason=reason)

    def to_dict(self) -> dict:
        """Форма {ok, fillPrice, fee} / {ok, reason} для внешних вызывающих"""
        if self.ok:
            return {"ok": True, "fillPrice": self.fill_price, "fee": self.fee}
        return {"ok": False, "reason": self.reason}
