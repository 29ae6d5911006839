"""Market Clock — счётчик симулированных дней и цикл торговых сессий.

- Счётчик дней монотонно растёт
- Каждые session_period_days дней сессия переключается RTH → POST → PRE → RTH
- Сброс только через переинициализацию вселенной
"""

from dataclasses import dataclass

from papersim.core.domain.market_state import Session


@dataclass(frozen=True)
class ClockAdvanceResult:
    """Результат продвижения часов на один день."""

    day_count: int
    session: Session
    previous_session: Session
    session_changed: bool


class MarketClock:
    """Часы рынка.

    States:
    - RTH: основная сессия, узкий спред
    - POST: после закрытия, широкий спред
    - PRE: до открытия, широкий спред
    """

    def __init__(self, session_period_days: int = 30):
        """
        Args:
            session_period_days: через сколько дней переключается сессия (default 30)
        """
        if session_period_days < 1:
            raise ValueError(f"session_period_days must be >= 1, got {session_period_days}")
        self.session_period_days = session_period_days
        self._day_count = 0
        self._session = Session.RTH

    @property
    def day_count(self) -> int:
        return self._day_count

    @property
    def session(self) -> Session:
        return self._session

    def advance(self) -> ClockAdvanceResult:
        """Продвижение на один симулированный день."""
        previous = self._session
        self._day_count += 1
        if self._day_count % self.session_period_days == 0:
            self._session = previous.next()

        return ClockAdvanceResult(
            day_count=self._day_count,
            session=self._session,
            previous_session=previous,
            session_changed=self._session != previous,
        )

    def reset(self) -> None:
        """Сброс в начальное состояние (день 0, RTH)."""
        self._day_count = 0
        self._session = Session.RTH
