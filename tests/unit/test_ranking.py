"""
Юнит-тесты для кросс-секционного ранжирования

Проверяет:
1. Перцентильный ранг через бинарный поиск (последний элемент <= x)
2. Округление .5 вверх
3. Композитный скор и его границы
"""

import pytest

from papersim.core.math.ranking import composite_score, percentile_rank, round_half_up


class TestPercentileRank:
    """Тесты перцентильного ранга"""

    def test_extremes(self) -> None:
        s = [1.0, 2.0, 3.0]
        assert percentile_rank(1.0, s) == 0.0
        assert percentile_rank(3.0, s) == 1.0

    def test_middle(self) -> None:
        assert percentile_rank(2.0, [1.0, 2.0, 3.0]) == pytest.approx(0.5)

    def test_ties_take_last_index(self) -> None:
        """Для повторов берётся индекс последнего равного"""
        assert percentile_rank(1.0, [1.0, 1.0, 2.0]) == pytest.approx(0.5)

    def test_below_population(self) -> None:
        assert percentile_rank(-10.0, [1.0, 2.0, 3.0]) == 0.0

    def test_single_element(self) -> None:
        assert percentile_rank(5.0, [5.0]) == 0.0

    def test_monotonic(self) -> None:
        s = sorted([0.3, -1.2, 4.5, 2.2, 0.0, 7.1])
        ranks = [percentile_rank(x, s) for x in s]
        assert ranks == sorted(ranks)
        assert all(0.0 <= r <= 1.0 for r in ranks)


class TestCompositeScore:
    """Тесты композитного скора"""

    def test_round_half_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(2.49) == 2

    def test_bounds(self) -> None:
        assert composite_score(1.0, 1.0) == 30
        assert composite_score(0.0, 0.0) == 0

    def test_weights(self) -> None:
        """Тренд весит 0.6, моментум 0.4"""
        assert composite_score(1.0, 0.0) == 18
        assert composite_score(0.0, 1.0) == 12
        assert composite_score(0.5, 0.5) == 15

    def test_clamped(self) -> None:
        """Ранги вне [0, 1] не выводят скор за границы"""
        assert composite_score(2.0, 2.0) == 30
        assert composite_score(-1.0, -1.0) == 0

    def test_custom_scale(self) -> None:
        assert composite_score(1.0, 1.0, scale=100) == 100
