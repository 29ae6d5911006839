"""
Scoring — Кросс-секционный скор возможностей 0–30

Для каждого инструмента:
- трендовый сигнал: (price - ema) / ema * 100
- моментум: дневное изменение в процентах

Оба сигнала переводятся в перцентильные ранги внутри текущей популяции и
смешиваются с весами 0.6 / 0.4. Скор пересчитывается заново на каждый вызов,
не сглаживается и не хранит память о прошлых значениях: для одного и того же
состояния вселенной результат побитно совпадает.
"""

from papersim.config import SimConfig
from papersim.core.domain.market_state import Opportunity
from papersim.core.math.ranking import composite_score, percentile_rank
from papersim.market.universe import Universe


def score_universe(universe: Universe, config: SimConfig) -> list[Opportunity]:
    """
    Ранжированный список возможностей.

    Returns:
        Не более config.score_top_n строк, отсортированных по убыванию скора
        (порядок вселенной сохраняется при равных скорах)
    """
    rows = list(universe)
    if not rows:
        return []

    rels = [row.rel_to_ema_pct for row in rows]
    moms = [row.change_pct for row in rows]
    sorted_rels = sorted(rels)
    sorted_moms = sorted(moms)

    out: list[Opportunity] = []
    for row, rel, mom in zip(rows, rels, moms):
        score = composite_score(
            percentile_rank(rel, sorted_rels),
            percentile_rank(mom, sorted_moms),
            trend_weight=config.score_trend_weight,
            momentum_weight=config.score_momentum_weight,
            scale=config.score_scale,
        )
        out.append(
            Opportunity(
                symbol=row.symbol,
                price=row.price,
                change_pct=row.change_pct,
                score=score,
                bars=tuple(row.bars),
            )
        )

    out.sort(key=lambda o: o.score, reverse=True)
    return out[: config.score_top_n]
