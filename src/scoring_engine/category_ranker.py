"""Per-category ranking of team stat lines.

Ranks every team in a single scoring category and converts positions into
roto points: with N teams, the best team earns N points and the worst 1.
"""

import logging
from enum import Enum
from typing import List, Sequence, Union

from src.scoring_engine.config import DEFAULT_TIE_POLICY
from src.scoring_engine.models import CategoryDefinition, CategoryRankRow, TeamStatLine

logger = logging.getLogger(__name__)


class TiePolicy(str, Enum):
    """How teams with an identical category value are ranked.

    * ``SEQUENTIAL`` - distinct ranks in input order (first seen ranks higher).
    * ``AVERAGE`` - shared best rank, points averaged over the tied block.
    * ``COMPETITION`` - shared best rank ("1, 2, 2, 4") and that rank's points.
    """

    SEQUENTIAL = "sequential"
    AVERAGE = "average"
    COMPETITION = "competition"

    @classmethod
    def parse(cls, value: Union[str, "TiePolicy"]) -> "TiePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Invalid tie_policy: {value!r}. "
                f"Must be one of {[p.value for p in cls]}."
            ) from None


def _points_for_rank(team_count: int, rank: int) -> int:
    return team_count - rank + 1


def rank(
    rows: Sequence[TeamStatLine],
    category_key: str,
    lower_is_better: bool,
    tie_policy: Union[str, TiePolicy] = DEFAULT_TIE_POLICY,
) -> List[CategoryRankRow]:
    """Rank *rows* on *category_key* and assign points.

    Sorting is stable, so under ``SEQUENTIAL`` equal values keep their input
    order. Missing or non-numeric values read as 0.

    Returns:
        One :class:`CategoryRankRow` per input row, best first.
    """
    policy = TiePolicy.parse(tie_policy)
    if not rows:
        return []

    valued = [(line, line.get_stat(category_key)) for line in rows]
    ordered = sorted(valued, key=lambda item: item[1], reverse=not lower_is_better)
    n = len(ordered)

    result: List[CategoryRankRow] = []
    i = 0
    while i < n:
        j = i
        if policy is not TiePolicy.SEQUENTIAL:
            while j + 1 < n and ordered[j + 1][1] == ordered[i][1]:
                j += 1

        block_start = i + 1
        for k in range(i, j + 1):
            line, value = ordered[k]
            if policy is TiePolicy.SEQUENTIAL:
                row_rank = k + 1
                points = _points_for_rank(n, row_rank)
            elif policy is TiePolicy.AVERAGE:
                row_rank = block_start
                block_points = [_points_for_rank(n, r) for r in range(block_start, j + 2)]
                points = sum(block_points) / len(block_points)
            else:
                row_rank = block_start
                points = _points_for_rank(n, block_start)

            result.append(CategoryRankRow(
                team_id=line.team_id,
                team_name=line.team_name,
                value=value,
                rank=row_rank,
                points=points,
            ))

        if j > i:
            logger.debug(
                "%s: %d teams tied at %s (ranks %d-%d, %s)",
                category_key, j - i + 1, ordered[i][1], block_start, j + 1, policy.value,
            )
        i = j + 1

    return result


def rank_category(
    rows: Sequence[TeamStatLine],
    category: CategoryDefinition,
    tie_policy: Union[str, TiePolicy] = DEFAULT_TIE_POLICY,
) -> List[CategoryRankRow]:
    """Convenience wrapper around :func:`rank` for a configured category."""
    return rank(rows, category.key, category.lower_is_better, tie_policy)
