"""Roto standings: sum category points into a ranked standings table."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

from src.scoring_engine.category_ranker import TiePolicy, rank_category
from src.scoring_engine.config import CATEGORY_CONFIG, DEFAULT_TIE_POLICY
from src.scoring_engine.models import (
    CategoryDefinition,
    StandingsRow,
    TeamId,
    TeamStatLine,
)

logger = logging.getLogger(__name__)


def _with_team_identity(rows: Iterable[TeamStatLine]) -> List[TeamStatLine]:
    """Drop rows that carry no team identity, warning for each one."""
    kept = []
    for idx, line in enumerate(rows):
        if not line.has_team_identity():
            logger.warning(
                "Skipping stat row %d (%r): missing team identity", idx, line.team_name
            )
            continue
        kept.append(line)
    return kept


def _first_per_team(lines: List[TeamStatLine]) -> List[TeamStatLine]:
    """Keep the first stat line per team id."""
    seen = set()
    out = []
    for line in lines:
        if line.team_id in seen:
            logger.warning(
                "Duplicate stat row for team %s; keeping the first", line.team_id
            )
            continue
        seen.add(line.team_id)
        out.append(line)
    return out


def compute_standings(
    rows: Sequence[TeamStatLine],
    categories: Sequence[CategoryDefinition] = CATEGORY_CONFIG,
    tie_policy: Union[str, TiePolicy] = DEFAULT_TIE_POLICY,
    include_breakdown: bool = False,
) -> List[StandingsRow]:
    """Compute overall standings across *categories*.

    Each category is ranked independently and the resulting points are
    summed per team. Teams with equal totals keep their input order.

    Args:
        rows: Team stat lines for one period or season.
        categories: Scoring categories to rank.
        tie_policy: Tie handling passed through to the category ranker.
        include_breakdown: Attach per-category points to each row.

    Returns:
        One :class:`StandingsRow` per team, highest total first.
    """
    lines = _with_team_identity(rows)
    if not lines:
        return []

    lines = _first_per_team(lines)
    totals: Dict[TeamId, StandingsRow] = {}
    for line in lines:
        totals[line.team_id] = StandingsRow(
            team_id=line.team_id,
            team_name=line.team_name,
            points=0,
            categories={} if include_breakdown else None,
        )
    for category in categories:
        for cat_row in rank_category(lines, category, tie_policy):
            standing = totals[cat_row.team_id]
            standing.points += cat_row.points
            if standing.categories is not None:
                standing.categories[category.key] = cat_row.points

    standings = sorted(totals.values(), key=lambda s: s.points, reverse=True)
    for position, standing in enumerate(standings, start=1):
        standing.rank = position

    logger.debug(
        "Computed standings for %d teams over %d categories",
        len(standings), len(categories),
    )
    return standings


def compute_category_standings(
    rows: Sequence[TeamStatLine],
    categories: Sequence[CategoryDefinition] = CATEGORY_CONFIG,
    tie_policy: Union[str, TiePolicy] = DEFAULT_TIE_POLICY,
) -> List[Dict]:
    """Rank every category separately for a category-by-category view.

    Returns:
        List of ``{"key", "label", "rows"}`` dicts in category order, where
        ``rows`` holds the :class:`CategoryRankRow` results, best first.
    """
    lines = _first_per_team(_with_team_identity(rows))
    return [
        {
            "key": category.key,
            "label": category.label,
            "rows": rank_category(lines, category, tie_policy),
        }
        for category in categories
    ]


def apply_rank_deltas(
    current: Sequence[StandingsRow],
    previous: Optional[Sequence[StandingsRow]],
) -> Sequence[StandingsRow]:
    """Set each row's ``delta`` to its movement since *previous*.

    ``delta = previous rank - current rank``, so climbing from 4th to 2nd
    gives +2. Teams absent from *previous* (or no previous table) get 0.

    Returns:
        *current*, updated in place.
    """
    previous_ranks = {row.team_id: row.rank for row in previous or []}
    for row in current:
        before = previous_ranks.get(row.team_id)
        row.delta = before - row.rank if before else 0
    return current


def _norm_code(value) -> str:
    return str(value if value is not None else "").strip().upper()


def build_team_name_map(
    standings_rows: Optional[Union[Dict, Sequence[Dict]]],
    stat_rows: Sequence[Dict],
) -> Dict[str, str]:
    """Map normalized team codes to display names.

    Names come from stored standings rows first (``teamCode``/``code``/
    ``team`` with ``teamName``/``name``/``team``). Codes that only appear in
    player stat rows (``ogba_team_code``) map to themselves.
    """
    if isinstance(standings_rows, dict):
        rows = standings_rows.get("rows") or []
    else:
        rows = standings_rows or []

    names: Dict[str, str] = {}
    for row in rows:
        code = _norm_code(row.get("teamCode") or row.get("code") or row.get("team"))
        name = row.get("teamName") or row.get("name") or row.get("team") or ""
        if code and name:
            names[code] = name

    for stat in stat_rows:
        code = _norm_code(stat.get("ogba_team_code"))
        if code and code not in names:
            names[code] = code

    return names
