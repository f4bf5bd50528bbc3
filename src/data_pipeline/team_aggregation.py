"""Aggregate per-player stats into per-team stat lines.

Counting stats are summed by team. Rate stats are rebuilt from their
components rather than averaged:

    AVG  = H / AB
    ERA  = ER * 9 / IP
    WHIP = sum(WHIP * IP) / IP

Each rate is 0 when its denominator is 0.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

from src.scoring_engine.models import TeamStatLine

logger = logging.getLogger(__name__)

_HITTING_COLUMNS = ["R", "HR", "RBI", "SB", "H", "AB"]
_PITCHING_COLUMNS = ["W", "SV", "K", "ER", "IP"]

# Team-level output column -> scoring category key
_CATEGORY_KEYS = {
    "R": "R", "HR": "HR", "RBI": "RBI", "SB": "SB", "AVG": "AVG",
    "W": "W", "SV": "S", "K": "K", "ERA": "ERA", "WHIP": "WHIP",
}

TEAM_COLUMNS = [
    "Team_Code", "R", "HR", "RBI", "SB", "H", "AB", "AVG",
    "W", "SV", "K", "ER", "IP", "ERA", "WHIP",
]


def _ratio(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Elementwise numerator / denominator, 0 where the denominator is 0."""
    safe = denominator.where(denominator != 0)
    return (numerator / safe).fillna(0.0)


class TeamAggregator:
    """Rolls cleaned player rows up into one row per fantasy team."""

    def aggregate(self, df: pd.DataFrame) -> pd.DataFrame:
        """Aggregate player rows by ``Team_Code``.

        Every row's hitting and pitching columns are summed, so a position
        player who pitches keeps their hitting line.

        Returns:
            DataFrame with ``TEAM_COLUMNS``, one row per team, sorted by
            team code.
        """
        if df.empty:
            return pd.DataFrame(columns=TEAM_COLUMNS)

        work = df.copy()
        work["WHIP_IP"] = work["WHIP"] * work["IP"]

        grouped = (
            work.groupby("Team_Code", sort=True)[_HITTING_COLUMNS + _PITCHING_COLUMNS + ["WHIP_IP"]]
            .sum()
            .reset_index()
        )

        grouped["AVG"] = _ratio(grouped["H"], grouped["AB"])
        grouped["ERA"] = _ratio(grouped["ER"] * 9, grouped["IP"])
        grouped["WHIP"] = _ratio(grouped["WHIP_IP"], grouped["IP"])

        out = grouped[TEAM_COLUMNS]
        logger.info("Aggregated %d player rows into %d teams", len(df), len(out))
        return out

    @staticmethod
    def to_stat_lines(
        team_df: pd.DataFrame,
        team_names: Optional[Dict[str, str]] = None,
    ) -> List[TeamStatLine]:
        """Convert aggregated team rows to :class:`TeamStatLine` objects.

        Args:
            team_df: Output of :meth:`aggregate`.
            team_names: Optional team code -> display name map. Codes
                without a name use the code itself.
        """
        team_names = team_names or {}
        lines = []
        for _, row in team_df.iterrows():
            code = row["Team_Code"]
            stats = {key: float(row[col]) for col, key in _CATEGORY_KEYS.items()}
            lines.append(TeamStatLine(
                team_id=code,
                team_name=team_names.get(code, code),
                stats=stats,
            ))
        return lines
