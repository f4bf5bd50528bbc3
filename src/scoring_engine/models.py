"""Data models for the scoring engine."""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

TeamId = Union[int, str]


def to_number(value, default: float = 0.0) -> float:
    """Parse *value* as a finite float, returning *default* when it can't be.

    Accepts ints, floats and numeric strings (including comma-formatted
    ones like ``"1,204"``). ``None``, NaN, infinities and unparseable
    strings map to *default*.
    """
    if value is None:
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        s = str(value).replace(",", "").strip().strip('"')
        if s == "":
            return default
        try:
            number = float(s)
        except ValueError:
            return default
    return number if math.isfinite(number) else default


@dataclass(frozen=True)
class CategoryDefinition:
    """A single scoring category and its comparison direction."""

    key: str
    label: str
    lower_is_better: bool = False


@dataclass
class TeamStatLine:
    """One team's aggregate statistics for a period or season."""

    team_id: Optional[TeamId]
    team_name: str
    stats: Dict[str, object] = field(default_factory=dict)

    def get_stat(self, key: str) -> float:
        """Numeric value for *key*; missing or malformed values read as 0."""
        return to_number(self.stats.get(key))

    def has_team_identity(self) -> bool:
        if self.team_id is None:
            return False
        if isinstance(self.team_id, str) and self.team_id.strip() == "":
            return False
        return True

    @classmethod
    def from_record(cls, record: Dict) -> "TeamStatLine":
        """Build a stat line from a persistence-layer mapping.

        Supports the nested shape ``{"team": {"id": 1, "name": "A"}, "R": 10}``
        and flat shapes keyed by ``teamId``/``team_id``/``teamCode``/
        ``team_code`` with ``teamName``/``team_name``.
        """
        team = record.get("team")
        if isinstance(team, dict):
            team_id = team.get("id")
            team_name = team.get("name")
        else:
            team_id = None
            for key in ("teamId", "team_id", "teamCode", "team_code"):
                if record.get(key) is not None:
                    team_id = record[key]
                    break
            team_name = record.get("teamName") or record.get("team_name")

        if team_name is None:
            team_name = str(team_id) if team_id is not None else ""

        stats = {
            k: v for k, v in record.items()
            if k not in ("team", "teamId", "team_id", "teamCode", "team_code",
                         "teamName", "team_name")
        }
        return cls(team_id=team_id, team_name=str(team_name), stats=stats)


@dataclass
class CategoryRankRow:
    """Result of ranking one category for one team."""

    team_id: TeamId
    team_name: str
    value: float
    rank: int  # 1 = best
    points: float

    def to_dict(self) -> Dict:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "value": self.value,
            "rank": self.rank,
            "points": self.points,
        }


@dataclass
class StandingsRow:
    """One team's line in the standings table.

    ``delta`` is the movement against a previous standings table: positive
    when the team climbed, 0 when unchanged or not compared.
    """

    team_id: TeamId
    team_name: str
    points: float
    rank: int = 0
    categories: Optional[Dict[str, float]] = None
    delta: int = 0

    def to_dict(self) -> Dict:
        """Serialize to the JSON shape returned by the API layer."""
        out = {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "points": self.points,
            "rank": self.rank,
            "delta": self.delta,
        }
        if self.categories is not None:
            out["categories"] = dict(self.categories)
        return out
