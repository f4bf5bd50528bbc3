from src.scoring_engine.category_ranker import TiePolicy, rank, rank_category
from src.scoring_engine.config import CATEGORY_CONFIG, get_category
from src.scoring_engine.models import (
    CategoryDefinition,
    CategoryRankRow,
    StandingsRow,
    TeamStatLine,
)
from src.scoring_engine.standings_calculator import (
    apply_rank_deltas,
    build_team_name_map,
    compute_category_standings,
    compute_standings,
)

__all__ = [
    "CATEGORY_CONFIG",
    "CategoryDefinition",
    "CategoryRankRow",
    "StandingsRow",
    "TeamStatLine",
    "TiePolicy",
    "apply_rank_deltas",
    "build_team_name_map",
    "compute_category_standings",
    "compute_standings",
    "get_category",
    "rank",
    "rank_category",
]
