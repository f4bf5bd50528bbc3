"""Run the complete standings pipeline for one season.

Usage:
    python -m src.data_pipeline.run_update [year] [data_dir]

Examples:
    python -m src.data_pipeline.run_update 2025
    python -m src.data_pipeline.run_update 2025 /path/to/archive/2025
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from src.data_pipeline.cleaning import DataCleaner
from src.data_pipeline.config import PROCESSED_DATA_DIR, RAW_DATA_DIR
from src.data_pipeline.ingestion import PeriodStatsIngester
from src.data_pipeline.player_matching import PlayerMatcher
from src.data_pipeline.team_aggregation import TeamAggregator
from src.logging_config import setup_logging
from src.scoring_engine.category_ranker import TiePolicy
from src.scoring_engine.config import CATEGORY_CONFIG, DEFAULT_TIE_POLICY
from src.scoring_engine.models import StandingsRow
from src.scoring_engine.standings_calculator import apply_rank_deltas, compute_standings
from src.standings_archive.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


def _standings_block(
    team_df: pd.DataFrame,
    team_names: Dict[str, str],
    tie_policy: TiePolicy,
    previous: Optional[List[StandingsRow]] = None,
) -> Tuple[List[StandingsRow], List[Dict]]:
    """Compute standings for one aggregated team table.

    Rank movement is measured against *previous* when given.

    Returns:
        The standings rows and their JSON form with raw team stats attached.
    """
    lines = TeamAggregator.to_stat_lines(team_df, team_names)
    standings = compute_standings(
        lines, CATEGORY_CONFIG, tie_policy=tie_policy, include_breakdown=True
    )
    apply_rank_deltas(standings, previous)
    stats_by_team = {line.team_id: line.stats for line in lines}
    serialized = [
        {**row.to_dict(), "stats": stats_by_team[row.team_id]}
        for row in standings
    ]
    return standings, serialized


def run_pipeline(
    year: int = 2025,
    data_dir: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    team_names: Optional[Dict[str, str]] = None,
    known_players: Optional[Sequence[Dict]] = None,
    tie_policy: Union[str, TiePolicy] = DEFAULT_TIE_POLICY,
    snapshot_store: Optional[SnapshotStore] = None,
) -> Path:
    """Run the complete standings pipeline.

    Args:
        year: Season year.
        data_dir: Directory containing ``period_<n>.csv`` exports.
            Defaults to ``data/raw/{year}``.
        output_dir: Directory for JSON output.
            Defaults to ``data/processed/``.
        team_names: Team code -> display name map.
        known_players: Player table used to reconcile archive names.
        tie_policy: Category tie handling.
        snapshot_store: If given, each period and the season standings are
            also saved as snapshots.

    Returns:
        Path to the generated JSON file.

    Raises:
        FileNotFoundError: If the data directory doesn't exist.
    """
    if data_dir is None:
        data_dir = RAW_DATA_DIR / str(year)
    if output_dir is None:
        output_dir = PROCESSED_DATA_DIR
    data_dir = Path(data_dir)
    output_dir = Path(output_dir)
    team_names = team_names or {}
    policy = TiePolicy.parse(tie_policy)

    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    logger.info("Starting standings pipeline for %d season (data: %s)", year, data_dir)

    # 1. Ingest
    logger.info("Step 1/5: Ingesting period CSV files...")
    raw = PeriodStatsIngester(data_dir, year).read_all()
    logger.info("Loaded %d periods: %s", len(raw), sorted(raw))

    # 2. Clean
    logger.info("Step 2/5: Cleaning data...")
    cleaned = DataCleaner().clean_all(raw)

    # 3. Match players
    logger.info("Step 3/5: Matching player names...")
    matcher = PlayerMatcher(known_players or [])
    matched = {period: matcher.match_frame(df) for period, df in cleaned.items()}

    # 4. Aggregate by team
    logger.info("Step 4/5: Aggregating team stats...")
    aggregator = TeamAggregator()
    period_teams = {period: aggregator.aggregate(df) for period, df in matched.items()}
    season_teams = aggregator.aggregate(pd.concat(matched.values(), ignore_index=True))

    # 5. Standings + output
    logger.info("Step 5/5: Computing standings...")
    periods: List[Dict] = []
    previous_rows: Optional[List[StandingsRow]] = None
    for period in sorted(period_teams):
        rows, serialized = _standings_block(
            period_teams[period], team_names, policy, previous_rows
        )
        previous_rows = rows
        if snapshot_store is not None:
            snapshot_store.save_snapshot(year, period, rows)
        periods.append({"periodId": period, "standings": serialized})

    previous_season = None
    if snapshot_store is not None and any(
        s["period_id"] is None for s in snapshot_store.list_snapshots(year)
    ):
        previous_season = snapshot_store.load_snapshot(year, None)
    season_rows, season = _standings_block(season_teams, team_names, policy, previous_season)
    if snapshot_store is not None:
        snapshot_store.save_snapshot(year, None, season_rows)

    match_counts: Dict[str, int] = {}
    for df in matched.values():
        for method, count in df["Match_Method"].value_counts().items():
            match_counts[method] = match_counts.get(method, 0) + int(count)

    output_data = {
        "metadata": {
            "version": "1.0",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "season": year,
            "tie_policy": policy.value,
            "categories": [
                {"key": c.key, "label": c.label, "lowerIsBetter": c.lower_is_better}
                for c in CATEGORY_CONFIG
            ],
            "total_periods": len(periods),
            "total_teams": len(season),
            "player_matches": match_counts,
        },
        "periods": periods,
        "season": season,
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"standings_{year}.json"

    with open(output_file, "w") as f:
        json.dump(output_data, f, indent=2)

    # Update latest symlink
    latest_link = output_dir / "standings_latest.json"
    if latest_link.exists() or latest_link.is_symlink():
        latest_link.unlink()
    latest_link.symlink_to(output_file.name)

    logger.info("Pipeline complete! Output: %s", output_file)
    if season:
        leader = season[0]
        logger.info(
            "  Season leader: %s (%s pts) of %d teams",
            leader["teamName"], leader["points"], len(season),
        )

    return output_file


if __name__ == "__main__":
    setup_logging()

    year = int(sys.argv[1]) if len(sys.argv) > 1 else 2025
    data_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else None

    try:
        output = run_pipeline(year, data_dir)
        print(f"Pipeline complete: {output}")
    except Exception:
        logger.exception("Pipeline failed")
        sys.exit(1)
