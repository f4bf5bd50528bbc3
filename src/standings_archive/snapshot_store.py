"""Snapshot store - save and load computed standings to/from JSON files."""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from src.scoring_engine.models import StandingsRow
from src.standings_archive.config import (
    PERIOD_SNAPSHOT_FILE,
    SEASON_SNAPSHOT_FILE,
    SNAPSHOTS_DIR,
)

logger = logging.getLogger(__name__)

_PERIOD_FILE_RE = re.compile(r"^period_(\d+)\.json$")


class SnapshotStore:
    """Handles saving and loading standings snapshots.

    Snapshots live at ``<storage_dir>/<year>/period_<n>.json`` and
    ``<storage_dir>/<year>/season.json``. A ``period_id`` of None always
    means the season snapshot.
    """

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = Path(storage_dir) if storage_dir else SNAPSHOTS_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _snapshot_path(self, year: int, period_id: Optional[int]) -> Path:
        if period_id is None:
            filename = SEASON_SNAPSHOT_FILE
        else:
            filename = PERIOD_SNAPSHOT_FILE.format(period=int(period_id))
        return self.storage_dir / str(year) / filename

    def save_snapshot(
        self,
        year: int,
        period_id: Optional[int],
        rows: Sequence[StandingsRow],
    ) -> Path:
        """Write a standings snapshot, replacing any previous one.

        Returns:
            Path to the saved file.
        """
        filepath = self._snapshot_path(year, period_id)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        snapshot = {
            "year": year,
            "periodId": period_id,
            "savedAt": datetime.now(timezone.utc).isoformat(),
            "rows": [row.to_dict() for row in rows],
        }
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=2)

        logger.info(
            "Saved %s standings for %d (%d teams) to %s",
            "season" if period_id is None else f"period {period_id}",
            year, len(rows), filepath,
        )
        return filepath

    def load_snapshot(self, year: int, period_id: Optional[int]) -> Optional[List[StandingsRow]]:
        """Load a snapshot's rows.

        Returns:
            List of StandingsRow if found and readable, None otherwise.
        """
        filepath = self._snapshot_path(year, period_id)
        if not filepath.exists():
            logger.warning("Snapshot file not found: %s", filepath)
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            return [self._dict_to_row(r) for r in data["rows"]]
        except (ValueError, OSError, KeyError, TypeError) as e:
            logger.warning("Corrupt snapshot file %s: %s", filepath, e)
            return None

    def list_snapshots(self, year: int) -> List[Dict]:
        """List saved snapshots for a season.

        Returns:
            Dicts with ``period_id`` (None for season), ``saved_at`` and
            ``team_count``, periods ascending with the season last.
        """
        season_dir = self.storage_dir / str(year)
        if not season_dir.is_dir():
            return []

        snapshots = []
        for filepath in season_dir.glob("*.json"):
            m = _PERIOD_FILE_RE.match(filepath.name)
            if m:
                period_id = int(m.group(1))
            elif filepath.name == SEASON_SNAPSHOT_FILE:
                period_id = None
            else:
                continue

            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (ValueError, OSError) as e:
                logger.warning("Skipping corrupt snapshot file %s: %s", filepath, e)
                continue

            if not isinstance(data, dict) or not isinstance(data.get("rows", []), list):
                logger.warning("Skipping malformed snapshot file %s", filepath)
                continue
            snapshots.append({
                "period_id": period_id,
                "saved_at": data.get("savedAt"),
                "team_count": len(data.get("rows", [])),
            })

        return sorted(
            snapshots,
            key=lambda s: (s["period_id"] is None, s["period_id"] or 0),
        )

    def delete_snapshot(self, year: int, period_id: Optional[int]) -> bool:
        """Delete a snapshot. Returns True if deleted, False if not found."""
        filepath = self._snapshot_path(year, period_id)
        if not filepath.exists():
            return False
        filepath.unlink()
        logger.info("Deleted snapshot %s", filepath)
        return True

    @staticmethod
    def load_period_snapshots(path: Path) -> List[Dict]:
        """Read a multi-period standings export.

        Accepts a bare list of snapshots, ``{"snapshots": [...]}`` or
        ``{"periods": [...]}``. Anything else yields an empty list.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in ("snapshots", "periods"):
                if isinstance(data.get(key), list):
                    return data[key]

        logger.warning("%s did not look like a snapshot array; returning []", path)
        return []

    @staticmethod
    def find_period_snapshot(snapshots: Sequence[Dict], period_id: int) -> Optional[Dict]:
        """Return the snapshot whose ``periodId`` equals *period_id*, if any."""
        for snap in snapshots:
            try:
                if int(snap.get("periodId")) == int(period_id):
                    return snap
            except (TypeError, ValueError):
                continue
        return None

    @staticmethod
    def _dict_to_row(data: Dict) -> StandingsRow:
        return StandingsRow(
            team_id=data["teamId"],
            team_name=data["teamName"],
            points=data["points"],
            rank=data.get("rank", 0),
            categories=data.get("categories"),
            delta=data.get("delta", 0),
        )
