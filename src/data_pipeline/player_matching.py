"""Reconcile archive player names against a known-player table.

Archive exports spell names loosely ("Acuna R", "R. Acuna", "Ronald Acuna
Jr."). Matching runs in three passes, stopping at the first hit:

1. Exact raw name.
2. Normalized, suffix-stripped full name.
3. Fuzzy: (last name, first initial, pitcher flag), accepted only when a
   single known player fits.

The lookup tables belong to one ``PlayerMatcher`` instance; build a new
matcher per import run.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from src.data_pipeline.cleaning import DataCleaner

logger = logging.getLogger(__name__)

EXACT = "exact"
NORMALIZED = "normalized"
FUZZY = "fuzzy"
UNMATCHED = "unmatched"


@dataclass
class MatchResult:
    """Outcome of matching one raw name."""

    player: Optional[Dict]
    method: str
    note: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.player is not None


def _name_key(name) -> Optional[str]:
    norm = DataCleaner.normalize_player_name(name)
    if norm is None:
        return None
    return DataCleaner.strip_name_suffix(norm).lower()


def split_name(raw_name: str) -> Tuple[str, str]:
    """Return ``(last_name, first_initial)`` from a loosely formatted name.

    Handles "Last F", "F Last" and "First Last" shapes. Returns empty
    strings when the name has fewer than two parts.
    """
    clean = (DataCleaner.normalize_player_name(raw_name) or "").lower()
    clean = clean.replace(".", "").replace(",", "")
    clean = DataCleaner.strip_name_suffix(clean) or ""
    parts = clean.split()
    if len(parts) < 2:
        return "", ""
    if len(parts[1]) == 1:
        return parts[0], parts[1]
    if len(parts[0]) == 1:
        return parts[-1], parts[0]
    return parts[-1], parts[0][0]


class PlayerMatcher:
    """Match raw archive names to known players.

    Args:
        known_players: Player dicts with at least ``player_name``; optional
            ``full_name``, ``mlb_id``, ``is_pitcher``. Earlier entries win
            when two share a name.
    """

    def __init__(self, known_players: Sequence[Dict]):
        self._exact: Dict[str, Dict] = {}
        self._normalized: Dict[str, Dict] = {}
        self._fuzzy: Dict[Tuple[str, str, bool], List[Dict]] = {}

        for player in known_players:
            raw = player.get("player_name")
            full = player.get("full_name") or raw
            if raw and raw not in self._exact:
                self._exact[raw] = player

            for name in (raw, full):
                key = _name_key(name)
                if key and key not in self._normalized:
                    self._normalized[key] = player

            last, initial = split_name(full or "")
            if last and initial:
                fuzzy_key = (last, initial, bool(player.get("is_pitcher", False)))
                bucket = self._fuzzy.setdefault(fuzzy_key, [])
                if not any(p is player for p in bucket):
                    bucket.append(player)

        logger.debug(
            "Player matcher built: %d exact, %d normalized, %d fuzzy keys",
            len(self._exact), len(self._normalized), len(self._fuzzy),
        )

    def match(self, raw_name: str, is_pitcher: bool = False) -> MatchResult:
        """Match one raw name."""
        if raw_name in self._exact:
            return MatchResult(self._exact[raw_name], EXACT)

        key = _name_key(raw_name)
        if key and key in self._normalized:
            return MatchResult(self._normalized[key], NORMALIZED)

        last, initial = split_name(raw_name)
        if last and initial:
            candidates = self._fuzzy.get((last, initial, bool(is_pitcher)), [])
            if len(candidates) == 1:
                found = candidates[0]
                return MatchResult(
                    found, FUZZY,
                    f'Fuzzy matched "{raw_name}" to "{found.get("full_name") or found.get("player_name")}"',
                )
            if len(candidates) > 1:
                names = [c.get("full_name") or c.get("player_name") for c in candidates]
                return MatchResult(
                    None, UNMATCHED, f'AMBIGUOUS "{raw_name}": {names}'
                )

        return MatchResult(None, UNMATCHED)

    def match_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        """Match every row of a cleaned period DataFrame.

        Adds columns:
            Matched_Name - known player's full name (raw name if unmatched)
            Mlb_Id       - known player's id, or the row's own id
            Match_Method - exact / normalized / fuzzy / unmatched
        """
        out = df.copy()
        matched_names, mlb_ids, methods = [], [], []

        for raw, pitcher, own_id in zip(out["player_name"], out["Is_Pitcher"], out["mlb_id"]):
            result = self.match(raw, pitcher)
            if result.note:
                logger.info("[Match] %s", result.note)
            player = result.player or {}
            matched_names.append(player.get("full_name") or player.get("player_name") or raw)
            mlb_ids.append(player.get("mlb_id") or own_id or None)
            methods.append(result.method)

        out["Matched_Name"] = matched_names
        out["Mlb_Id"] = mlb_ids
        out["Match_Method"] = methods

        counts = out["Match_Method"].value_counts().to_dict()
        logger.info(
            "Matched %d/%d players (%s)",
            len(out) - counts.get(UNMATCHED, 0), len(out),
            ", ".join(f"{k}={v}" for k, v in sorted(counts.items())),
        )
        return out
