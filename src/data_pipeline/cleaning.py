"""Data cleaning for league archive period exports.

Handles standardization across seasons of exports:
- Identify fantasy team codes from inconsistently spelled team names
- Normalize player names for cross-file matching
- Flag pitchers from explicit flags, positions, or pitching stats
"""

import logging
import re
from typing import Dict, Optional

import pandas as pd

from src.data_pipeline.config import (
    MIN_PARTIAL_ALIAS_LENGTH,
    PITCHER_FLAGS,
    PITCHER_POSITIONS,
    TEAM_ALIASES,
)

logger = logging.getLogger(__name__)

# Generational suffixes dropped by strip_name_suffix
_SUFFIX_PATTERN = re.compile(r"\s+(jr\.?|sr\.?|ii|iii|iv|v)$", re.IGNORECASE)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


class DataCleaner:
    """Cleans and standardizes archive stat rows for matching and aggregation."""

    # ------------------------------------------------------------------
    # Player name normalization
    # ------------------------------------------------------------------
    @staticmethod
    def normalize_player_name(name: str) -> Optional[str]:
        """Normalize a player name for consistent cross-file matching.

        - Strips quotes and extra whitespace
        - Preserves suffixes (Jr., III, etc.)
        - Standardizes apostrophes and hyphens
        """
        if name is None or pd.isna(name):
            return None

        name = str(name).strip().strip('"')
        if name == "":
            return None

        # Apostrophe and dash variants to ASCII
        for variant in ("’", "‘", "ʼ"):
            name = name.replace(variant, "'")
        for variant in ("–", "—"):
            name = name.replace(variant, "-")

        return " ".join(name.split())

    @staticmethod
    def strip_name_suffix(name: str) -> Optional[str]:
        """Remove a trailing generational suffix.

        Examples:
            "Ronald Acuna Jr." -> "Ronald Acuna"
            "Cal Ripken III"   -> "Cal Ripken"
        """
        if name is None:
            return None
        return _SUFFIX_PATTERN.sub("", str(name).strip()).rstrip(",").strip()

    # ------------------------------------------------------------------
    # Team identification
    # ------------------------------------------------------------------
    @staticmethod
    def normalize_team_code(code) -> Optional[str]:
        """Trim and uppercase a team code; None for missing / blank values."""
        if code is None or pd.isna(code):
            return None
        code = str(code).strip().strip('"').upper()
        return code or None

    @staticmethod
    def identify_team(value, aliases: Optional[Dict[str, str]] = None) -> Optional[str]:
        """Resolve a fantasy team name or code to its team code.

        Lookup order:
        1. Exact alias match on the lowercased alphanumeric form.
        2. The value is already a known team code.
        3. Longest alias contained in the value (or containing it),
           ignoring aliases shorter than ``MIN_PARTIAL_ALIAS_LENGTH``.

        Returns None when nothing matches.
        """
        if aliases is None:
            aliases = TEAM_ALIASES
        if value is None or pd.isna(value):
            return None

        raw = str(value).strip()
        key = _NON_ALNUM.sub("", raw.lower())
        if not key:
            return None

        if key in aliases:
            return aliases[key]

        known_codes = set(aliases.values())
        if raw.upper() in known_codes:
            return raw.upper()

        for alias in sorted(aliases, key=len, reverse=True):
            if len(alias) < MIN_PARTIAL_ALIAS_LENGTH:
                continue
            if alias in key or key in alias:
                logger.debug("Partial team match %r -> %r (%s)", raw, alias, aliases[alias])
                return aliases[alias]

        return None

    # ------------------------------------------------------------------
    # Pitcher detection
    # ------------------------------------------------------------------
    @staticmethod
    def is_pitcher(
        flag=None,
        position=None,
        wins: float = 0.0,
        saves: float = 0.0,
        innings: float = 0.0,
    ) -> bool:
        """Decide whether a stat row belongs to a pitcher.

        True if the explicit flag is truthy, the position is a pitching
        position, or the row has any wins, saves, or innings pitched.
        """
        if flag is not None and str(flag).strip().lower() in PITCHER_FLAGS:
            return True
        if position is not None and str(position).strip().upper() in PITCHER_POSITIONS:
            return True
        return (wins or 0) + (saves or 0) + (innings or 0) > 0

    # ------------------------------------------------------------------
    # DataFrame-level cleaning
    # ------------------------------------------------------------------
    def clean_period(
        self,
        df: pd.DataFrame,
        aliases: Optional[Dict[str, str]] = None,
    ) -> pd.DataFrame:
        """Clean one period DataFrame from PeriodStatsIngester.

        Adds columns:
            Player_Norm - normalized player name for matching
            Team_Code   - identified fantasy team code
            Is_Pitcher  - pitcher flag

        Rows whose team cannot be identified are dropped.
        """
        out = df.copy()
        out["Player_Norm"] = out["player_name"].apply(self.normalize_player_name)
        out["Team_Code"] = out["team_code"].apply(lambda v: self.identify_team(v, aliases))
        out["Is_Pitcher"] = [
            self.is_pitcher(flag, pos, w, sv, ip)
            for flag, pos, w, sv, ip in zip(
                out["is_pitcher"], out["position"], out["W"], out["SV"], out["IP"]
            )
        ]

        unknown = out["Team_Code"].isna()
        if unknown.any():
            logger.warning(
                "Dropping %d rows with unidentified teams: %s",
                unknown.sum(),
                sorted(set(out.loc[unknown, "team_code"])),
            )
            out = out[~unknown].reset_index(drop=True)

        logger.info("Cleaned period data: %d rows", len(out))
        return out

    def clean_all(
        self,
        data: Dict[int, pd.DataFrame],
        aliases: Optional[Dict[str, str]] = None,
    ) -> Dict[int, pd.DataFrame]:
        """Clean every period returned by PeriodStatsIngester.read_all()."""
        return {period: self.clean_period(df, aliases) for period, df in data.items()}
