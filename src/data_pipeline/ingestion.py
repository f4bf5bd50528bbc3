"""CSV ingestion for league archive period exports.

Handles the quirks of the per-period player stat exports:
- UTF-8 byte order marks on the first header
- Inconsistent header spellings across seasons ("player", "Player Name", ...)
- Comma-formatted and blank numbers
- Rows with no player or no fantasy team
"""

import logging
import re
from pathlib import Path

import pandas as pd

from src.data_pipeline.config import (
    COLUMN_ALIASES,
    NUMERIC_COLUMNS,
    PERIOD_FILE_PATTERN,
    STRING_COLUMNS,
)

logger = logging.getLogger(__name__)

_PERIOD_FILE_RE = re.compile(r"^period_(\d+)\.csv$", re.IGNORECASE)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


def _parse_numeric(value):
    """Parse a numeric string that may contain commas (e.g., '1,204' -> 1204.0)."""
    if pd.isna(value):
        return float("nan")
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace(",", "").strip().strip('"')
    if s == "":
        return float("nan")
    try:
        return float(s)
    except ValueError:
        return float("nan")


class PeriodStatsIngester:
    """Reads per-player period stat CSVs exported from the league archive.

    Each read method returns a pandas DataFrame with:
    - Canonical column names (see ``COLUMN_ALIASES``)
    - Numeric stat columns parsed as floats, missing values as 0
    - Rows without a player name or team removed
    """

    def __init__(self, data_dir: Path, year: int):
        self.data_dir = Path(data_dir)
        self.year = year

    def _resolve_path(self, period: int) -> Path:
        """Build the file path for a period, raising if missing."""
        filepath = self.data_dir / PERIOD_FILE_PATTERN.format(period=period)
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    def list_periods(self) -> list[int]:
        """Period numbers with an export file in ``data_dir``, ascending."""
        periods = []
        for path in self.data_dir.glob("*.csv"):
            m = _PERIOD_FILE_RE.match(path.name)
            if m:
                periods.append(int(m.group(1)))
        return sorted(periods)

    def read_period(self, period: int) -> pd.DataFrame:
        """Read one period export.

        Returns DataFrame with columns:
            period, player_name, team_code, position, is_pitcher, mlb_id,
            AB, H, R, HR, RBI, SB, AVG, W, SV, K, IP, ER, WHIP
        """
        filepath = self._resolve_path(period)
        logger.info("Reading period %d: %s", period, filepath.name)

        df = pd.read_csv(
            filepath,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
        df = self._canonicalize_columns(df)
        df = self._clean_rows(df)
        df.insert(0, "period", period)

        logger.info("Loaded %d player rows for period %d", len(df), period)
        return df

    def read_all(self) -> dict[int, pd.DataFrame]:
        """Read every period export in ``data_dir``.

        Returns:
            dict mapping period number to its DataFrame.

        Raises:
            IngestionError: if no period files exist or any file cannot be read.
        """
        periods = self.list_periods()
        if not periods:
            raise IngestionError(f"No period files found in {self.data_dir}")
        try:
            return {p: self.read_period(p) for p in periods}
        except Exception as e:
            raise IngestionError(f"Failed to read period CSV files: {e}") from e

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _canonicalize_columns(df: pd.DataFrame) -> pd.DataFrame:
        """Rename export headers to canonical names, adding missing ones."""
        df = df.rename(columns=lambda c: str(c).strip().lower())

        out = pd.DataFrame(index=df.index)
        for canonical, aliases in COLUMN_ALIASES.items():
            source = next((a for a in aliases if a in df.columns), None)
            if source is not None:
                out[canonical] = df[source]
            elif canonical in STRING_COLUMNS:
                out[canonical] = ""
            else:
                out[canonical] = float("nan")
        return out

    @staticmethod
    def _clean_rows(df: pd.DataFrame) -> pd.DataFrame:
        for col in STRING_COLUMNS:
            df[col] = df[col].fillna("").astype(str).str.strip().str.strip('"').str.strip()

        missing = (df["player_name"] == "") | (df["team_code"] == "")
        if missing.any():
            logger.debug("Dropping %d rows without player or team", missing.sum())
        df = df[~missing].reset_index(drop=True)

        for col in NUMERIC_COLUMNS:
            df[col] = df[col].apply(_parse_numeric).fillna(0.0).astype(float)

        return df
