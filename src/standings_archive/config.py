from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Saved standings snapshots, one subdirectory per season
SNAPSHOTS_DIR = PROJECT_ROOT / "data" / "standings"

# Snapshot file names inside a season directory
PERIOD_SNAPSHOT_FILE = "period_{period}.json"
SEASON_SNAPSHOT_FILE = "season.json"
