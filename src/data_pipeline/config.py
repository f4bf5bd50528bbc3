from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
PROCESSED_DATA_DIR = DATA_DIR / "processed"

# Archive export file name pattern (use .format(period=N))
PERIOD_FILE_PATTERN = "period_{period}.csv"

# Lower-cased export headers -> canonical column name.
# The first alias found in a file wins.
COLUMN_ALIASES = {
    "player_name": ["player_name", "player", "name", "player name"],
    "team_code": ["team_code", "team", "user", "fantasy team"],
    "position": ["position", "pos"],
    "is_pitcher": ["is_pitcher"],
    "mlb_id": ["mlb_id", "mlbid"],
    "AB": ["ab"],
    "H": ["h"],
    "R": ["r"],
    "HR": ["hr"],
    "RBI": ["rbi"],
    "SB": ["sb"],
    "AVG": ["avg", "ba"],
    "W": ["w", "wins"],
    "SV": ["sv", "saves"],
    "K": ["k", "so", "strikeouts"],
    "IP": ["ip"],
    "ER": ["er"],
    "WHIP": ["whip"],
}

STRING_COLUMNS = ("player_name", "team_code", "position", "is_pitcher", "mlb_id")

NUMERIC_COLUMNS = (
    "AB", "H", "R", "HR", "RBI", "SB", "AVG",
    "W", "SV", "K", "IP", "ER", "WHIP",
)

# Roster positions that mark a pitcher
PITCHER_POSITIONS = {"P", "SP", "RP", "PITCHER", "STAFF"}

# Truthy spellings of the is_pitcher flag column
PITCHER_FLAGS = {"true", "1", "p", "yes"}

# Normalized fantasy team name (lowercase alphanumerics) -> team code.
# Exports spell team names inconsistently across seasons.
TEAM_ALIASES = {
    "dodgerdawgs": "DDG", "dodger": "DDG",
    "devildawgs": "DEV", "devil": "DEV", "dawgs": "DEV",
    "diamondkings": "DKG", "diamond": "DKG", "kings": "DKG", "dkkings": "DKG",
    "demolitionlumber": "DMK", "demolition": "DMK", "lumber": "DMK",
    "skunkdogs": "SKD", "skunk": "SKD",
    "ragingsluggers": "RGS", "rgingsluggers": "RGS", "raging": "RGS", "sluggers": "RGS",
    "losdoyers": "LDY", "doyers": "LDY",
    "theshow": "SHO", "show": "SHO",
    "foultip": "FTP", "foul": "FTP",
    "bigunit": "BGU", "unit": "BGU",
    "theblacksox": "BSX", "blacksox": "BSX",
    "thefluffers": "FLU", "fluffers": "FLU",
    "bohica": "BOH",
    "moneyball": "MNB",
    "balcos": "BCS", "thebalcos": "BCS", "sockexchange": "BCS",
    "brothers": "BRO", "brothersinc": "BRO", "thecrush": "BRO",
}

# Partial alias matches shorter than this are ignored
MIN_PARTIAL_ALIAS_LENGTH = 4
