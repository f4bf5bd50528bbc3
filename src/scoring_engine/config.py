from src.scoring_engine.models import CategoryDefinition

# League scoring categories, in display order
CATEGORY_CONFIG = (
    CategoryDefinition("R", "Runs"),
    CategoryDefinition("HR", "Home Runs"),
    CategoryDefinition("RBI", "RBI"),
    CategoryDefinition("SB", "Stolen Bases"),
    CategoryDefinition("AVG", "Average"),
    CategoryDefinition("W", "Wins"),
    CategoryDefinition("S", "Saves"),
    CategoryDefinition("ERA", "ERA", lower_is_better=True),
    CategoryDefinition("WHIP", "WHIP", lower_is_better=True),
    CategoryDefinition("K", "Strikeouts"),
)

CATEGORIES_BY_KEY = {c.key: c for c in CATEGORY_CONFIG}

HITTING_CATEGORIES = ("R", "HR", "RBI", "SB", "AVG")
PITCHING_CATEGORIES = ("W", "S", "ERA", "WHIP", "K")

# Tie handling when two teams post the same category value
DEFAULT_TIE_POLICY = "sequential"


def get_category(key: str) -> CategoryDefinition:
    """Look up a configured category by key."""
    try:
        return CATEGORIES_BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown scoring category: {key!r}") from None
