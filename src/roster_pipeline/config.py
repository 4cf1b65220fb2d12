from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
ROSTER_DIR = DATA_DIR / "roster"

DEFAULT_ROSTER_FILE = "roster.csv"

# Roster CSV contract
ROSTER_COLUMNS = ["IRLA", "Name", "DOB", "Rank", "order_index", "Frozen"]
REQUIRED_ROSTER_COLUMNS = {"IRLA", "Name", "DOB", "Rank"}

# Rank ladder CSV contract (rows ordered highest rank first)
LADDER_COLUMNS = ["Rank", "Slots"]

# Spellings accepted as "frozen" in the Frozen column
FROZEN_TRUE_VALUES = {"1", "true", "t", "yes", "y", "x", "frozen"}
