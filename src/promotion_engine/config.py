# Rank hierarchy from highest to lowest
DEFAULT_RANK_ORDER = ["ADG", "IG", "DIG", "Commandant", "2IC", "DC", "AC"]

# Sanctioned strength of each rank
DEFAULT_RANK_SLOTS = {
    "ADG": 1,
    "IG": 27,
    "DIG": 202,
    "Commandant": 398,
    "2IC": 586,
    "DC": 935,
    "AC": 2300,
}

# Members retire on the last day of the month they reach this age
DEFAULT_RETIREMENT_AGE = 60

# Boundary date representation (day-month-year)
DATE_FORMAT = "%d-%m-%Y"

# Timeline rendering
NO_PROMOTIONS_MESSAGE = "No promotions recorded."
UNKNOWN_CAUSE_NAME = "Unknown"

# Member search
MIN_SEARCH_LENGTH = 2
