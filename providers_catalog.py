# providers_catalog.py
# A single source of truth for the data providers a widget can use.

PROVIDER_IDS = ["football_data", "espn_schedule", "openfootball"]

PROVIDER_LABELS = {
    "football_data": "football-data.org",
    "espn_schedule": "ESPN",
    "openfootball": "openfootball",
}
