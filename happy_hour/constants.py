"""Filter options, defaults and the fixed strings shown to users."""

from __future__ import annotations

CUISINE_OPTIONS = [
    "American",
    "Mexican",
    "Italian",
    "Japanese",
    "Chinese",
    "Indian",
    "Thai",
    "French",
    "Spanish",
    "Greek",
]
PRICE_OPTIONS = ["$", "$$", "$$$", "$$$$"]
DAY_OPTIONS = ["Today", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
SPECIAL_TYPE_OPTIONS = ["drinks", "food", "late night"]

DEFAULT_DAY = "Today"
DEFAULT_QUERY = "New York, NY"
INITIAL_SEARCH_LABEL = "your current location"

EARTH_RADIUS_MILES = 3958.8

# Placeholders substituted for missing or unusable fields
UNNAMED_PLACE = "Unnamed Place"
NOT_AVAILABLE = "N/A"
NO_DETAILS = "No deal details provided."

# ----------------------------
# User-facing messages
# ----------------------------
NO_RESULTS_MESSAGE = "No happy hour specials found. Try a different search."
EXTRACTION_ERROR_MESSAGE = "The AI service returned data we couldn't read. Please try again."
TRANSPORT_ERROR_MESSAGE = "Failed to fetch happy hour data. Please try again."
CONFIGURATION_ERROR_MESSAGE = "The AI service is not configured. Set GEMINI_API_KEY and restart."
LOCATION_ERROR_TEMPLATE = "Could not get location: {message}. Searching default location."
