"""Constants for the Trassenfinder infrastructure API."""

STATIONS_PATH = "betriebsstellen"
SEGMENTS_PATH = "streckensegmente"

DEFAULT_TIMEOUT_SECONDS = 10.0

REQUEST_HEADERS = {
    "accept": "application/json",
    "user-agent": "infra-explorer",
}

# Characters of an error response body kept in log messages
ERROR_BODY_LOG_LIMIT = 500
