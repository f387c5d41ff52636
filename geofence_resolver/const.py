VERSION = "0.3.0"

# Coordinate ranges (decimal degrees)
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

# Center used when one axis is edited before any location exists
DEFAULT_LATITUDE = 37.7749      # San Francisco
DEFAULT_LONGITUDE = -122.4194

# Radius bounds (meters)
DEFAULT_MIN_RADIUS = 100.0
DEFAULT_MAX_RADIUS = 5000.0
DEFAULT_RADIUS = 500.0

# Address input
DEBOUNCE_DELAY = 0.4          # seconds of keyboard silence before a lookup fires
GEOCODE_TIMEOUT = 15          # seconds, a timeout counts as a network failure

# Nominatim (OpenStreetMap) search endpoint used by the default geocoder
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
NOMINATIM_MIN_INTERVAL = 1.0  # usage policy: at most one request per second
DEFAULT_USER_AGENT = f"event-geofence/{VERSION} (+https://nominatim.org/release-docs/latest/api/Search/)"
DEFAULT_ACCEPT_LANGUAGE = "en"

# User-facing messages
MSG_LATITUDE_CLAMPED = "Latitude clamped to valid range (-90 to 90)"
MSG_LONGITUDE_CLAMPED = "Longitude clamped to valid range (-180 to 180)"
MSG_RADIUS_CLAMPED = "Radius clamped to valid range ({min:g} to {max:g} m)"
MSG_NOT_FOUND = "No results found for provided address"
MSG_NETWORK_FAILURE = "Geocoding failed (network error)"
MSG_SERVICE_ERROR = "Geocoding failed (unexpected response)"
MSG_TILE_ERROR = "Map tiles failed to load"

STATUS_TEXT_PENDING = "Geocoding…"
STATUS_TEXT_READY = "Ready"
