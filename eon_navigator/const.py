"""Constants for the E.ON Energy Navigator API."""

TOKEN_URL = "https://navigator-api.eon.se/connect/token"
BASE_URL = "https://navigator-api.eon.se/api"

OAUTH_SCOPE = "navigator"

ENV_CLIENT_ID = "CLIENT_ID"
ENV_CLIENT_SECRET = "CLIENT_SECRET"

# Seconds subtracted from the reported token lifetime
TOKEN_SAFETY_MARGIN = 60

# Used when the token response omits expires_in
DEFAULT_TOKEN_LIFETIME = 3600

# Upstream range limits per resolution, in days. Not enforced client-side;
# the server rejects out-of-policy ranges.
MAX_QUARTER_RANGE_DAYS = 92
MAX_HOUR_RANGE_DAYS = 366
MAX_REQUEST_RANGE_DAYS = 730
