"""Internal constants shared across the library."""

BASE_URL = "https://navdatapro.aerosoft.com"
LOCATION_ENDPOINT = "/api/v3/location"
USER_AGENT = "ndpbridge"

SETTINGS_DIR = ".ndp-chartcloud"
SETTINGS_FILE = "ndp-settings.json"

DEFAULT_RETRY_INTERVAL = 1.0
DEFAULT_DISPATCH_INTERVAL = 0.1
DEFAULT_POLL_INTERVAL = 1.0

# ------------------------------------------------------------------
# SimConnect SDK values used by the push subscription
# ------------------------------------------------------------------

SIMCONNECT_APP_NAME = "NDP SimConnect"
SIMCONNECT_DATATYPE_FLOAT64 = 4
SIMCONNECT_PERIOD_SECOND = 4
SIMCONNECT_DATA_REQUEST_FLAG_CHANGED = 0x00000001
SIMCONNECT_OBJECT_ID_USER = 0
SIMCONNECT_UNUSED = 0xFFFFFFFF

SIMCONNECT_RECV_ID_EXCEPTION = 1
SIMCONNECT_RECV_ID_OPEN = 2
SIMCONNECT_RECV_ID_QUIT = 3
SIMCONNECT_RECV_ID_SIMOBJECT_DATA = 8

# (simvar, unit) in payload order
SIMCONNECT_POSITION_VARS: tuple[tuple[str, str], ...] = (
    ("Plane Latitude", "degrees"),
    ("Plane Longitude", "degrees"),
    ("Plane Heading Degrees True", "degrees"),
    ("Plane Altitude", "feet"),
)

# ------------------------------------------------------------------
# FSUIPC offsets  (address, pyuipc type code)
# ------------------------------------------------------------------

FSUIPC_OFFSET_LONGITUDE = (0x0568, "l")
FSUIPC_OFFSET_LATITUDE = (0x0560, "l")
FSUIPC_OFFSET_HEADING = (0x0580, "u")
FSUIPC_OFFSET_ALTITUDE = (0x0020, "u")

# ------------------------------------------------------------------
# FSUIPC fixed-point scales
# ------------------------------------------------------------------

FSUIPC_LAT_SCALE = 10001750.0 * 65536.0 * 65536.0
FSUIPC_LON_SCALE = 65536.0 * 65536.0 * 65536.0 * 65536.0
FSUIPC_HEADING_SCALE = 65535.0 * 65535.0
FSUIPC_ALTITUDE_SCALE = 256.0
FEET_PER_METRE_DIVISOR = 0.3048
