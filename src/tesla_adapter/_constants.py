"""Internal constants shared across the adapter."""

#: Path templates appended to ``AdapterConfig.base_url``.
WAKE_UP_PATH = "api/1/vehicles/{vehicle_id}/wake_up"
VEHICLE_DATA_PATH = "api/1/vehicles/{vehicle_id}/vehicle_data"
DOOR_UNLOCK_PATH = "api/1/vehicles/{vehicle_id}/command/door_unlock"
DOOR_LOCK_PATH = "api/1/vehicles/{vehicle_id}/command/door_lock"
HONK_HORN_PATH = "api/1/vehicles/{vehicle_id}/command/honk_horn"

#: Coordinates are sent as fixed-point integers scaled by this factor.
LAT_LONG_MULTIPLICATION_FACTOR = 1_000_000

#: Firestore field holding the bearer token in each vehicle document.
TOKEN_FIELD = "tokenToStore"

DEFAULT_ERROR_STATUS = 500
