"""Shared constants for the workout map app."""

# Persistence
STORAGE_KEY = 'workouts'
BLOB_FORMAT_VERSION = 1
DEFAULT_DB_PATH = 'workouts.db'

# Map
MAP_ZOOM_LEVEL = 13
TILE_URL_TEMPLATE = 'https://tile.openstreetmap.org/{z}/{x}/{y}.png'
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)
POPUP_OPTIONS = {
    'maxWidth': 250,
    'minWidth': 100,
    'autoClose': False,
    'closeOnClick': False,
    'closeButton': True,
    'closeOnEscapeKey': True,
}
PAN_DURATION_SEC = 1

# Month names, indexed by month-of-year - 1
MONTHS = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)

# List row detail icons
DETAIL_ICONS = {
    'duration': '⏱',
    'pace': '⚡️',
    'speed': '⚡️',
    'cadence': '🦶🏼',
    'elevation': '⛰',
}

# Row click targets
ROW_TARGET_DELETE = 'delete'
ROW_TARGET_ROW = 'row'
