"""Constants used across the iss-poster package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "iss-poster"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME
DEFAULT_STAGING_DIR = Path.home() / ".cache" / APP_NAME

ISS_NORAD_ID = 25544
DEFAULT_TELEMETRY_URL = f"https://api.wheretheiss.at/v1/satellites/{ISS_NORAD_ID}"
DEFAULT_TELEMETRY_TIMEOUT_SECONDS = 5.0

DEFAULT_IMAGERY_BASE_URL = "https://gibs.earthdata.nasa.gov/wms/epsg4326/best/wms.cgi"
DEFAULT_IMAGERY_LAYER = "MODIS_Terra_CorrectedReflectance_TrueColor"
DEFAULT_IMAGERY_WIDTH = 4096
DEFAULT_IMAGERY_HEIGHT = 2048
DEFAULT_IMAGERY_TIMEOUT_SECONDS = 20.0
DEFAULT_IMAGERY_FILENAME = "nasa-map.jpg"

DEFAULT_GRAPH_URL = "https://graph.facebook.com"
DEFAULT_GRAPH_API_VERSION = "v24.0"
DEFAULT_PUBLISH_TIMEOUT_SECONDS = 60.0
# Facebook rejects page posts longer than this many characters.
DEFAULT_MESSAGE_LIMIT = 63206

# Weekday selection uses the host timezone unless an IANA name is configured.
LOCAL_TIMEZONE = "local"
DEFAULT_DISPLAY_TIMEZONE = LOCAL_TIMEZONE
