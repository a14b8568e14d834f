import os

# Project root directory
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Log file location for the UI app and runner scripts
LOGS_DIR = os.path.join(BASE_DIR, "logs")
LOG_LEVEL = os.getenv("PRICEPANEL_LOG_LEVEL", "INFO").upper()

# Local server binding
HOST = os.getenv("PRICEPANEL_HOST", "127.0.0.1")
PORT = int(os.getenv("PRICEPANEL_PORT", "5000"))

# Optional fixed seed for reproducible mock data (unset = fresh entropy)
_seed = os.getenv("PRICEPANEL_SEED")
RANDOM_SEED = int(_seed) if _seed else None

# Mock series generation
POINT_COUNT = 50
PRICE_MIN = 60000.0
PRICE_SPAN = 5000.0
VOLUME_MAX = 500000.0
COMPARISON_FACTOR_MIN = 0.8
COMPARISON_FACTOR_MAX = 1.2

# Panel defaults
DEFAULT_TIME_RANGE = "1w"
INITIAL_PRICE = 63179.71
INITIAL_CHANGE = 2161.42
INITIAL_CHANGE_PCT = 3.54

# Chart geometry (pixels) and palette
CHART_WIDTH = 840
CHART_HEIGHT = 400
CHART_MARGIN = {"l": 40, "r": 40, "t": 30, "b": 20}
VOLUME_AXIS_MAX = 1000000
PRICE_COLOR = "#4B40EE"
PRICE_FILL = "rgba(26, 115, 232, 0.2)"
COMPARISON_COLOR = "#34a853"
COMPARISON_FILL = "rgba(52, 168, 83, 0.2)"
VOLUME_COLOR = "#E6E8EB"
CROSSHAIR_COLOR = "rgba(0, 0, 0, 0.2)"
CROSSHAIR_DASH = (5, 5)
