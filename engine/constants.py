"""
Shared constants used across the measurement engine.

Centralises endpoints, default headers, and timing tunables so they live in
exactly one place.
"""

# ---------------------------------------------------------------------------
# HTTP headers
# ---------------------------------------------------------------------------

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/144.0.0.0 Safari/537.36"
)

COMMON_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
}

# Sent with every latency probe so no cache answers on the server's behalf.
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

PING_URL = "https://upload.wikimedia.org/wikipedia/commons/c/c0/Blank.gif"
DOWNLOAD_URL = "https://upload.wikimedia.org/wikipedia/commons/3/3f/Fronalpstock_big.jpg"
NETWORK_INFO_URL = "https://ipwho.is/"

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

PING_ITERATIONS = 5
PING_PAUSE_SECONDS = 0.1         # fixed gap between latency probes

SIM_TICK_SECONDS = 0.1           # simulated progress tick
SIM_STEP_PERCENT = 5.0           # progress added per tick

DEFAULT_REQUEST_TIMEOUT = 10.0   # seconds, connect / per-read
MIN_REQUEST_TIMEOUT = 1.0
MAX_REQUEST_TIMEOUT = 120.0
MAX_RUN_TIME = 3600.0

# ---------------------------------------------------------------------------
# Data transfer
# ---------------------------------------------------------------------------

CHUNK_SIZE = 64 * 1024
DEFAULT_CONTENT_LENGTH = 5_000_000  # assumed body size without Content-Length
BITS_PER_MEGABIT = 1_048_576

# ---------------------------------------------------------------------------
# Simulation ranges (inclusive, Mbps)
# ---------------------------------------------------------------------------

DOWNLOAD_FALLBACK_RANGE = (50, 150)
UPLOAD_RANGE = (10, 50)

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

DOWNLOAD_FAILED_MESSAGE = "Speed test failed. Please try again."
UNKNOWN_ISP = "Unknown ISP"
