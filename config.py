"""Central configuration for multi-representation QR decoding.

All tunable parameters are defined here with descriptive names.
The representation defaults are pinned: changing them changes which
images the detector sees and therefore the decode rate.
"""

# =============================================================================
# REPRESENTATION GENERATION
# =============================================================================

# Diameter of the local-mean window used by the adaptive thresholder
THRESHOLD_BLOCK_SIZE = 15

# A pixel is foreground when it is darker than (local mean - bias)
THRESHOLD_BIAS = 5

# Local mean used when a window covers no pixels
THRESHOLD_FALLBACK_MEAN = 128

# Linear scale factors for the resampled candidates
UPSCALE_FACTOR = 1.5
DOWNSCALE_FACTOR = 0.8

# The downscaled candidate is only produced when BOTH source dimensions
# are strictly greater than this many pixels
DOWNSCALE_MIN_DIMENSION = 400

# Upper bound on scale factors accepted by RepresentationConfig
MAX_SCALE_FACTOR = 4.0

# =============================================================================
# SOURCES
# =============================================================================

# Extensions picked up when scanning a directory (matched case-insensitively)
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp")

# =============================================================================
# SETTINGS AND OUTPUT
# =============================================================================

APP_NAME = "qr-multiscan"
SETTINGS_FILENAME = "settings.json"

# Environment variable overriding the settings directory
SETTINGS_DIR_ENV = "QRR_SETTINGS_DIR"

# Name of the JSON report written to the output directory
RESULTS_FILENAME = "qr_results.json"

# =============================================================================
# DETECTION
# =============================================================================

# Pattern detector backend selection (see decoding.detector)
DETECTOR_BACKEND = "opencv"
