"""Centralized application default values for easier review and tweaks."""

# Base color defaults
DEFAULT_BASE_COLOR = "#3b82f6"
# Stored as the SchemeType enum value for cycle-free import.
DEFAULT_SCHEME = "monochromatic"

# Swatch count bounds
DEFAULT_SWATCH_COUNT = 5
MIN_SWATCH_COUNT = 3
MAX_SWATCH_COUNT = 10

# Text color selection (YIQ luminance over 0-255 channels)
CONTRAST_LUMINANCE_THRESHOLD = 128

# Input handling
DEFAULT_DEBOUNCE_SECONDS = 0.3

# Copy / export defaults
DEFAULT_COLOR_FORMAT = "hex"
OKLCH_CHROMA_SCALE = 0.4
DEFAULT_EXPORT_KEY_PREFIX = "--color-"
DEFAULT_EXPORT_LINE_TERMINATOR = ";"
DEFAULT_EXPORT_WRAP_QUOTES = False

# Sharing
SHARE_QUERY_PARAM = "palette"
