"""Application configuration constants."""

from __future__ import annotations

# Performance
ASYNC_WORKERS = 6
WORKER_POLL_TIMEOUT_S = 0.1
UI_EVENTS_PER_POLL = 100

# Decoded image cache (current + both neighbors with slack)
CACHE_CAPACITY = 16

# Image limits
MAX_IMAGE_DIMENSION = 8192
MAX_FILE_SIZE_MB = 200

# Metadata
DATE_FORMAT = "%Y-%m-%d %H:%M"
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"
GPS_DECIMALS = 6

# Console front end
CONSOLE_SETTLE_S = 0.25
CONSOLE_PROMPT = "> "
METADATA_LABEL_WIDTH = 16

# Environment switches
ENV_QUIET = "PHOTOREEL_QUIET"

# Supported image extensions
RAW_EXTS = frozenset({".dng", ".nef", ".cr2", ".arw", ".raf"})
HEIF_EXTS = frozenset({".heic", ".heif"})
IMG_EXTS = frozenset({
    ".jpg", ".jpeg", ".png", ".webp", ".tiff", ".gif", ".bmp",
}) | HEIF_EXTS | RAW_EXTS
