"""
Configuration constants for the filesystem analyzer.
"""
import os

# --- Metadata ---
# Owner shown when the platform cannot resolve one
UNKNOWN_OWNER = "unknown"

# --- Worker Pool ---
# One worker per logical processor
DEFAULT_MAX_WORKERS = os.cpu_count() or 1

# Seconds shutdown() waits for in-flight scans before cancelling them
SHUTDOWN_GRACE_SECONDS = 60.0

# --- Presentation ---
SIZE_UNITS = ["KB", "MB", "GB"]
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
