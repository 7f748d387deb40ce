"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_THRESHOLD_MINUTES = 15
MAX_LATE_THRESHOLD_MINUTES = 60

PROVISIONING_TIMEOUT_SECONDS = 30.0
INVITATION_VALID_HOURS = 24

QR_ID_PREFIX_LENGTH = 8

CSV_PLACEHOLDER = "-"
CSV_FILENAME_PREFIX = "riwayat-kehadiran"

DEFAULT_BLACKLIST_REASON = "Manually blacklisted by admin"
