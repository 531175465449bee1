"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric or string constant should
import it from here instead of hardcoding.  This avoids drift between
apps that use the same value.
"""

# ── Protocol numbers ────────────────────────────────────────────────
# Format: DENUNCIA-YYYYMMDD-NNNN (1-based, zero-padded, per calendar day)
PROTOCOL_PREFIX: str = "DENUNCIA"
PROTOCOL_SEQUENCE_DIGITS: int = 4

# A protocol-number collision is retried once before surfacing DUPLICATE.
PROTOCOL_MAX_ATTEMPTS: int = 2

# ── Money ───────────────────────────────────────────────────────────
DEFAULT_CURRENCY: str = "AOA"

# ── Validation ──────────────────────────────────────────────────────
MIN_COMPLAINT_DESCRIPTION_LENGTH: int = 10
MIN_UPDATE_DESCRIPTION_LENGTH: int = 5
MIN_LOCATION_LENGTH: int = 3
MIN_SEARCH_QUERY_LENGTH: int = 2

BI_NUMBER_REGEX: str = r"^[0-9]{9}[A-Z]{2}[0-9]{3}$"
PHONE_REGEX: str = r"^\+244[0-9]{9}$"

# ── Pagination ──────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE: int = 10
DEFAULT_SEARCH_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 50

# ── Evidence uploads ────────────────────────────────────────────────
EVIDENCE_ALLOWED_MIME_TYPES: frozenset[str] = frozenset({
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/pdf",
    "video/mp4",
})
EVIDENCE_MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10 MB
EVIDENCE_MAX_FILES_PER_UPLOAD: int = 10
EVIDENCE_UPLOAD_DIR: str = "complaints"

# ── Statistics ──────────────────────────────────────────────────────
DASHBOARD_ACTIVITY_DAYS: int = 30

SERVICE_NAME: str = "denuncias-api"
SERVICE_VERSION: str = "1.0.0"
