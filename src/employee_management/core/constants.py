"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000

INVITATION_CODE_LENGTH = 6
INVITATION_CODE_MAX_ATTEMPTS = 5
# Placeholder code held by a company between admin sign-up and code issuance.
PENDING_INVITATION_CODE = "PENDING"

DELETION_GRACE_DAYS = 10

DEFAULT_AI_TIMEOUT_SECONDS = 20
DEFAULT_AI_MODEL = "gemini-2.5-flash"

STANDARD_BASIC_SALARY = 5000
STANDARD_DEDUCTIONS = 500

DEFAULT_HISTORY_LIMIT = 30
