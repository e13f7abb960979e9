"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

COLLECTION_DEPARTMENTS = "departments"
COLLECTION_WORKERS = "workers"
COLLECTION_LOCATIONS = "locations"
COLLECTION_CHECKINS = "checkins"
COLLECTION_DELETION_REQUESTS = "deletion_requests"

# Collections whose documents carry a department_id and must never be read unfiltered.
TENANT_COLLECTIONS = frozenset(
    {
        COLLECTION_WORKERS,
        COLLECTION_LOCATIONS,
        COLLECTION_CHECKINS,
    }
)

DEPARTMENT_FIELD = "department_id"

ONE_DAY_MS = 24 * 60 * 60 * 1000
AT_RISK_THRESHOLD_PERCENT = 80

UNKNOWN_WORKER_NAME = "Unknown"
DEFAULT_ZONE = "General"
DEFAULT_SESSION_IDLE_MINUTES = 12 * 60
