# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - bootcamps.py: Bootcamp CRUD, radius search, photo, join, nested children
# - courses.py: Course endpoints
# - reviews.py: Review endpoints
# - users.py: Admin user management
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import bootcamps
from . import courses
from . import health
from . import reviews
from . import users

__all__ = [
    "bootcamps",
    "courses",
    "health",
    "reviews",
    "users",
]
