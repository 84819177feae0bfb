# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# The HTTP layer of the Bootcamp Directory API:
# - main.py: app assembly, middleware, exception handler registration
# - config.py: settings loaded from the environment
# - exceptions.py: typed API errors and the error envelope
# - auth/: token guard, role checks and the /auth endpoints
# - routers/: resource endpoints
#
# Routers parse and authorize; core/services does the work.
# =============================================================================
