# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the domain logic of the API:
# - models/: Pydantic schemas for request validation and filterable fields
# - services/: Persistence, ownership checks and derived averages
#
# Services raise typed exceptions from app.exceptions and never build
# HTTP responses themselves.
# =============================================================================
