# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - database.py: MongoDB client singleton and index setup
# - query_builder.py: filter/select/sort/paginate/populate for list endpoints
# - security.py: password hashing, access tokens, reset tokens
# - geocoder.py: address -> GeoJSON point via the geocoding provider
# - mailer.py: outgoing email via the mail provider
# - utils.py: Shared utilities (error base class, document serialization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.database import Database, DatabaseError
from lib.query_builder import Populate, QueryBuilderError, build_advanced_results
from lib.utils import ApplicationError, serialize_document, serialize_documents, to_object_id

__all__ = [
    # Database
    "Database",
    "DatabaseError",
    # Query builder
    "Populate",
    "QueryBuilderError",
    "build_advanced_results",
    # Utils
    "ApplicationError",
    "serialize_document",
    "serialize_documents",
    "to_object_id",
]
