# =============================================================================
# tests/ - Test Suite
# =============================================================================
# Unit tests (models, security, query builder, aggregates) and endpoint tests
# per router. The database is an in-memory mongomock client and the geocoding
# and mail providers are patched, so no test needs a network.
#
# Run tests with: pytest
# =============================================================================
