"""Infrastructure Layer — store handle, store adapter, and logging setup.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All store failures are mapped to BackendUnavailableError
"""
