"""
Exception hierarchy for the media catalog.

Views translate these into HTTP responses; services raise them.
"""


class CatalogError(Exception):
    """Base exception for all catalog errors."""
    pass


class WorkflowError(CatalogError):
    """Raised when a workflow operation is called incorrectly."""
    pass


class StaleRecordError(CatalogError):
    """Raised when a record was saved by another writer since it was read."""
    pass


class CanonicalNameCollision(CatalogError):
    """Raised when a new record would reuse an existing canonical name."""
    pass


class StorageProviderError(CatalogError):
    """Raised when the object-storage provider cannot be reached or refuses a call."""
    pass
