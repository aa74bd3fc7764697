class CatalogError(Exception):
    """Raised when a catalog provider receives a response it cannot interpret."""
