"""Domain semantic exceptions."""


class DomainError(Exception):
    """Base domain exception."""


class LocationResolutionError(DomainError):
    """Raised when origin or destination cannot be used as coordinates."""
