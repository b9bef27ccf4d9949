"""Exception types shared across the search pipeline."""


class OrgFinderError(RuntimeError):
    """Base class for errors raised by the organization finder."""


class ConfigError(OrgFinderError):
    """Raised when configuration values are missing or malformed."""


class LocationNotFoundError(OrgFinderError):
    """Raised when the geocoder returns no candidates for a place name."""


class UpstreamServiceError(OrgFinderError):
    """Raised when an external service fails or returns a non-success response."""


class GeocodingError(UpstreamServiceError):
    """Raised when the geocoding service cannot be reached or answers badly."""


class OverpassError(UpstreamServiceError):
    """Raised when the venue database query fails."""


class DiscoveryError(OrgFinderError):
    """Raised when contact page discovery fails for a single organization."""
