"""Error taxonomy for QR link operations."""


class QRLinkError(Exception):
    """Base class for all QR link errors."""


class InvalidDestination(QRLinkError, ValueError):
    """Destination URL is blank or whitespace-only."""

    def __init__(self, message: str = "Destination URL is required"):
        super().__init__(message)


class MissingPayload(QRLinkError, ValueError):
    """Payload carries none of the recognized parameters."""

    def __init__(self, message: str = "No recognized payload parameter present"):
        super().__init__(message)


class NotFound(QRLinkError, LookupError):
    """Link record does not exist."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Link record '{record_id}' not found")


class StoreUnavailable(QRLinkError):
    """Record store backend or transport failure."""


class EncodeFailure(QRLinkError):
    """Code image rendering failed."""
