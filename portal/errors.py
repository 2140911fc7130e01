"""Error taxonomy shared by services and routers."""
from fastapi import status


class PortalError(Exception):
    """Base class for errors the portal knows how to report."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class AuthorizationError(PortalError):
    """Bad credentials, locked candidate, or wrong role."""

    status_code = status.HTTP_403_FORBIDDEN


class SessionNotFoundError(PortalError):
    """Operation against a session id the store does not know."""

    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(PortalError):
    """Malformed request; raised before any side effect."""

    status_code = status.HTTP_400_BAD_REQUEST


class ProviderError(PortalError):
    """The external text generation call failed or timed out."""

    status_code = status.HTTP_502_BAD_GATEWAY


class GenerationError(PortalError):
    """Provider output could not be turned into a valid question set."""


class GradingError(PortalError):
    """A coding grade or feedback call could not produce a usable result."""
