"""Custom exceptions for Vorsorge-Pilot."""


class VorsorgePilotError(Exception):
    """Base exception."""
    pass


class InvalidLeadError(VorsorgePilotError):
    pass


class LeadNotFoundError(VorsorgePilotError):
    pass


class AuthenticationError(VorsorgePilotError):
    """Wrong username or password."""
    pass


class NotAuthenticatedError(AuthenticationError):
    """No session, or the session has expired."""
    pass


class UserNotFoundError(VorsorgePilotError):
    pass
