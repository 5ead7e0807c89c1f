"""Typed domain errors.  The HTTP layer maps each one to a status code."""


class DomainError(Exception):
    """Base class for every error raised by the domain and service layers."""


class ValidationError(DomainError):
    """Malformed input or a reference to a record that does not exist."""


class NotFoundError(DomainError):
    """The requested record does not exist (or is not visible to the caller)."""


class ForbiddenError(DomainError):
    """The acting user has no authority for the requested action."""


class InvalidTransitionError(DomainError):
    """Raised when a status change violates a state machine."""


class DuplicateError(DomainError):
    """The record would duplicate one that already exists."""


class DuplicateConnectionError(DuplicateError):
    """A pending request from this tourist to this guide already exists."""
