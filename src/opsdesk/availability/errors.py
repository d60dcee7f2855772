"""Exceptions raised by the availability workflow."""


class AvailabilityError(Exception):
    """Base class for availability workflow failures."""


class ValidationError(AvailabilityError):
    """A workflow precondition was violated; nothing was changed."""


class MalformedKey(AvailabilityError):
    """A slot key string does not have the ``<YYYY-MM-DD>-<index>`` shape."""


class PersistenceError(AvailabilityError):
    """The record store failed to read or write."""
