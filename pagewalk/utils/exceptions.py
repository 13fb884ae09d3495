class PagewalkError(Exception):
    """Base exception for all Pagewalk errors."""


class TransportError(PagewalkError):
    """Raised by a collection source when the backing store cannot answer.

    Covers network, authentication, quota and timeout failures.
    """


class NavigationError(PagewalkError):
    """Raised when a page lies beyond the frontier of cached cursors."""


class StaleResponseDiscarded(PagewalkError):
    """Raised internally when a response belongs to an obsolete query epoch."""


class NotConnected(PagewalkError):
    """Raised when attempting to use a database that is not connected."""
