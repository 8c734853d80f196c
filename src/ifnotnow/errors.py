"""Error taxonomy shared by the store, query engine and dispatcher."""


class CoreError(Exception):
    """Base class for every recoverable ifnotnow failure."""


class NotFoundError(CoreError):
    """A referenced context or item does not exist."""


class AlreadyExistsError(CoreError):
    """A context document already exists and will not be overwritten."""


class DecodeError(CoreError):
    """A persisted document is malformed."""


class InvalidPatternError(CoreError):
    """A search pattern cannot be compiled."""


class InvalidTransitionError(CoreError):
    """An attention event is not allowed in the timebox's current state."""


class InvalidAddressError(CoreError):
    """An item path does not resolve to a usable item."""


class StoreIOError(CoreError):
    """Reading or writing the backing medium failed."""
