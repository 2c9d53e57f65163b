from __future__ import annotations


class CountdownError(Exception):
    """Base class for event-countdown errors."""


class MalformedRecord(CountdownError):
    """A stored event record (or the collection around it) cannot be parsed."""


class ColorDecodeFailure(CountdownError):
    pass


class ByteStoreError(CountdownError):
    """The key-value byte store could not be read."""


class PersistFailure(ByteStoreError):
    """A write to the key-value byte store did not succeed."""


class ConfigError(CountdownError):
    pass
