"""
Error taxonomy for the terrain height-field engine.

Out-of-bounds access is deliberately absent: reads return the default
height and writes are dropped, so it never surfaces as an exception.
"""


class TerrainError(Exception):
    """Base class for all terrain engine errors."""


class ConfigurationError(TerrainError, ValueError):
    """Raised when dimensions, settings or options are invalid at construction.

    Fatal to the call that raised it only; the receiving object is left as
    it was before the call.
    """


class GenerationFailure(TerrainError):
    """Raised when a noise or amplitude computation produces unusable values.

    Generation aborts before anything is written, so the caller's field is
    never partially updated.
    """


class ConcurrentGenerationRejected(TerrainError):
    """Raised when a generation request arrives while another is in flight.

    The request is dropped, not queued. Session-level callers report it as
    a no-op rather than an error.
    """
