
class SlateExploreError(Exception):
    """Base class for errors raised by slate_explore."""


class ValidationError(SlateExploreError, ValueError):
    """A ranking, action count or decision record is malformed."""


class ConfigurationError(SlateExploreError, ValueError):
    """An explorer was built with invalid parameters."""


class PoolExhaustedError(SlateExploreError):
    """No pooled scorer became available before the acquire timeout."""
