"""Error taxonomy for the nine-box engine."""


class NineBoxError(Exception):
    """Base class for engine errors."""


class ValidationError(NineBoxError):
    """Invalid input: missing override justification, out-of-range config, etc."""

    def __init__(self, message: str, axis: str | None = None):
        super().__init__(message)
        self.message = message
        self.axis = axis


class NoDataError(NineBoxError):
    """An axis has no contributing sources and cannot be auto-rated."""

    def __init__(self, axis: str):
        super().__init__(
            f"Insufficient data to rate the {axis} axis; "
            f"override the {axis} rating with a justification"
        )
        self.axis = axis


class ConsistencyViolation(NineBoxError):
    """Stored state breaks an integrity invariant. Never auto-corrected."""


class NotFoundError(NineBoxError):
    """Referenced assessment does not exist for this tenant."""
