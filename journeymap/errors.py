"""Error taxonomy for the journey map engine."""


class JourneyMapError(Exception):
    """Base class for all engine errors. None of them are fatal."""


class ValidationError(JourneyMapError, ValueError):
    """Local rejection of an operation before any state is mutated."""


class IndexOutOfRange(ValidationError, IndexError):
    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Step index {index} out of range for {length} steps")
        self.index = index
        self.length = length


class GenerationInProgress(ValidationError):
    """A generation is already in flight for this draft."""


class GenerationFailed(JourneyMapError):
    """The generation service failed or returned a malformed draft."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class PersistenceFailed(JourneyMapError):
    """The store rejected a create/update/delete."""
