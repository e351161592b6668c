"""Domain exceptions raised by the line-topology engine."""


class SubwayError(Exception):
    """Base exception for subway domain errors."""

    pass


class ValidationError(SubwayError):
    """
    Raised when a caller asks for something the line cannot accept.

    Covers malformed sections (non-positive distance, identical endpoints),
    duplicate or unconnectable inserts, and deletions that would empty the
    line or name a station that is not on it. Maps to a client error.
    """

    pass


class TopologyError(SubwayError):
    """
    Raised when persisted sections do not form a single simple path.

    This indicates corrupted stored state rather than a bad request and
    should not be retried.
    """

    def __init__(self, message: str, section_count: int | None = None) -> None:
        self.section_count = section_count
        super().__init__(message)
