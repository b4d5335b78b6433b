"""Package-wide base error."""


class CoreError(Exception):
    """Base class for errors raised at a type-construction boundary.

    Raised, through subclasses, when an id fails to parse, a source span is
    inverted, canonical JSON cannot be produced, or a report invariant is
    violated.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message