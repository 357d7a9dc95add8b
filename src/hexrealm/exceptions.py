"""Custom exceptions for realm handling."""


class RealmError(Exception):
    """Base exception for realm errors."""

    pass


class MalformedRealmError(RealmError, ValueError):
    """Raised when an imported realm document is missing required data."""

    pass


class InvalidOptionsError(RealmError, ValueError):
    """Raised when generation options fail semantic validation.

    Attributes:
        errors: The OptionError entries describing each offending field.
    """

    def __init__(self, errors: list) -> None:
        self.errors = list(errors)
        detail = "; ".join(str(e) for e in self.errors)
        super().__init__(f"Invalid generation options: {detail}")
