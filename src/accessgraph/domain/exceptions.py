"""Domain exceptions."""


class AccessGraphError(Exception):
    """Base exception for accessgraph."""

    pass


class InvalidReference(AccessGraphError):
    """A role, permission or resource reference could not be resolved."""

    def __init__(self, kind: str, value: object, reason: str | None = None) -> None:
        self.kind = kind
        self.value = value
        message = f"Invalid {kind} reference: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ValidationError(AccessGraphError):
    """Validation failed for input data."""

    pass
