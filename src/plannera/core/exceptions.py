"""Exception hierarchy for the legislation core."""


class PlanneraError(Exception):
    """Base error for plannera."""


class MalformedDocument(PlanneraError, ValueError):
    """Raised when a document cannot be parsed as XML at all."""


class InvalidPersistedDocument(PlanneraError, ValueError):
    """Raised when stored LEP/DCP JSON fails schema validation."""

    def __init__(self, kind: str, errors: list[str]) -> None:
        self.kind = kind
        self.errors = errors
        message = f"Invalid persisted {kind} document:\n- " + "\n- ".join(errors)
        super().__init__(message)


class InstrumentFetchError(PlanneraError, RuntimeError):
    """Raised when an instrument cannot be fetched and no fixture is configured."""
