"""Store failures raised by repository implementations."""


class PersistenceError(Exception):
    """Generic store failure.

    ``code`` carries the backend's structured error name (e.g. SQLITE_CONSTRAINT_FOREIGNKEY)
    when one is available. Clients only ever see a generic message.
    """

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class DuplicateKeyError(PersistenceError):
    """A uniqueness constraint rejected the write."""

    def __init__(self, message: str, *, code: str | None = None, constraint: str | None = None) -> None:
        super().__init__(message, code=code)
        self.constraint = constraint
