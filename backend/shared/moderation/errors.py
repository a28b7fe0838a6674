"""Failures of the external moderation provider, classified by cause."""


class ModerationError(Exception):
    """Content could not be moderated."""


class ModerationAPIError(ModerationError):
    """Provider answered with a non-success status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"Status: {status}, Message: {message}")
        self.status = status
        self.message = message


class ModerationClientError(ModerationAPIError):
    """Provider rejected the request (4xx, or any other non-2xx, non-5xx status). Retrying will not help."""


class ModerationServerError(ModerationAPIError):
    """Provider failed (5xx) on every attempt."""


class ModerationTransportError(ModerationError):
    """Network or timeout failures outlasted the retry policy."""


class ModerationSchemaError(ModerationError):
    """Provider answered 2xx with a body that does not match the expected schema."""
