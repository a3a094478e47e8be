"""Custom exceptions for the Out-of-Office agent."""


class OutOfOfficeError(Exception):
    """Base exception for all Out-of-Office agent errors."""


class GmailAPIError(OutOfOfficeError):
    """Exception raised for Gmail API related errors."""


class ConfigurationError(OutOfOfficeError):
    """Exception raised for configuration related errors."""


class AuthenticationError(OutOfOfficeError):
    """Exception raised for authentication failures."""


class MissingHeaderError(OutOfOfficeError):
    """Exception raised when a message lacks a header needed to reply."""

    def __init__(self, header: str, message_id: str | None = None) -> None:
        self.header = header
        self.message_id = message_id
        super().__init__(f"Message {message_id or '(unknown)'} has no {header} header")
