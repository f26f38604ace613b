"""Custom exceptions for catbot."""

from typing import Optional

from catbot.calc.schema.enums import ParseFailureReason


class ParseError(Exception):
    """Exception raised when a calc scenario cannot be parsed.

    Raised by the side parser when a side reduces to an empty species name.
    The scenario parser catches it and surfaces a ParseFailure value instead.

    Attributes:
        reason: Why the parse failed
        text: The fragment of input that could not be parsed
    """

    def __init__(self, reason: ParseFailureReason, text: str):
        self.reason = reason
        self.text = text
        super().__init__(f"{reason.value}: {text!r}")


class CalcServiceError(Exception):
    """Exception raised when the damage calculation service fails.

    Attributes:
        message: Error text reported by the service or the HTTP layer
        status_code: HTTP status code, if a response was received
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SetsFetchError(Exception):
    """Exception raised when the sets data for a format cannot be fetched.

    Attributes:
        format_id: Format whose sets were requested (e.g. "gen9ou")
        message: Description of the failure
    """

    def __init__(self, format_id: str, message: str):
        self.format_id = format_id
        self.message = message
        super().__init__(f"Error fetching sets for {format_id}: {message}")


class LookupServiceError(Exception):
    """Exception raised when PokeAPI or the cat API cannot answer a lookup."""

    def __init__(self, service: str, message: str):
        self.service = service
        self.message = message
        super().__init__(f"{service}: {message}")


class ShowdownLoginError(Exception):
    """Exception raised when the bot cannot log in to a Showdown server.

    Attributes:
        username: Name the bot tried to log in as
        reason: Error text from the login server or the "|nametaken|" line
    """

    def __init__(self, username: str, reason: str):
        self.username = username
        self.reason = reason
        super().__init__(f"Login as {username} failed: {reason}")
