"""Error types surfaced to the command line."""


class CommandError(Exception):
    """A failure reported to the user with a plain message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CommandError):
    """Options rejected before any request was sent."""


class ServerError(CommandError):
    """ProcessQuery batch reported ErrorInfo."""

    def __init__(self, message: str, error_type: str = None, correlation_id: str = None):
        super().__init__(message)
        self.error_type = error_type
        self.correlation_id = correlation_id


class ProcessQueryParseError(CommandError):
    """ProcessQuery response body could not be interpreted."""
