class RespondException(Exception):
    """Base exception for respond."""
    status_code = 500  # Default status code
    message: str

    def __init__(self, message: str | None = None, *args):
        super().__init__(message, *args)
        if message is not None:
            self.message = message
        elif args and args[0]:
            self.message = str(args[0])
        else:
            self.message = self.__class__.__name__

    def __str__(self) -> str:
        return self.message


class ErrorResponse(RespondException):
    """An error with an explicit HTTP status, raised by the per-status responder helpers."""

    def __init__(self, status_code: int, message: str = ""):
        super().__init__(message)
        self.status_code = status_code

    def __repr__(self):
        return f"<{self.__class__.__name__} status_code={self.status_code} message={self.message!r}>"


class JSONEncodingError(RespondException):
    """Raised when a reply value cannot be encoded as JSON (500)."""
    status_code = 500


class ResponderPreconditionError(Exception):
    """Raised when the responder is misused, e.g. created without a sink.

    These are programming errors, they are never turned into HTTP responses.
    """


class RespondConfigurationError(Exception):
    """Raised when the respond configuration is invalid."""
    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key
        if key:
            self.add_note(f"Configuration key: {key}")
