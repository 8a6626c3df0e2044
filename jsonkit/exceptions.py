"""Custom exceptions for jsonkit."""


class JsonKitError(Exception):
    """Base exception for jsonkit errors."""
    pass


class InputParseError(JsonKitError):
    """Raised when JSON or YAML text cannot be parsed."""
    def __init__(self, message: str, line: int = None, column: int = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class CompareError(JsonKitError):
    """Raised when either side of a comparison is not valid JSON."""
    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidJsonError(JsonKitError):
    """Raised by the formatter when its input is not valid JSON."""
    def __init__(self, message: str = "Invalid JSON format"):
        super().__init__(message)
        self.message = message


class UnresolvedRefError(JsonKitError):
    """Raised when a $ref cannot be resolved."""
    def __init__(self, ref: str, reason: str = None):
        super().__init__(f"Could not resolve reference: {ref}")
        self.ref = ref
        self.reason = reason

