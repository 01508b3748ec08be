"""Exceptions raised by the monetary calculators."""


class MoneyEngineError(Exception):
    """Base class for calculator errors."""


class ConfigurationError(MoneyEngineError):
    """Raised when a tax table is malformed. Fatal at startup."""


class ValidationError(MoneyEngineError, ValueError):
    """Raised when a numeric input is outside its valid domain."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class EmptyDocumentError(ValidationError):
    """Raised when a document must have at least one line but has none."""

    def __init__(self, message: str = "document must contain at least one line item"):
        super().__init__("lines", message)
