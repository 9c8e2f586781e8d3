"""Domain error types."""


class InvalidResponseFormatError(Exception):
    """Raised when a completion response lacks choices[0].message.content."""


class InvalidApiKeyError(Exception):
    """Raised by the completion gateway when the server rejects the API key."""


class ExpensesFormatError(Exception):
    """Raised when aggregated expense rows cannot be converted to ExpensesData."""
