class InvalidArgumentError(ValueError):
    """Error raised when `to_nlcst()` is called with a missing or malformed argument."""

    def __init__(self, expected: str):
        self.expected = expected
        self.message = f"html-nlcst expected {expected}"
        super().__init__(self.message)


class UnprocessableEntityError(Exception):
    """Error raised when a document cannot be read, like when its encoding cannot be determined."""
