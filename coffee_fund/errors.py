"""Coffee fund error types."""


class CoffeeFundError(Exception):
    """Base class for coffee fund errors."""


class ParseError(CoffeeFundError, ValueError):
    """Raised when text is not an amount in the currency notation."""

    def __init__(self, text: str):
        super().__init__(f"Not a valid amount: {text!r}")
        self.text = text


class StorageError(CoffeeFundError):
    """Raised when a storage adapter fails to read or write."""


class ClassifyError(CoffeeFundError):
    """Raised when a message cannot be classified because a lookup failed."""


class CatalogLoadError(CoffeeFundError):
    """Raised when the products file cannot be read or is invalid."""
