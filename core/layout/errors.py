"""Exception types raised at the layout module boundaries."""


class LayoutError(Exception):
    """Base class for layout module errors."""


class PersistenceError(LayoutError):
    """A project snapshot could not be written or read back."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        base = super().__str__()
        if self.path:
            return f"{self.path}: {base}"
        return base


class TemplateError(LayoutError):
    """A layout template is unknown or failed validation."""
