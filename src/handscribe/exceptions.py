"""Exception hierarchy for Handscribe."""


class HandscribeError(Exception):
    """Base exception for all Handscribe errors."""

    pass


class InvalidInputError(HandscribeError):
    """Structurally invalid input that cannot be analyzed or rendered."""

    pass


class EmptyCatalogError(InvalidInputError):
    """Glyph template catalog has no templates."""

    def __init__(self) -> None:
        super().__init__("Glyph template catalog is empty")


class ImageError(HandscribeError):
    """Errors related to image loading."""

    pass


class ImageLoadError(ImageError):
    """Error decoding an image file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image '{path}': {reason}")


class StyleError(HandscribeError):
    """Style descriptor with a missing, non-finite or out-of-range field."""

    pass


class StyleLoadError(StyleError):
    """Error reading a stored style descriptor."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load style '{path}': {reason}")


class DocumentWriteError(HandscribeError):
    """Error exporting a rendered document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write document '{path}': {reason}")
