"""
Exception types for collect-images.
"""

from typing import Optional


class CollectImagesError(Exception):
    """Base class for failures while collecting the images of one document."""

    def __init__(self, message: str, document: Optional[str] = None, locator: Optional[str] = None):
        super().__init__(message)
        self.document = document
        self.locator = locator

    def __str__(self) -> str:
        message = super().__str__()
        if self.document:
            return f"{self.document}: {message}"
        return message


class SourceNotFoundError(CollectImagesError):
    """A local image is missing from both its source and its destination."""


class FetchFailedError(CollectImagesError):
    """A remote image could not be retrieved."""


class MalformedReferenceError(CollectImagesError):
    """Image markup without a usable source locator."""


class DocumentStreamError(CollectImagesError):
    """Reading or writing a document failed."""
