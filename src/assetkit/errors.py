"""
Import Errors

Exception hierarchy raised by asset importers.

Every fatal condition aborts only the import of the current file; the
registry never sees a partially parsed asset.
"""

from typing import Optional


class AssetImportError(ValueError):
    """
    Base class for all asset import failures.

    ``file`` and ``line_number`` may be filled in after construction by
    the importer that knows them; they are folded into the message.
    """

    def __init__(self, message: str, file: Optional[str] = None, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.file = file
        self.line_number = line_number

    def __str__(self):
        location = self.file or ""
        if self.line_number is not None:
            location = f"{location}:{self.line_number}" if location else f"line {self.line_number}"
        if location:
            return f"{location}: {self.message}"
        return self.message


class UnsupportedVersionError(AssetImportError):
    """File declares a format version this importer does not understand."""


class UnsupportedComplexityError(AssetImportError):
    """Asset exceeds a hard limit (bones per model, weights per vertex)."""


class MalformedCountError(AssetImportError):
    """Declared element count does not match the number actually parsed."""


class MalformedHierarchyError(AssetImportError):
    """Bone references a parent that has not been declared before it."""


class MalformedLineError(AssetImportError):
    """A directive line is missing a field, holds an unparsable value or is out of place."""


class UnsupportedFileFormatError(AssetImportError):
    """No importer is registered for the file extension (non-fatal)."""


class MalformedImageError(AssetImportError):
    """Image data cannot be decoded."""
