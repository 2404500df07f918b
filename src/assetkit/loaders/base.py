"""
Importer Base

Shared contract and line tokenizer for the text-format importers.
"""

from pathlib import Path
from typing import Iterator, Optional, Tuple

from ..errors import AssetImportError, MalformedLineError


class TokenLine:
    """
    One whitespace-tokenized, non-empty source line.

    Typed accessors raise MalformedLineError naming the file and line
    instead of leaking bare IndexError / ValueError.
    """

    def __init__(self, file: str, line_number: int, parts: list):
        self.file = file
        self.line_number = line_number
        self.parts = parts

    @property
    def keyword(self) -> str:
        return self.parts[0]

    def __len__(self):
        return len(self.parts)

    def error(self, message: str) -> MalformedLineError:
        """Build an error pointing at this line."""
        return MalformedLineError(message, self.file, self.line_number)

    def as_text(self, index: int) -> str:
        """Token at index with surrounding double quotes removed."""
        try:
            return self.parts[index].replace('"', '')
        except IndexError:
            raise self.error(f"'{self.keyword}' is missing field {index}") from None

    def as_int(self, index: int) -> int:
        token = self.as_text(index)
        try:
            return int(token)
        except ValueError:
            raise self.error(f"'{self.keyword}' field {index} is not an integer: {token!r}") from None

    def as_float(self, index: int) -> float:
        token = self.as_text(index)
        try:
            return float(token)
        except ValueError:
            raise self.error(f"'{self.keyword}' field {index} is not a number: {token!r}") from None

    def as_floats(self, start: int, count: int) -> Tuple[float, ...]:
        return tuple(self.as_float(start + i) for i in range(count))

    def __repr__(self):
        return f"TokenLine({self.file}:{self.line_number} {' '.join(self.parts)})"


class AssetImporter:
    """
    Base class for file-format importers.

    Subclasses declare the asset class they produce and the file
    extensions they handle, and implement ``load``. ``load`` registers
    what it parsed into the registry only once the whole file validated,
    so a failed import never leaves a partial asset behind.
    """

    asset_type: type = None
    file_extensions: Tuple[str, ...] = ()

    # Lines starting with this prefix are skipped entirely (None: keep all)
    comment_prefix: Optional[str] = None

    def load(self, path, registry) -> None:
        """
        Import a file.

        Args:
            path: Path to the file on disk
            registry: AssetRegistry receiving the parsed assets

        Raises:
            AssetImportError: The file is malformed or unsupported
        """
        path = Path(path)
        self._current_line = None
        try:
            self.parse(path, registry)
        except AssetImportError as e:
            # Errors from nested imports already name their own file
            if e.file is None:
                e.file = path.name
                if e.line_number is None:
                    e.line_number = self._current_line
            raise

    def parse(self, path: Path, registry) -> None:
        """Format-specific parsing; implemented by subclasses."""
        raise NotImplementedError

    def read_lines(self, path) -> Iterator[TokenLine]:
        """
        Stream a file as tokenized lines.

        Lines are left-trimmed and split on runs of whitespace; empty
        lines and comment lines are skipped.
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            for line_number, line in enumerate(f, start=1):
                line = line.lstrip()
                if self.comment_prefix and line.startswith(self.comment_prefix):
                    continue

                parts = line.split()
                if not parts:
                    continue

                self._current_line = line_number
                yield TokenLine(path.name, line_number, parts)
            self._current_line = None

    def __repr__(self):
        return f"{type(self).__name__}(extensions={list(self.file_extensions)})"
