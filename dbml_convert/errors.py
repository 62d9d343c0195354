"""Exceptions raised by the conversion pipeline."""

from pathlib import Path
from typing import Union


class ConversionError(Exception):
    """Base class for every error surfaced to callers."""


class SchemaStructureError(ConversionError):
    """The database object does not carry a usable tables array."""


class InvalidSheetNameError(SchemaStructureError):
    """A table name cannot be used as a worksheet title."""


class NoWorkbookError(ConversionError):
    """save_to_file() was called before export()."""


class DBMLParseError(ConversionError):
    pass


class InputNotFoundError(ConversionError):
    pass


class UnsupportedFormatError(ConversionError):
    pass


class ExportWriteError(ConversionError):
    """Writing an output file failed; the original OSError is chained."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path}: {cause}")
