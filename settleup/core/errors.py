from __future__ import annotations

from typing import Optional


class SettleUpError(ValueError):
    """Base class for problems with the contents of an export."""


class DateFormatError(SettleUpError):
    pass


class RecordFormatError(SettleUpError):

    def __init__(self, message: str, line_no: Optional[int] = None):
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class OutputWriteError(SettleUpError):
    """Records that cannot be stored in the requested workbook format."""
