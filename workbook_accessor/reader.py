"""Workbook reading.

WorkbookReader wraps an openpyxl Workbook and turns the rows of one sheet at a
time into lists, tuples, CSV lines or dicts keyed by the header row.
"""

import logging
import os
from collections.abc import Iterator
from typing import IO, TYPE_CHECKING, Any, Optional, Union

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .cells import cell_to_text, row_to_csv
from .formats import WorkbookFormat, load_workbook
from .sheets import find_sheet, first_sheet, sheet_names

if TYPE_CHECKING:
    from .writer import WorkbookWriter

logger = logging.getLogger(__name__)

WORKBOOK_CLOSED = "Workbook has been closed"
NO_HEADER = "Header is not provided"

ReaderSource = Union[str, "os.PathLike[str]", IO[bytes], Workbook]


def _non_empty_rows(sheet: Worksheet) -> Iterator[tuple]:
    for row in sheet.iter_rows(values_only=True):
        if any(value is not None for value in row):
            yield row


def _used_width(row: tuple) -> int:
    width = len(row)
    while width and row[width - 1] is None:
        width -= 1
    return width


def _render_rows(sheet: Worksheet, header_width: Optional[int]) -> Iterator[list[str]]:
    """Yield every non-empty row of ``sheet`` as rendered cell texts.

    With a ``header_width`` the first row is treated as the header and skipped,
    and every other row is cut or padded to that width. Without one, each row
    ends at its last non-empty cell.
    """
    rows = _non_empty_rows(sheet)
    if header_width is not None:
        next(rows, None)

    for row in rows:
        width = _used_width(row) if header_width is None else header_width
        values = [cell_to_text(value) for value in row[:width]]
        values.extend([""] * (width - len(values)))
        yield values


class WorkbookReader:
    """Friendly, fluent access to the rows of a workbook.

    The reader assumes the first row of a sheet is a header unless told
    otherwise. Empty rows are skipped, so gaps in a sheet never show up in
    the output.

    Example:
        reader = WorkbookReader("people.xlsx").turn_to_sheet("2013")
        for person in reader.to_maps():
            print(person["Name"])
    """

    def __init__(
        self,
        source: ReaderSource,
        has_header: bool = True,
        data_only: bool = False,
        *,
        file_format: Optional[WorkbookFormat] = None,
    ):
        """Open a workbook for reading.

        Args:
            source: A path to an XLS/XLSX file, a binary file-like object, or
                an openpyxl Workbook. A file-like object is owned by the
                reader and closed by ``close()``.
            has_header (bool): Whether the first row of each sheet is a header.
            data_only (bool): Read cached formula results instead of formulas.
            file_format (WorkbookFormat, optional): Format of a Workbook
                source, defaults to XLSX. Files report the format they were
                stored in.

        Raises:
            TypeError: If ``source`` is none of the supported types.
            FileNotFoundError: If the path does not exist.
            RuntimeError: If the file cannot be parsed.
        """
        self._stream: Optional[IO[bytes]] = None
        if isinstance(source, Workbook):
            self._workbook = source
            self._file_format = file_format or WorkbookFormat.XLSX
        elif isinstance(source, (str, os.PathLike)):
            self._workbook, self._file_format = load_workbook(source, data_only=data_only)
        elif hasattr(source, "read"):
            self._stream = source
            self._workbook, self._file_format = load_workbook(source, data_only=data_only)
        else:
            raise TypeError(f"Unsupported workbook source: {type(source).__name__}")

        self._sheet = first_sheet(self._workbook)
        self._has_header = has_header
        self._header: list[str] = []
        self._closed = False
        self._read_header()

    @classmethod
    def open(cls, source: ReaderSource, **kwargs: Any) -> "WorkbookReader":
        """Create a WorkbookReader; see ``__init__`` for the arguments."""
        return cls(source, **kwargs)

    def __enter__(self) -> "WorkbookReader":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(WORKBOOK_CLOSED)

    def _read_header(self) -> None:
        self._header = []
        if self._has_header:
            first = next(_non_empty_rows(self._sheet), None)
            if first is not None:
                self._header = [cell_to_text(value) for value in first[: _used_width(first)]]

    def _rows(self) -> Iterator[list[str]]:
        return _render_rows(self._sheet, len(self._header) if self._has_header else None)

    def with_header(self) -> "WorkbookReader":
        """Treat the first row of the current sheet as the header."""
        self._has_header = True
        self._read_header()
        return self

    def without_header(self) -> "WorkbookReader":
        """Treat every row of the current sheet as data."""
        self._has_header = False
        self._read_header()
        return self

    @property
    def workbook(self) -> Workbook:
        """The backing openpyxl Workbook."""
        return self._workbook

    @property
    def file_format(self) -> WorkbookFormat:
        return self._file_format

    @property
    def has_header(self) -> bool:
        return self._has_header

    @property
    def header(self) -> list[str]:
        """A copy of the header fields; empty when the sheet has no header."""
        self._check_open()
        return list(self._header)

    @property
    def current_sheet_name(self) -> str:
        return self._sheet.title

    @property
    def sheet_names(self) -> list[str]:
        self._check_open()
        return sheet_names(self._workbook)

    def turn_to_sheet(self, sheet: Union[int, str], has_header: Optional[bool] = None) -> "WorkbookReader":
        """Make another sheet the current one.

        Args:
            sheet (Union[int, str]): Zero-based index or name of the sheet.
                Names are listed by ``sheet_names``.
            has_header (Optional[bool]): Whether the sheet has a header row.
                Keeps the current setting when omitted.

        Returns:
            WorkbookReader: this reader.

        Raises:
            RuntimeError: If the reader has been closed.
            ValueError: If no sheet has the given name.
            IndexError: If the index is out of range.
        """
        self._check_open()
        self._sheet = find_sheet(self._workbook, sheet)
        if has_header is not None:
            self._has_header = has_header
        self._read_header()
        logger.debug(f"Turned to sheet | name={self._sheet.title} has_header={self._has_header}")
        return self

    def to_csv(self) -> Iterator[str]:
        """Iterate the data rows of the current sheet as CSV lines."""
        self._check_open()
        return (row_to_csv(row) for row in self._rows())

    def to_lists(self) -> Iterator[list[str]]:
        """Iterate the data rows of the current sheet as lists of strings."""
        self._check_open()
        return self._rows()

    def to_arrays(self) -> Iterator[tuple[str, ...]]:
        """Iterate the data rows of the current sheet as tuples of strings."""
        self._check_open()
        return (tuple(row) for row in self._rows())

    def to_maps(self) -> Iterator[dict[str, str]]:
        """Iterate the data rows of the current sheet as dicts.

        Keys are the header fields in column order. When two header fields
        share a name the right-most column wins.

        Raises:
            RuntimeError: If the reader has been closed or the sheet is read
                without a header.
        """
        self._check_open()
        if not self._has_header:
            raise RuntimeError(NO_HEADER)
        header = list(self._header)
        return (dict(zip(header, row)) for row in self._rows())

    def to_multimap(self) -> dict[str, list[list[str]]]:
        """Return the content of every sheet, header rows included.

        The current sheet and header setting are left untouched.

        Returns:
            dict[str, list[list[str]]]: Sheet name -> rows as lists of strings,
            in tab order. Sheets without rows are left out.
        """
        self._check_open()
        content = {}
        for sheet in self._workbook.worksheets:
            rows = list(_render_rows(sheet, None))
            if rows:
                content[sheet.title] = rows
        return content

    def to_writer(self) -> "WorkbookWriter":
        """Return a WorkbookWriter sharing this reader's workbook and format."""
        from .writer import WorkbookWriter

        return WorkbookWriter(self._workbook, file_format=self._file_format)

    def close(self) -> None:
        """Close the reader and the stream it was opened from, if any."""
        if self._stream is not None:
            self._stream.close()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, WorkbookReader):
            return NotImplemented
        return self.to_multimap() == other.to_multimap()

    def __repr__(self) -> str:
        if self._closed:
            return f"{type(self).__name__}(<closed>)"
        return f"{type(self).__name__}({self.to_multimap()!r})"
