"""Workbook writing.

WorkbookWriter appends rows of plain Python values to the sheets of an openpyxl
Workbook and saves it as XLSX (openpyxl) or XLS (xlwt).
"""

import datetime
import decimal
import logging
import numbers
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Optional, Union

from openpyxl import Workbook
from openpyxl.cell.rich_text import CellRichText
from openpyxl.worksheet.hyperlink import Hyperlink

from .formats import WorkbookFormat, write_xls
from .reader import WorkbookReader
from .sheets import DEFAULT_SHEET_NAME, check_new_sheet_name, find_sheet, first_sheet, sheet_names

logger = logging.getLogger(__name__)

NATIVE_TYPES = (bool, int, float, decimal.Decimal, datetime.date, datetime.time)


def _detached(link: Hyperlink) -> Hyperlink:
    # openpyxl rebinds a hyperlink's ref to the cell it is set on
    return Hyperlink(
        ref="",
        target=link.target,
        location=link.location,
        tooltip=link.tooltip,
        display=link.display,
    )


class WorkbookWriter:
    """Friendly, fluent building of workbooks row by row.

    Example:
        WorkbookWriter.open_xlsx().set_sheet_name("People").add_row("Name", "Age").add_row(
            "Ann", 30
        ).save("people.xlsx")
    """

    def __init__(self, workbook: Optional[Workbook] = None, file_format: Optional[WorkbookFormat] = None):
        """Create a writer.

        Args:
            workbook (Optional[Workbook]): An existing openpyxl Workbook to
                write into. A new workbook with a single ``Sheet0`` is created
                when omitted.
            file_format (Optional[WorkbookFormat]): Format used by ``save``.
                Defaults to XLS for new workbooks and XLSX for existing ones.

        Raises:
            TypeError: If ``workbook`` is not an openpyxl Workbook.
        """
        if workbook is None:
            workbook = Workbook()
            workbook.active.title = DEFAULT_SHEET_NAME
            file_format = file_format or WorkbookFormat.XLS
        elif not isinstance(workbook, Workbook):
            raise TypeError(f"Expected an openpyxl Workbook, got {type(workbook).__name__}")

        self._workbook = workbook
        self._file_format = file_format or WorkbookFormat.XLSX
        self._sheet = first_sheet(workbook)

    @classmethod
    def open_xls(cls) -> "WorkbookWriter":
        """Return a writer for a new workbook saved in XLS format."""
        return cls(file_format=WorkbookFormat.XLS)

    @classmethod
    def open_xlsx(cls) -> "WorkbookWriter":
        """Return a writer for a new workbook saved in XLSX format."""
        return cls(file_format=WorkbookFormat.XLSX)

    @classmethod
    def open(cls, workbook: Workbook, file_format: WorkbookFormat = WorkbookFormat.XLSX) -> "WorkbookWriter":
        """Return a writer over an existing openpyxl Workbook."""
        if workbook is None:
            raise TypeError("Expected an openpyxl Workbook, got NoneType")
        return cls(workbook, file_format=file_format)

    @property
    def workbook(self) -> Workbook:
        """The backing openpyxl Workbook."""
        return self._workbook

    @property
    def file_format(self) -> WorkbookFormat:
        return self._file_format

    @property
    def current_sheet_name(self) -> str:
        return self._sheet.title

    @property
    def sheet_names(self) -> list[str]:
        return sheet_names(self._workbook)

    def set_sheet_name(self, name: str) -> "WorkbookWriter":
        """Rename the current sheet.

        Raises:
            ValueError: If another sheet already uses ``name``.
        """
        if name != self._sheet.title:
            check_new_sheet_name(self._workbook, name)
        self._sheet.title = name
        return self

    def create_sheet(self, name: str) -> "WorkbookWriter":
        """Append a new sheet; the current sheet does not change.

        Raises:
            ValueError: If a sheet named ``name`` already exists.
        """
        check_new_sheet_name(self._workbook, name)
        self._workbook.create_sheet(name)
        return self

    def turn_to_sheet(self, sheet: Union[int, str]) -> "WorkbookWriter":
        """Make the sheet at a zero-based index, or with a name, current.

        Raises:
            ValueError: If no sheet has the given name.
            IndexError: If the index is out of range.
        """
        self._sheet = find_sheet(self._workbook, sheet)
        return self

    def create_and_turn_to_sheet(self, name: str) -> "WorkbookWriter":
        """Append a new sheet and make it current.

        Raises:
            ValueError: If a sheet named ``name`` already exists.
        """
        check_new_sheet_name(self._workbook, name)
        self._sheet = self._workbook.create_sheet(name)
        return self

    def _cell_value(self, field: Any) -> Any:
        if field is None or isinstance(field, NATIVE_TYPES):
            return field
        if isinstance(field, CellRichText):
            return field if self._file_format is WorkbookFormat.XLSX else str(field)
        if isinstance(field, numbers.Real):
            return float(field)
        return str(field)

    def add_row(self, *fields: Any) -> "WorkbookWriter":
        """Append a row holding ``fields`` to the current sheet."""
        return self.add_row_from(fields)

    def add_row_from(self, fields: Iterable[Any]) -> "WorkbookWriter":
        """Append a row to the current sheet.

        The row goes below the last row of the sheet, or first when the sheet
        is empty.

        Args:
            fields (Iterable[Any]): Cell values from the first column on.
                ``None`` leaves a cell empty; booleans, numbers, dates and
                times are stored as such; ``CellRichText`` is kept as rich
                text in XLSX workbooks and flattened to text in XLS ones; an
                openpyxl ``Hyperlink`` becomes the cell's hyperlink; anything
                else is stored as ``str(field)``.

        Returns:
            WorkbookWriter: this writer.
        """
        values = []
        links = {}
        for column, field in enumerate(fields, start=1):
            if isinstance(field, Hyperlink):
                links[column] = field
                values.append(None)
            else:
                values.append(self._cell_value(field))

        self._sheet.append(values)
        row = self._sheet.max_row
        for column, link in links.items():
            self._sheet.cell(row=row, column=column).hyperlink = _detached(link)
        return self

    def save(self, path: Union[str, "os.PathLike[str]"]) -> Path:
        """Save the workbook to ``path`` in this writer's format.

        Args:
            path: Output file path. The extension is not checked.

        Returns:
            Path: The saved file.

        Raises:
            RuntimeError: If the underlying library fails to write the file.
        """
        try:
            if self._file_format is WorkbookFormat.XLS:
                write_xls(self._workbook, path)
            else:
                self._workbook.save(os.fspath(path))
        except Exception as e:
            logger.error(f"Failed to save workbook | path={path} error={e}")
            raise RuntimeError(f"Failed to save workbook | path={path}") from e

        logger.debug(f"Saved workbook | path={path} format={self._file_format.value}")
        return Path(path)

    def to_reader(self) -> WorkbookReader:
        """Return a WorkbookReader over this writer's workbook and format."""
        return WorkbookReader(self._workbook, file_format=self._file_format)

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, WorkbookWriter):
            return NotImplemented
        return self.to_reader() == other.to_reader()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_reader().to_multimap()!r})"
