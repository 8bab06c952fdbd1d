"""Workbook format detection and XLS conversion.

openpyxl is the in-memory model for every workbook this package touches. Legacy
XLS files are read with xlrd and written with xlwt, converting cell by cell
between the two libraries.
"""

import datetime
import decimal
import io
import logging
import os
from enum import Enum
from typing import Any, BinaryIO, Union

import openpyxl
import xlrd
import xlwt
from openpyxl import Workbook

from .sheets import first_sheet

logger = logging.getLogger(__name__)

XLSX_SIGNATURE = b"PK\x03\x04"
XLS_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

XLS_DATETIME_FORMAT = "YYYY-MM-DD HH:MM:SS"
XLS_DATE_FORMAT = "YYYY-MM-DD"
XLS_TIME_FORMAT = "HH:MM:SS"

Source = Union[str, "os.PathLike[str]", BinaryIO]


class WorkbookFormat(Enum):
    """File formats a workbook can be read from or saved as."""

    XLS = "xls"
    XLSX = "xlsx"


def detect_format(data: bytes) -> WorkbookFormat:
    """Detect the workbook format from the leading bytes of a file.

    Args:
        data (bytes): File content, or at least its first eight bytes.

    Returns:
        WorkbookFormat: XLSX for ZIP containers, XLS for OLE2 compound files.

    Raises:
        ValueError: If the content matches neither signature.
    """
    if data.startswith(XLSX_SIGNATURE):
        return WorkbookFormat.XLSX
    if data.startswith(XLS_SIGNATURE):
        return WorkbookFormat.XLS
    raise ValueError("Unsupported workbook format")


def _read_source(source: Source) -> bytes:
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return f.read()
    return source.read()


def load_workbook(source: Source, data_only: bool = False) -> tuple[Workbook, WorkbookFormat]:
    """Load a workbook of either format into an openpyxl Workbook.

    Args:
        source: Path to a workbook file, or a binary file-like object
            positioned at the start of the workbook.
        data_only (bool): Passed to openpyxl; when True formula cells hold
            their cached results instead of the formula text. XLS files always
            yield values.

    Returns:
        tuple[Workbook, WorkbookFormat]: The loaded workbook and the format it
        was stored in.

    Raises:
        FileNotFoundError: If a path does not exist.
        ValueError: If the content is neither XLS nor XLSX.
        RuntimeError: If the underlying library fails to parse the file.
    """
    data = _read_source(source)
    file_format = detect_format(data)

    try:
        if file_format is WorkbookFormat.XLS:
            workbook = read_xls(data)
        else:
            workbook = openpyxl.load_workbook(io.BytesIO(data), data_only=data_only)
    except Exception as e:
        logger.error(f"Failed to load workbook | source={source!r} error={e}")
        raise RuntimeError(f"Failed to load workbook | source={source!r}") from e

    logger.debug(f"Loaded workbook | format={file_format.value} sheets={workbook.sheetnames}")
    return workbook, file_format


def _xls_cell_value(cell: xlrd.sheet.Cell, datemode: int) -> Any:
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    if ctype == xlrd.XL_CELL_DATE:
        try:
            parts = xlrd.xldate_as_tuple(cell.value, datemode)
        except xlrd.xldate.XLDateError:
            # Serials with no calendar date (negative, or before 1900-03-01) stay numeric
            return cell.value
        if parts[:3] == (0, 0, 0):
            return datetime.time(*parts[3:])
        return datetime.datetime(*parts)
    return cell.value


def read_xls(data: bytes) -> Workbook:
    """Convert an XLS file into an openpyxl Workbook.

    Every sheet is copied in order; empty and blank cells are left out so the
    resulting sheets only contain cells that hold a value.
    """
    book = xlrd.open_workbook(file_contents=data)
    workbook = Workbook()
    workbook.remove(workbook.active)

    for xls_sheet in book.sheets():
        sheet = workbook.create_sheet(xls_sheet.name)
        for row_idx in range(xls_sheet.nrows):
            for col_idx in range(xls_sheet.ncols):
                value = _xls_cell_value(xls_sheet.cell(row_idx, col_idx), book.datemode)
                if value is not None:
                    sheet.cell(row=row_idx + 1, column=col_idx + 1, value=value)

    first_sheet(workbook)
    return workbook


def _xls_style_for(value: Any) -> xlwt.XFStyle:
    if isinstance(value, datetime.datetime):
        return xlwt.easyxf(num_format_str=XLS_DATETIME_FORMAT)
    if isinstance(value, datetime.date):
        return xlwt.easyxf(num_format_str=XLS_DATE_FORMAT)
    return xlwt.easyxf(num_format_str=XLS_TIME_FORMAT)


def write_xls(workbook: Workbook, path: Union[str, "os.PathLike[str]"]) -> None:
    """Write an openpyxl Workbook to ``path`` in XLS format.

    Args:
        workbook (Workbook): Workbook to write. Rich text and formula text are
            stored as plain strings, hyperlinks as their display text.
        path: Output file path.
    """
    book = xlwt.Workbook(encoding="utf-8")
    # xlwt needs one XFStyle object per number format, reused across cells
    styles: dict[type, xlwt.XFStyle] = {}

    for sheet in workbook.worksheets:
        xls_sheet = book.add_sheet(sheet.title, cell_overwrite_ok=True)
        for row in sheet.iter_rows():
            for cell in row:
                value = cell.value
                if value is None:
                    continue

                row_idx = cell.row - 1
                col_idx = cell.column - 1
                if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
                    style = styles.get(type(value))
                    if style is None:
                        style = styles[type(value)] = _xls_style_for(value)
                    xls_sheet.write(row_idx, col_idx, value, style)
                elif isinstance(value, (bool, int, float, decimal.Decimal, str)):
                    xls_sheet.write(row_idx, col_idx, value)
                else:
                    xls_sheet.write(row_idx, col_idx, str(value))

    book.save(os.fspath(path))
