"""Sheet lookup shared by WorkbookReader and WorkbookWriter."""

from typing import Union

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

DEFAULT_SHEET_NAME = "Sheet0"

SHEET_NOT_FOUND = "Sheet name is not found"
SHEET_EXISTED = "Sheet name already exists"


def sheet_names(workbook: Workbook) -> list[str]:
    """Return the worksheet names of ``workbook`` in tab order."""
    return [sheet.title for sheet in workbook.worksheets]


def first_sheet(workbook: Workbook) -> Worksheet:
    """Return the first worksheet, creating an empty one if there is none."""
    if not workbook.worksheets:
        workbook.create_sheet(DEFAULT_SHEET_NAME)
    return workbook.worksheets[0]


def find_sheet(workbook: Workbook, key: Union[int, str]) -> Worksheet:
    """Look up a worksheet by position or by name.

    Args:
        workbook (Workbook): Workbook to search.
        key (Union[int, str]): Zero-based sheet index, or a sheet name.

    Returns:
        Worksheet: The matching worksheet.

    Raises:
        ValueError: If no sheet has the given name.
        IndexError: If the index is outside ``0 <= index < sheet count``.
    """
    worksheets = workbook.worksheets
    if isinstance(key, str):
        names = sheet_names(workbook)
        if key not in names:
            raise ValueError(SHEET_NOT_FOUND)
        return worksheets[names.index(key)]

    if not 0 <= key < len(worksheets):
        raise IndexError(f"Sheet index out of range: {key}")
    return worksheets[key]


def check_new_sheet_name(workbook: Workbook, name: str) -> None:
    """Raise ValueError if ``name`` is already taken by a sheet of ``workbook``."""
    if name in workbook.sheetnames:
        raise ValueError(SHEET_EXISTED)
