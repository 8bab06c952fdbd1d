"""Pytest fixtures building sample workbooks on disk."""

from pathlib import Path

import pytest
import xlwt
from openpyxl import Workbook

PEOPLE_HEADER = [
    "Date",
    "GUID",
    "MRN",
    "ID",
    "Last name",
    "First name",
    "Birth month",
    "Birth day",
    "Birth year",
    "Phone",
    "Gender",
    "Doctor",
    "Hospital",
]

PEOPLE_ROWS = [
    ["2013/03/28", "BIS-KJ415MTP", "A123456", "A286640890", "Huang", "Yi", 10, 19, 1979, "TEL0910,123,456", None, "Lee", "VGH"],
] + [
    ["2013/03/29", f"BIS-{i:08d}", f"A{i:06d}", f"B{i:09d}", "Wang", "Ming", 1, i + 1, 1980 + i, "TEL02", "M", "Chen", "NTUH"]
    for i in range(8)
]


def create_people_excel(file_path: str) -> None:
    """Create a test XLSX file with one header row and nine data rows."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "People"
    sheet.append(PEOPLE_HEADER)
    for row in PEOPLE_ROWS:
        sheet.append(row)
    workbook.save(file_path)


def create_people_xls(file_path: str) -> None:
    """Create the same people sheet as a legacy XLS file."""
    workbook = xlwt.Workbook(encoding="utf-8")
    sheet = workbook.add_sheet("People")
    for row_idx, row in enumerate([PEOPLE_HEADER] + PEOPLE_ROWS):
        for col_idx, value in enumerate(row):
            if value is not None:
                sheet.write(row_idx, col_idx, value)
    workbook.save(file_path)


def create_jump_lines_excel(file_path: str) -> None:
    """Create an XLSX sheet whose rows are separated by empty rows.

    Row 1: a . c . e . g
    Row 3: 1 . 3 . 5 . 7
    Row 5: . 2 . 4 . 6 . 8
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Sheet1"
    for col, value in zip((1, 3, 5, 7), ("a", "c", "e", "g")):
        sheet.cell(row=1, column=col, value=value)
    for col, value in zip((1, 3, 5, 7), (1, 3, 5, 7)):
        sheet.cell(row=3, column=col, value=value)
    for col, value in zip((2, 4, 6, 8), (2, 4, 6, 8)):
        sheet.cell(row=5, column=col, value=value)
    workbook.save(file_path)


@pytest.fixture
def people_header():
    return list(PEOPLE_HEADER)


@pytest.fixture
def people_first_line():
    return ["2013/03/28", "BIS-KJ415MTP", "A123456", "A286640890", "Huang", "Yi", "10", "19", "1979", "TEL0910,123,456", "", "Lee", "VGH"]


@pytest.fixture
def people_excel_file(tmp_path: Path) -> str:
    path = tmp_path / "people.xlsx"
    create_people_excel(str(path))
    return str(path)


@pytest.fixture
def people_xls_file(tmp_path: Path) -> str:
    path = tmp_path / "people.xls"
    create_people_xls(str(path))
    return str(path)


@pytest.fixture
def jump_lines_file(tmp_path: Path) -> str:
    path = tmp_path / "jump_lines.xlsx"
    create_jump_lines_excel(str(path))
    return str(path)
