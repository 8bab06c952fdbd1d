"""Workbook Accessor Package.

Friendly, fluent reading and writing of XLS/XLSX workbooks on top of openpyxl,
xlrd and xlwt.
"""

from .cells import cell_to_text, row_to_csv
from .formats import WorkbookFormat, detect_format, load_workbook
from .reader import WorkbookReader
from .writer import WorkbookWriter

__version__ = "0.1.0"
__all__ = [
    "WorkbookReader",
    "WorkbookWriter",
    "WorkbookFormat",
    "detect_format",
    "load_workbook",
    "cell_to_text",
    "row_to_csv",
]
