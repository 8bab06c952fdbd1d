"""Cell value rendering shared by the reader's output shapes."""

import csv
import datetime
import io
from collections.abc import Iterable
from typing import Any

CSV_TERMINATOR = "\r\n"


def cell_to_text(value: Any) -> str:
    """Render a cell value the way a spreadsheet shows it as text.

    Args:
        value (Any): A cell value as returned by openpyxl.

    Returns:
        str: ``""`` for empty cells, ``"TRUE"``/``"FALSE"`` for booleans,
             integral floats without a fractional part (``1.0`` -> ``"1"``),
             dates in ISO form (a datetime at midnight renders as its date),
             and ``str(value)`` for everything else, rich text included.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime):
        if value.time() == datetime.time(0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def row_to_csv(values: Iterable[str]) -> str:
    """Join already rendered cell texts into a single CSV line.

    Fields holding a comma, quote or line break are quoted with embedded
    quotes doubled. The line carries no terminator.
    """
    fields = list(values)
    # csv quotes a lone empty field to tell it apart from an empty line
    if fields == [""]:
        return ""

    # csv only quotes line breaks that appear in the terminator
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator=CSV_TERMINATOR).writerow(fields)
    return buffer.getvalue()[: -len(CSV_TERMINATOR)]
