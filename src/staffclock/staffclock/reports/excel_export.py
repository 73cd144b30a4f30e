from __future__ import annotations

import io
from datetime import date

import pandas as pd
from openpyxl.utils import get_column_letter

from .service import TimesheetReport

SHEET_NAME = "Attendance"

COLUMNS = [
    ("Date", "date", 12),
    ("Staff", "staff", 20),
    ("Email", "email", 30),
    ("In", "time_in", 10),
    ("Out", "time_out", 10),
    ("Location In", "location_in", 25),
    ("Location Out", "location_out", 25),
]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def timesheet_filename(start: date, end: date) -> str:
    """``attendance_January_2024.xlsx``, or a from/to name when the range spans months."""
    if (start.year, start.month) == (end.year, end.month):
        return f"attendance_{start.strftime('%B')}_{start.year}.xlsx"
    return f"attendance_{start.strftime('%b')}_{start.year}_to_{end.strftime('%b')}_{end.year}.xlsx"


def build_timesheet_xlsx(report: TimesheetReport) -> bytes:
    data = [{header: getattr(row, attr) for header, attr, _ in COLUMNS} for row in report.rows]
    df = pd.DataFrame(data, columns=[header for header, _, _ in COLUMNS])

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        ws = writer.sheets[SHEET_NAME]
        for idx, (_, _, width) in enumerate(COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width
    return out.getvalue()
