from __future__ import annotations

import io
from typing import Sequence

import pandas as pd
from openpyxl.styles import Font, PatternFill

from ...core.enums import AttendanceStatus

SHEET_NAME = "Attendance"

_FILLS = {
    AttendanceStatus.PRESENT.value: PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"),
    AttendanceStatus.ABSENT.value: PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"),
}


def rows_to_excel(rows: Sequence[dict], *, columns: Sequence[str], title: str, subtitle: str = "") -> bytes:
    """Workbook bytes: title row, optional subtitle, then the table from row 4."""

    df = pd.DataFrame(list(rows), columns=list(columns))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME, startrow=3)
        ws = writer.sheets[SHEET_NAME]

        ws["A1"] = title
        ws["A1"].font = Font(bold=True, size=14)
        if subtitle:
            ws["A2"] = subtitle

        if "Status" in df.columns:
            status_col = list(df.columns).index("Status") + 1
            # header is on row 4, data starts on row 5
            for offset, status in enumerate(df["Status"], start=5):
                fill = _FILLS.get(status)
                if fill is not None:
                    ws.cell(row=offset, column=status_col).fill = fill

        for idx, name in enumerate(df.columns, start=1):
            longest = max([len(str(name))] + [len(str(v)) for v in df[name]])
            ws.column_dimensions[ws.cell(row=4, column=idx).column_letter].width = min(longest + 2, 40)

    output.seek(0)
    return output.getvalue()
