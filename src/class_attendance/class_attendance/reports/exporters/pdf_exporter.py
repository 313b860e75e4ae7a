from __future__ import annotations

import io
from datetime import datetime
from typing import Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ...core.enums import AttendanceStatus

_COLUMN_X_MM = (15, 45, 80, 140, 170)
_ROW_HEIGHT = 7 * mm
_BOTTOM_MARGIN = 20 * mm


def _draw_header(c: canvas.Canvas, columns: Sequence[str], y: float) -> float:
    c.setFont("Helvetica-Bold", 10)
    for x, name in zip(_COLUMN_X_MM, columns):
        c.drawString(x * mm, y, str(name))
    c.line(15 * mm, y - 2 * mm, 195 * mm, y - 2 * mm)
    c.setFont("Helvetica", 10)
    return y - _ROW_HEIGHT


def rows_to_pdf(
    rows: Sequence[dict],
    *,
    columns: Sequence[str],
    title: str,
    subtitle: str = "",
    generated_at: datetime | None = None,
) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    W, H = A4

    c.setFont("Helvetica-Bold", 16)
    c.drawString(15 * mm, H - 20 * mm, title)
    c.setFont("Helvetica", 10)
    if subtitle:
        c.drawString(15 * mm, H - 27 * mm, f"Period: {subtitle}")

    y = _draw_header(c, columns, H - 38 * mm)
    for row in rows:
        if y < _BOTTOM_MARGIN:
            c.showPage()
            y = _draw_header(c, columns, H - 20 * mm)

        for x, name in zip(_COLUMN_X_MM, columns):
            value = str(row.get(name, ""))
            if name == "Status":
                c.setFillColor(colors.green if value == AttendanceStatus.PRESENT.value else colors.red)
            c.drawString(x * mm, y, value[:32])
            c.setFillColor(colors.black)
        y -= _ROW_HEIGHT

    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M")
    c.setFont("Helvetica-Oblique", 8)
    c.drawString(15 * mm, 10 * mm, f"Generated on {stamp} - {len(rows)} records")
    c.showPage()
    c.save()

    buf.seek(0)
    return buf.getvalue()
