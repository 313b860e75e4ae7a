from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.http import json_endpoint, ok
from ..container import Container
from ..core.exceptions import NotFoundError
from ..users.guards import current_caller, make_token_required
from .exporters.csv_exporter import rows_to_csv
from .exporters.excel_exporter import rows_to_excel
from .exporters.pdf_exporter import rows_to_pdf
from .service import EXPORT_COLUMNS, ReportFilter

_EXPORTS = {
    "csv": ("text/csv", "csv"),
    "excel": ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "xlsx"),
    "pdf": ("application/pdf", "pdf"),
}


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.token_service)
    service = container.report_service

    def _filter(start_key: str = "startDate", end_key: str = "endDate") -> ReportFilter:
        return ReportFilter(
            start=parse_optional_date(request.args.get(start_key)),
            end=parse_optional_date(request.args.get(end_key)),
            class_name=request.args.get("className") or None,
        )

    @app.route("/reports/attendance", methods=["GET"], endpoint="reports_attendance")
    @json_endpoint
    @token_required
    def reports_attendance():
        flt = _filter()
        report = service.build_attendance_report(flt)
        return ok(report, period=flt.describe())

    @app.route("/reports/export/<fmt>", methods=["GET"], endpoint="reports_export")
    @json_endpoint
    @token_required
    def reports_export(fmt: str):
        if fmt not in _EXPORTS:
            raise NotFoundError(f"Unknown export format {fmt!r}")

        flt = _filter()
        rows = service.export_rows(flt)
        title = container.report_title

        if fmt == "csv":
            payload = rows_to_csv(rows, columns=EXPORT_COLUMNS)
        elif fmt == "excel":
            payload = rows_to_excel(rows, columns=EXPORT_COLUMNS, title=title, subtitle=flt.describe())
        else:
            payload = rows_to_pdf(rows, columns=EXPORT_COLUMNS, title=title, subtitle=flt.describe())

        mimetype, ext = _EXPORTS[fmt]
        filename = f"attendance_report_{now_local().strftime('%Y%m%d')}.{ext}"
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/reports/low-attendance", methods=["GET"], endpoint="reports_low_attendance")
    @json_endpoint
    @token_required
    def reports_low_attendance():
        rows = service.low_attendance(request.args.get("threshold"))
        return ok(rows, count=len(rows))

    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @json_endpoint
    @token_required
    def api_dashboard():
        return ok(service.dashboard(current_caller(), now_local().date()))
