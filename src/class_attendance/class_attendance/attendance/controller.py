from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok
from ..core.enums import MarkAction
from ..container import Container
from ..users.guards import current_caller, make_token_required
from .service import entries_to_dicts


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.token_service)
    service = container.attendance_service

    def class_filter():
        return request.args.get("className")

    @app.route("/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @json_endpoint
    @token_required
    def attendance_mark():
        data = json_body()
        result = service.mark_attendance(
            current_caller(),
            data.get("studentId"),
            data.get("status"),
            data.get("date"),
        )
        message = "Attendance marked successfully" if result.action == MarkAction.CREATED else "Attendance updated successfully"
        return ok(result.record.to_dict(), message=message, action=result.action.value)

    @app.route("/attendance/mark-bulk", methods=["POST"], endpoint="attendance_mark_bulk")
    @json_endpoint
    @token_required
    def attendance_mark_bulk():
        data = json_body()
        result = service.mark_bulk(current_caller(), data.get("students"), data.get("date"))
        message = f"Marked {len(result.succeeded)} students, {len(result.failed)} failed"
        return ok(result.to_dict(), message=message)

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @json_endpoint
    @token_required
    def attendance_today():
        return ok(entries_to_dicts(service.today(class_name=class_filter())))

    @app.route("/attendance/date/<date_s>", methods=["GET"], endpoint="attendance_by_date")
    @json_endpoint
    @token_required
    def attendance_by_date(date_s: str):
        return ok(entries_to_dicts(service.records_for_date(date_s, class_name=class_filter())))

    @app.route("/attendance/range", methods=["GET"], endpoint="attendance_range")
    @json_endpoint
    @token_required
    def attendance_range():
        entries = service.records_in_range(
            request.args.get("start"),
            request.args.get("end"),
            class_name=class_filter(),
        )
        return ok(entries_to_dicts(entries))

    @app.route("/attendance/student/<int:student_id>", methods=["GET"], endpoint="attendance_student")
    @json_endpoint
    @token_required
    def attendance_student(student_id: int):
        return ok(service.student_history(student_id))

    @app.route("/attendance/missing/<date_s>", methods=["GET"], endpoint="attendance_missing")
    @json_endpoint
    @token_required
    def attendance_missing(date_s: str):
        students = service.missing_for_date(date_s, class_name=class_filter())
        return ok([s.to_dict() for s in students], count=len(students))

    @app.route("/attendance/stats/overview", methods=["GET"], endpoint="attendance_stats_overview")
    @json_endpoint
    @token_required
    def attendance_stats_overview():
        return ok(service.stats_overview(request.args.get("date")))

    @app.route("/attendance/stats/by-class", methods=["GET"], endpoint="attendance_stats_by_class")
    @json_endpoint
    @token_required
    def attendance_stats_by_class():
        return ok(service.stats_by_class(request.args.get("start"), request.args.get("end")))

    @app.route("/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @json_endpoint
    @token_required
    def attendance_delete(attendance_id: int):
        service.delete_record(current_caller(), attendance_id)
        return ok(message="Attendance record deleted")

    @app.route("/attendance/date/<date_s>", methods=["DELETE"], endpoint="attendance_delete_date")
    @json_endpoint
    @token_required
    def attendance_delete_date(date_s: str):
        deleted = service.delete_for_date(current_caller(), date_s)
        return ok({"deleted": deleted}, message=f"Deleted {deleted} attendance records")
