from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.http import json_body, json_endpoint, ok
from ..container import Container
from ..users.guards import current_caller, make_token_required


def _period_fields(data: dict) -> dict:
    return {
        "day": data.get("day"),
        "period_number": data.get("periodNumber"),
        "subject": data.get("subject"),
        "class_name": data.get("className"),
        "teacher_id": data.get("teacherId"),
        "start_time": data.get("startTime"),
        "end_time": data.get("endTime"),
        "color": data.get("color"),
    }


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.token_service)
    service = container.timetable_service

    @app.route("/timetable", methods=["GET"], endpoint="timetable_list")
    @json_endpoint
    @token_required
    def timetable_list():
        return ok([p.to_dict() for p in service.list_all()])

    @app.route("/timetable/my-schedule", methods=["GET"], endpoint="timetable_my_schedule")
    @json_endpoint
    @token_required
    def timetable_my_schedule():
        return ok([p.to_dict() for p in service.my_schedule(current_caller().user_id)])

    @app.route("/timetable/current-period", methods=["GET"], endpoint="timetable_current_period")
    @json_endpoint
    @token_required
    def timetable_current_period():
        period = service.current_period(current_caller().user_id, now_local())
        if not period:
            return ok(None, message="No class scheduled right now")
        return ok(period.to_dict())

    @app.route("/timetable/create", methods=["POST"], endpoint="timetable_create")
    @json_endpoint
    @token_required
    def timetable_create():
        period = service.create_period(current_caller(), **_period_fields(json_body()))
        return ok(period.to_dict(), message="Period added successfully", status=201)

    @app.route("/timetable/update/<int:period_id>", methods=["PUT"], endpoint="timetable_update")
    @json_endpoint
    @token_required
    def timetable_update(period_id: int):
        data = json_body()
        fields = _period_fields(data)
        if "teacherId" not in data:
            del fields["teacher_id"]
        period = service.update_period(current_caller(), period_id, **fields)
        return ok(period.to_dict(), message="Period updated successfully")

    @app.route("/timetable/delete/<int:period_id>", methods=["DELETE"], endpoint="timetable_delete")
    @json_endpoint
    @token_required
    def timetable_delete(period_id: int):
        service.delete_period(current_caller(), period_id)
        return ok(message="Period deleted successfully")
