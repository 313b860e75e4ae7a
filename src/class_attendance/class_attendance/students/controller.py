from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_endpoint, ok
from ..container import Container
from ..users.guards import current_caller, make_token_required


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.token_service)
    service = container.student_service

    @app.route("/students", methods=["GET"], endpoint="students_list")
    @json_endpoint
    @token_required
    def students_list():
        students = service.list_students(class_name=request.args.get("className"))
        return ok([s.to_dict() for s in students], count=len(students))

    @app.route("/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @json_endpoint
    @token_required
    def students_get(student_id: int):
        return ok(service.get_student(student_id).to_dict())

    @app.route("/students/create", methods=["POST"], endpoint="students_create")
    @json_endpoint
    @token_required
    def students_create():
        data = json_body()
        student = service.create_student(
            current_caller(),
            name=data.get("name"),
            roll_number=data.get("rollNumber"),
            class_name=data.get("class") or data.get("className"),
            course=data.get("course"),
            year=data.get("year"),
            branch=data.get("branch"),
        )
        return ok(student.to_dict(), message="Student added successfully", status=201)

    @app.route("/students/update/<int:student_id>", methods=["PUT"], endpoint="students_update")
    @json_endpoint
    @token_required
    def students_update(student_id: int):
        data = json_body()
        student = service.update_student(
            current_caller(),
            student_id,
            name=data.get("name"),
            roll_number=data.get("rollNumber"),
            class_name=data.get("class") or data.get("className"),
            course=data.get("course"),
            year=data.get("year"),
            branch=data.get("branch"),
        )
        return ok(student.to_dict(), message="Student updated successfully")

    @app.route("/students/delete/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @json_endpoint
    @token_required
    def students_delete(student_id: int):
        service.delete_student(current_caller(), student_id)
        return ok(message="Student deleted successfully")
