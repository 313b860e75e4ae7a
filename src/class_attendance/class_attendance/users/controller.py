from __future__ import annotations

from flask import Flask

from ..common.http import json_body, json_endpoint, ok
from ..container import Container
from .guards import TOKEN_COOKIE, current_caller, make_token_required


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.token_service)
    tokens = container.token_service

    def _session_response(session_user, *, message: str, status: int = 200):
        token = tokens.issue(user_id=session_user.user_id, role=session_user.role, name=session_user.name)
        response, code = ok({"token": token, "user": session_user.to_dict()}, message=message, status=status)
        response.set_cookie(
            TOKEN_COOKIE,
            token,
            httponly=True,
            samesite="Lax",
            secure=bool(app.config.get("SESSION_COOKIE_SECURE", False)),
            max_age=tokens.expiry_seconds,
        )
        return response, code

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    @json_endpoint
    def auth_login():
        data = json_body()
        session_user = container.auth_service.authenticate(data.get("email") or "", data.get("password") or "")
        return _session_response(session_user, message="Login successful")

    @app.route("/auth/register", methods=["POST"], endpoint="auth_register")
    @json_endpoint
    def auth_register():
        data = json_body()
        session_user = container.auth_service.register(
            staff_id=data.get("staffId"),
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password") or "",
        )
        return _session_response(session_user, message="Registration successful", status=201)

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    @json_endpoint
    def auth_logout():
        response, code = ok(message="Logged out")
        response.delete_cookie(TOKEN_COOKIE)
        return response, code

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @json_endpoint
    @token_required
    def auth_me():
        caller = current_caller()
        return ok({"id": caller.user_id, "name": caller.name, "role": caller.role})

    # ---- admin: staff accounts ----

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users_list")
    @json_endpoint
    @token_required
    def admin_users_list():
        users = container.user_service.list_users(current_caller())
        return ok([u.to_dict() for u in users], count=len(users))

    @app.route("/api/admin/users/<int:user_id>", methods=["GET"], endpoint="admin_users_get")
    @json_endpoint
    @token_required
    def admin_users_get(user_id: int):
        return ok(container.user_service.get_user(current_caller(), user_id).to_dict())

    @app.route("/api/admin/users/create", methods=["POST"], endpoint="admin_users_create")
    @json_endpoint
    @token_required
    def admin_users_create():
        data = json_body()
        user = container.user_service.create_user(
            current_caller(),
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password") or "",
            role=data.get("role"),
            staff_id=data.get("staffId"),
        )
        return ok(user.to_dict(), message="User created successfully", status=201)

    @app.route("/api/admin/users/update/<int:user_id>", methods=["PUT"], endpoint="admin_users_update")
    @json_endpoint
    @token_required
    def admin_users_update(user_id: int):
        data = json_body()
        user = container.user_service.update_user(
            current_caller(),
            user_id,
            name=data.get("name"),
            email=data.get("email"),
            role=data.get("role"),
            staff_id=data.get("staffId"),
            password=data.get("password"),
        )
        return ok(user.to_dict(), message="User updated successfully")

    @app.route("/api/admin/users/delete/<int:user_id>", methods=["DELETE"], endpoint="admin_users_delete")
    @json_endpoint
    @token_required
    def admin_users_delete(user_id: int):
        container.user_service.delete_user(current_caller(), user_id)
        return ok(message="User deleted successfully")

    @app.route("/api/admin/stats/users", methods=["GET"], endpoint="admin_users_stats")
    @json_endpoint
    @token_required
    def admin_users_stats():
        return ok(container.user_service.stats(current_caller()))
