from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.exceptions import AuthenticationError
from ..common.http import fail
from .model import CallerIdentity
from .tokens import TokenService

TOKEN_COOKIE = "token"


def bearer_token() -> str | None:
    """Token from the Authorization header, falling back to the login cookie."""

    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(TOKEN_COOKIE) or None


def make_token_required(tokens: TokenService):
    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.caller = tokens.decode(bearer_token())
            except AuthenticationError as e:
                return fail(str(e), e.http_status)
            return view(*args, **kwargs)

        return wrapper

    return token_required


def current_caller() -> CallerIdentity:
    return g.caller
