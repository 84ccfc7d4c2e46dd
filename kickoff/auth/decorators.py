"""Decorators for the auth package."""

from functools import wraps

from flask import session

from kickoff.errors import ForbiddenError, UnauthorizedError


def login_required(f=None, admin_required=False):
    """Reject the request unless a user is logged in.

    Sessions are established by the surrounding platform; this only reads
    ``user_id`` and ``is_admin`` from the Flask session.

    Usage:
    @login_required
    def protected_view():
        ...

    @login_required(admin_required=True)
    def admin_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            if "user_id" not in session:
                raise UnauthorizedError()
            if admin_required and not session.get("is_admin"):
                raise ForbiddenError()
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
