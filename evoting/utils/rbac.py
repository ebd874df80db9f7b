from functools import wraps
from flask import abort
from flask_jwt_extended import get_jwt, verify_jwt_in_request

ADMIN_ROLE = "ADMIN"


def admin_required(fn):
    """
    Require a valid admin access token (issued by the shared-password login).
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if get_jwt().get("role") != ADMIN_ROLE:
            abort(403, description="Insufficient permissions")
        return fn(*args, **kwargs)
    return wrapper
