import hmac
from flask import current_app
from werkzeug.security import check_password_hash


def verify_admin_password(raw_password: str) -> bool:
    """
    Check the shared admin password. ADMIN_PASSWORD_HASH (werkzeug format)
    wins over the plain ADMIN_PASSWORD when both are configured.
    """
    if not raw_password:
        return False

    password_hash = current_app.config.get("ADMIN_PASSWORD_HASH")
    if password_hash:
        return check_password_hash(password_hash, raw_password)

    expected = current_app.config.get("ADMIN_PASSWORD") or ""
    if not expected:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), raw_password.encode("utf-8"))
