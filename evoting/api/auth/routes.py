from flask import Blueprint, current_app
from flasgger import swag_from
from flask_jwt_extended import create_access_token, get_jwt
from sqlalchemy.exc import SQLAlchemyError

from ...extensions import db
from ...models.revoked_token import RevokedToken
from ...schemas.auth import AdminLoginSchema
from ...utils.rbac import ADMIN_ROLE, admin_required
from ...utils.security import verify_admin_password
from ...utils.validation import load_or_abort

auth_bp = Blueprint("auth", __name__)

admin_login_schema = AdminLoginSchema()


@auth_bp.post("/login")
@swag_from({
    "tags": ["Auth"],
    "summary": "Admin login with the shared password",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"password": {"type": "string", "example": "change-me"}},
            "required": ["password"],
        },
    }],
    "responses": {
        200: {"description": "Login successful, access token returned"},
        400: {"description": "Validation error"},
        401: {"description": "Invalid password"},
    },
})
def login():
    payload = load_or_abort(admin_login_schema)

    if not verify_admin_password(payload["password"]):
        current_app.logger.warning("Failed admin login attempt")
        return {"message": "Invalid password"}, 401

    access_token = create_access_token(identity="admin", additional_claims={"role": ADMIN_ROLE})
    return {
        "message": "Login successful",
        "access_token": access_token,
        "token_type": "bearer",
    }, 200


@auth_bp.post("/logout")
@admin_required
@swag_from({
    "tags": ["Auth"],
    "security": [{"BearerAuth": []}],
    "summary": "Logout (revoke the admin access token)",
    "responses": {
        200: {"description": "Logged out"},
        401: {"description": "Unauthorized"},
        422: {"description": "Invalid token"},
    },
})
def logout():
    jti = (get_jwt() or {}).get("jti")
    if not jti:
        return {"message": "Invalid token"}, 400

    try:
        RevokedToken.revoke(jti)
        db.session.commit()
        return {"message": "Logged out successfully"}, 200

    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("DB error during logout")
        return {"message": "Logout failed"}, 500
