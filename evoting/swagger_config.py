def swagger_template(app=None):
    title = "E-Voting API"
    version = "1.0.0"

    if app:
        title = app.config.get("SWAGGER_TITLE", title)
        version = app.config.get("SWAGGER_VERSION", version)

    return {
        "swagger": "2.0",
        "info": {
            "title": title,
            "version": version,
            "description": "One vote per voter identifier per session. Admin endpoints need a bearer token from /api/auth/login.",
        },
        "securityDefinitions": {
            "BearerAuth": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT Authorization header: Bearer <token>"
            }
        },
        "definitions": {
            "ErrorResponse": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean", "example": False},
                    "error": {
                        "type": "object",
                        "properties": {
                            "code": {"type": "string", "example": "ALREADY_VOTED"},
                            "message": {"type": "string", "example": "This voter has already cast a vote"},
                            "details": {"type": "object", "example": {"voted_candidate_id": "uuid"}}
                        }
                    },
                    "request_id": {"type": "string"}
                }
            }
        }
    }
