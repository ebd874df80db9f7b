from flask import abort, request
from marshmallow import ValidationError


def load_or_abort(schema, payload=None):
    """
    Deserialize a request payload (JSON body by default) or abort with a
    structured 400 before anything is written.
    """
    if payload is None:
        payload = request.get_json(silent=True) or {}
    try:
        return schema.load(payload)
    except ValidationError as err:
        abort(
            400,
            description={
                "code": "VALIDATION_ERROR",
                "message": "Validation error",
                "errors": err.messages,
            },
        )
