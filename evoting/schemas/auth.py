from marshmallow import Schema, fields, validate

class AdminLoginSchema(Schema):
    """Schema for the shared admin password gate"""
    password = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=256),
    )
