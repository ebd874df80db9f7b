from marshmallow import Schema, fields, validate

class VoterTokensImportSchema(Schema):
    # Newline separated, e.g. one student id per line
    tokens = fields.Str(required=True, validate=validate.Length(min=1, error="Token list must not be empty"))

class VoterSchema(Schema):
    id = fields.UUID()
    identifier = fields.Str()
    has_voted = fields.Bool()
    voted_at = fields.DateTime(allow_none=True)
    voted_candidate_id = fields.UUID(allow_none=True)
    session_id = fields.Str(allow_none=True)
    created_at = fields.DateTime()
