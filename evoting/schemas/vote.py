from marshmallow import EXCLUDE, Schema, fields, pre_load

class VoteSubmitSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Presence, type and validity are decided by the casting protocol, in order
    candidate_id = fields.Raw(required=False, allow_none=True)
    voter_identifier = fields.Raw(required=False, allow_none=True)

    @pre_load
    def coerce_body(self, data, **kwargs):
        return data if isinstance(data, dict) else {}

class VoteStatusSchema(Schema):
    has_voted = fields.Bool(required=True)
    registered = fields.Bool(required=True)
    voted_candidate_id = fields.UUID(allow_none=True)

class VoteReceiptSchema(Schema):
    message = fields.Str(required=True)
    candidate_id = fields.UUID()
    voter_identifier = fields.Str()
    session_id = fields.Str()
    voted_at = fields.DateTime()
