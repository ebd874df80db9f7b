from marshmallow import Schema, fields

class ToggleSchema(Schema):
    enabled = fields.Bool(required=True)

class VotingStatusSchema(Schema):
    voting_open = fields.Bool(required=True)
    show_results = fields.Bool(required=True)
    session_id = fields.Str(required=True)
