from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

class CandidateWriteSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=3, max=200, error="Name must be at least 3 characters"))
    class_name = fields.Str(required=True, data_key="className", validate=validate.Length(min=1, max=100, error="Class is required"))
    number = fields.Int(required=True, validate=validate.Range(min=1, error="Candidate number must be at least 1"))
    vision = fields.Str(required=True, validate=validate.Length(min=10, error="Vision must be at least 10 characters"))
    mission = fields.Str(required=True, validate=validate.Length(min=10, error="Mission must be at least 10 characters"))

    @pre_load
    def strip_strings(self, data, **kwargs):
        # Form posts arrive as a MultiDict; normalise to a plain dict
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}

class CandidateReadSchema(Schema):
    id = fields.UUID()
    number = fields.Int()
    name = fields.Str()
    class_name = fields.Str(data_key="className")
    vision = fields.Str()
    mission = fields.Str()
    photo_url = fields.Str(data_key="photoUrl", allow_none=True)
    votes = fields.Int()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

class CandidateResultSchema(Schema):
    candidate_id = fields.UUID(required=True)
    number = fields.Int(required=True)
    name = fields.Str(required=True)
    votes = fields.Int(required=True)
    percentage = fields.Float(required=True)

class ResultsSchema(Schema):
    total_votes = fields.Int(required=True)
    results = fields.List(fields.Nested(CandidateResultSchema), required=True)
