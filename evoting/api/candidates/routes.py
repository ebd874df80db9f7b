from flask import Blueprint
from flasgger import swag_from

from ...schemas.candidate import CandidateReadSchema
from ...services import candidate_tally

candidates_bp = Blueprint("candidates", __name__)

candidate_read_many_schema = CandidateReadSchema(many=True)


@candidates_bp.get("/")
@swag_from({
    "tags": ["Candidates"],
    "summary": "List candidates in ballot order",
    "responses": {200: {"description": "OK"}, 503: {"description": "Storage unavailable"}},
})
def list_candidates():
    candidates = candidate_tally.list_candidates()
    return {"candidates": candidate_read_many_schema.dump(candidates)}, 200
