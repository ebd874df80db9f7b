from flask import Blueprint, current_app, request
from flasgger import swag_from

from ...errors import VotingError
from ...schemas.settings import VotingStatusSchema
from ...schemas.vote import VoteSubmitSchema, VoteStatusSchema, VoteReceiptSchema
from ...services import settings_store, voter_registry
from ...services.voting import cast_vote
from ...utils.validation import load_or_abort

voting_bp = Blueprint("voting", __name__)

vote_submit_schema = VoteSubmitSchema()
vote_status_schema = VoteStatusSchema()
vote_receipt_schema = VoteReceiptSchema()
voting_status_schema = VotingStatusSchema()


@voting_bp.get("/status")
@swag_from({
    "tags": ["Voting"],
    "summary": "Voting session state",
    "description": (
        "session_id lets clients cache an 'already voted' hint per session. "
        "The hint is never used for authorization."
    ),
    "responses": {200: {"description": "OK"}, 503: {"description": "Storage unavailable"}},
})
def voting_status():
    return voting_status_schema.dump({
        "voting_open": settings_store.get_voting_status(),
        "show_results": settings_store.get_show_results_status(),
        "session_id": settings_store.get_voting_session_id(),
    }), 200


@voting_bp.post("/vote")
@swag_from({
    "tags": ["Voting"],
    "summary": "Cast a vote",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "candidate_id": {"type": "string", "example": "uuid"},
                "voter_identifier": {"type": "string", "example": "NISN12345"},
            },
            "required": ["candidate_id", "voter_identifier"],
        },
    }],
    "responses": {
        201: {"description": "Vote recorded"},
        400: {"description": "Invalid voter identifier"},
        403: {"description": "Voting closed / voter not registered"},
        404: {"description": "Candidate not found"},
        409: {"description": "Already voted (details.voted_candidate_id)"},
        503: {"description": "Storage unavailable, safe to retry"},
    },
})
def submit_vote():
    body = request.get_json(silent=True)
    payload = load_or_abort(vote_submit_schema, body if body is not None else {})

    try:
        receipt = cast_vote(payload.get("candidate_id"), payload.get("voter_identifier"))
    except VotingError as e:
        current_app.logger.info("Vote rejected: %s", e.code)
        raise

    return vote_receipt_schema.dump({
        "message": "Vote recorded",
        "candidate_id": receipt.candidate_id,
        "voter_identifier": receipt.voter_identifier,
        "session_id": receipt.session_id,
        "voted_at": receipt.voted_at,
    }), 201


@voting_bp.get("/voters/<string:identifier>/status")
@swag_from({
    "tags": ["Voting"],
    "summary": "Check whether a voter identifier has already voted",
    "responses": {200: {"description": "OK"}, 503: {"description": "Storage unavailable"}},
})
def voter_status(identifier):
    return vote_status_schema.dump(voter_registry.get_voter_status(identifier)), 200
