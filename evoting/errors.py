from flask import jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from .middleware.request_id import get_request_id


class VotingError(Exception):
    """Base for domain failures reported to the caller with a stable code."""

    code = "VOTING_ERROR"
    message = "Request could not be processed"
    status = 400

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details


class VotingClosed(VotingError):
    code = "VOTING_CLOSED"
    message = "The voting session is currently closed"
    status = 403


class InvalidCandidate(VotingError):
    code = "INVALID_CANDIDATE"
    message = "Candidate does not exist"
    status = 404


class InvalidVoter(VotingError):
    code = "INVALID_VOTER"
    message = "Voter identifier must not be empty"
    status = 400


class VoterNotRegistered(VotingError):
    code = "VOTER_NOT_REGISTERED"
    message = "Voter token is not registered. Please contact the election committee."
    status = 403


class AlreadyVoted(VotingError):
    code = "ALREADY_VOTED"
    message = "This voter has already cast a vote"
    status = 409

    def __init__(self, voted_candidate_id=None):
        self.voted_candidate_id = str(voted_candidate_id) if voted_candidate_id else None
        super().__init__(details={"voted_candidate_id": self.voted_candidate_id})


class DuplicateCandidateNumber(VotingError):
    code = "DUPLICATE_CANDIDATE_NUMBER"
    status = 409

    def __init__(self, number: int):
        self.number = number
        super().__init__(f"Candidate number {number} is already in use", details={"number": number})


class CandidateNotFound(VotingError):
    code = "CANDIDATE_NOT_FOUND"
    message = "Candidate not found"
    status = 404


class InvalidPhoto(VotingError):
    code = "INVALID_PHOTO"
    message = "Candidate photo is invalid"
    status = 400


class ResultsHidden(VotingError):
    code = "RESULTS_HIDDEN"
    message = "Results are not available yet"
    status = 403


class StorageUnavailable(VotingError):
    code = "STORAGE_UNAVAILABLE"
    message = "Storage is temporarily unavailable, please retry"
    status = 503


def _payload(code: str, message: str, details=None, status=400):
    return (
        jsonify({
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details or None,
            },
            "request_id": get_request_id(),
        }),
        status,
    )


def register_error_handlers(app):
    @app.errorhandler(VotingError)
    def handle_voting_error(e: VotingError):
        return _payload(code=e.code, message=e.message, details=e.details, status=e.status)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return _payload("VALIDATION_ERROR", "Validation error", details=e.messages, status=400)

    # Generic HTTP errors (404, 403, 401, etc.)
    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        desc = e.description

        # If we pass structured error info via abort(description=dict)
        if isinstance(desc, dict):
            code = desc.get("code") or e.name.replace(" ", "_").upper()
            message = desc.get("message") or e.name
            details = desc.get("errors") or desc.get("details")
            return _payload(code=code, message=message, details=details, status=e.code or 400)

        return _payload(
            code=e.name.replace(" ", "_").upper(),
            message=desc or e.name,
            details=None,
            status=e.code or 400
        )

    @app.errorhandler(404)
    def handle_404(_):
        return _payload("NOT_FOUND", "Resource not found", status=404)

    @app.errorhandler(500)
    def handle_500(_):
        # Don't leak internals
        return _payload("INTERNAL_SERVER_ERROR", "An unexpected error occurred", status=500)
